from .ids import new_boundary, new_request_id, new_uuid
from .mime import DEFAULT_CONTENT_MIME, FOLDER_MIME, guess_mime_type, is_folder

__all__ = [
    "new_uuid",
    "new_request_id",
    "new_boundary",
    "FOLDER_MIME",
    "DEFAULT_CONTENT_MIME",
    "is_folder",
    "guess_mime_type",
]
