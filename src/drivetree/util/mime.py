from __future__ import annotations

import mimetypes

FOLDER_MIME: str = "application/vnd.google-apps.folder"

DEFAULT_CONTENT_MIME: str = "application/octet-stream"


def is_folder(mime_type: str) -> bool:
    return mime_type == FOLDER_MIME


def guess_mime_type(filename: str) -> str:
    """
    Guess the content MIME type for an upload from its file name.

    Falls back to application/octet-stream when the extension is unknown.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or DEFAULT_CONTENT_MIME
