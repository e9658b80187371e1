"""Public remote exports for drivetree."""

from __future__ import annotations

from .client import MultipartPart, RawResponse, RemoteClient
from .drive_client import DriveRemoteClient, encode_multipart_related, metadata_part

__all__ = [
    "RemoteClient",
    "RawResponse",
    "MultipartPart",
    "DriveRemoteClient",
    "encode_multipart_related",
    "metadata_part",
]
