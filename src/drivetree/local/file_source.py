"""Local file reading for uploads."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable

from drivetree.errors import InvalidArgumentError
from drivetree.util.mime import guess_mime_type


@dataclass(frozen=True, slots=True)
class LocalFile:
    """Bytes and naming information for one file to upload."""

    name: str
    content: bytes
    mime_type: str


FileReader = Callable[[str], LocalFile]


def read_local_file(local_path: str) -> LocalFile:
    """
    Read a local file for upload.

    Accepts plain paths and file:// URLs.

    Raises:
        InvalidArgumentError: path is empty, missing or not a regular file.
    """
    if not local_path or not isinstance(local_path, str):
        raise InvalidArgumentError("local_path must be a non-empty string")

    path = local_path[len("file://"):] if local_path.startswith("file://") else local_path
    if not os.path.isfile(path):
        raise InvalidArgumentError(
            "local_path is not a readable file",
            details={"local_path": local_path},
        )

    try:
        with open(path, "rb") as f:
            content = f.read()
    except OSError as exc:
        raise InvalidArgumentError(
            "Failed to read local file",
            details={"local_path": local_path},
            cause=exc,
        ) from exc

    name = os.path.basename(path)
    return LocalFile(name=name, content=content, mime_type=guess_mime_type(name))
