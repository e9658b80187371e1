"""Local file access for uploads."""

from __future__ import annotations

from .file_source import FileReader, LocalFile, read_local_file

__all__ = ["FileReader", "LocalFile", "read_local_file"]
