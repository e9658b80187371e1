"""Public tree exports for drivetree."""

from __future__ import annotations

from .addressing import ROOT_ADDRESS, ROOT_ID, Address
from .file_tree import FileTree
from .pending import PendingInserts

__all__ = [
    "ROOT_ID",
    "ROOT_ADDRESS",
    "Address",
    "FileTree",
    "PendingInserts",
]
