"""Data model for mirrored Drive entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from drivetree.util.mime import is_folder


@dataclass(slots=True)
class TreeNode:
    """
    One remote file-system entry (file or folder).

    Notes:
        - `id` is assigned by Drive and never changes.
        - `parent_id` is None only for the synthetic root node.
        - `children` holds child ids in insertion (listing) order; FileTree
          is the only writer.
    """

    id: str
    title: str
    mime_type: str
    alternate_link: Optional[str] = None
    parent_id: Optional[str] = None
    children: list[str] = field(default_factory=list)

    @property
    def is_folder(self) -> bool:
        return is_folder(self.mime_type)
