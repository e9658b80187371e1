"""View addressing: (parent_id, position) pairs instead of node handles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

ROOT_ID: str = "root"


@dataclass(frozen=True, slots=True)
class Address:
    """
    Location of a node for view binding.

    `parent_id` is None only for the root node itself (Address(None, 0)).
    Addresses are recomputed on demand; a sibling inserted before a node
    shifts its position, anything inserted elsewhere does not.
    """

    parent_id: Optional[str]
    position: int

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


ROOT_ADDRESS = Address(parent_id=None, position=0)
