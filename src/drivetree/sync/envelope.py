"""Decoding of Drive listing envelopes (collections and single items)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from drivetree.errors import DecodeError
from drivetree.models import TreeNode
from drivetree.tree.addressing import ROOT_ID

COLLECTION_KINDS: frozenset[str] = frozenset({"collection", "drive#fileList"})
ITEM_KINDS: frozenset[str] = frozenset({"item", "drive#file"})


@dataclass(frozen=True, slots=True)
class ParentRef:
    """Declared parent of an item: either the store's top-level root or an id."""

    id: Optional[str]
    is_root: bool

    def resolve(self) -> str:
        """Local parent id ("root" for the top-level container)."""
        if self.is_root:
            return ROOT_ID
        return self.id or ""


@dataclass(frozen=True, slots=True)
class ItemRecord:
    id: str
    title: str
    mime_type: str
    alternate_link: Optional[str]
    parent: ParentRef

    def to_node(self) -> TreeNode:
        return TreeNode(
            id=self.id,
            title=self.title,
            mime_type=self.mime_type,
            alternate_link=self.alternate_link,
        )


@dataclass(frozen=True, slots=True)
class CollectionRecord:
    """A listing page. Items are kept raw so each one can fail on its own."""

    items: list[dict[str, Any]] = field(default_factory=list)
    next_page_token: Optional[str] = None


Envelope = Union[CollectionRecord, ItemRecord]


def decode_envelope(payload: Any) -> Envelope:
    """
    Classify and decode a parsed JSON envelope.

    Raises:
        DecodeError: payload is not an object, has an unknown kind, or is a
            malformed item/collection.
    """
    if not isinstance(payload, dict):
        raise DecodeError("Envelope must be a JSON object")

    kind = payload.get("kind")
    if kind in COLLECTION_KINDS:
        return decode_collection(payload)
    if kind in ITEM_KINDS:
        return decode_item(payload)
    raise DecodeError(f"Unknown envelope kind: {kind!r}", details={"kind": kind})


def decode_collection(payload: dict[str, Any]) -> CollectionRecord:
    items = payload.get("items", [])
    if items is None:
        items = []
    if not isinstance(items, list):
        raise DecodeError("Collection 'items' must be a list")

    token = payload.get("nextPageToken")
    return CollectionRecord(
        items=list(items),
        next_page_token=token if isinstance(token, str) and token else None,
    )


def decode_item(payload: dict[str, Any]) -> ItemRecord:
    item_id = payload.get("id")
    if not isinstance(item_id, str) or not item_id:
        raise DecodeError("Item has no id")

    mime_type = payload.get("mimeType")
    if not isinstance(mime_type, str) or not mime_type:
        raise DecodeError(f"Item {item_id} has no mimeType", details={"node_id": item_id})

    title = payload.get("title", "")
    link = payload.get("alternateLink")

    return ItemRecord(
        id=item_id,
        title=title if isinstance(title, str) else "",
        mime_type=mime_type,
        alternate_link=link if isinstance(link, str) and link else None,
        parent=_decode_parent(item_id, payload.get("parents")),
    )


def _decode_parent(item_id: str, parents: Any) -> ParentRef:
    # A node keeps exactly one parent; Drive may list several, the first wins.
    if not isinstance(parents, list) or not parents or not isinstance(parents[0], dict):
        raise DecodeError(f"Item {item_id} declares no parent", details={"node_id": item_id})

    first = parents[0]
    parent_id = first.get("id")
    if bool(first.get("isRoot", False)):
        return ParentRef(id=parent_id if isinstance(parent_id, str) else None, is_root=True)

    if not isinstance(parent_id, str) or not parent_id:
        raise DecodeError(
            f"Item {item_id} declares a parent without id",
            details={"node_id": item_id},
        )
    return ParentRef(id=parent_id, is_root=False)
