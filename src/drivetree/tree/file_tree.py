"""FileTree: id-keyed ownership of mirrored nodes and their ordering."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterator, Optional

from drivetree.errors import (
    DuplicateIdError,
    InvalidArgumentError,
    UnknownNodeError,
    UnknownParentError,
)
from drivetree.models import TreeNode
from drivetree.util.mime import FOLDER_MIME

from .addressing import ROOT_ADDRESS, ROOT_ID, Address


def _make_root() -> TreeNode:
    return TreeNode(id=ROOT_ID, title="", mime_type=FOLDER_MIME, parent_id=None)


@dataclass(slots=True)
class FileTree:
    """
    In-memory mirror of the remote tree.

    All nodes live in `nodes_by_id`; nodes reference each other by id only.
    The synthetic root ("root") always exists. Two trees compare equal when
    their node maps (including child order) are equal.
    """

    nodes_by_id: dict[str, TreeNode] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if ROOT_ID not in self.nodes_by_id:
            self.nodes_by_id[ROOT_ID] = _make_root()

    def __len__(self) -> int:
        return len(self.nodes_by_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes_by_id

    @property
    def root(self) -> TreeNode:
        return self.nodes_by_id[ROOT_ID]

    def clone(self) -> FileTree:
        """Deep-clone this tree (nodes and child lists)."""
        new_nodes: dict[str, TreeNode] = {}
        for node_id, node in self.nodes_by_id.items():
            new_nodes[node_id] = TreeNode(
                id=node.id,
                title=node.title,
                mime_type=node.mime_type,
                alternate_link=node.alternate_link,
                parent_id=node.parent_id,
                children=list(node.children),
            )
        return FileTree(nodes_by_id=new_nodes)

    # ----------------------------
    # Mutation
    # ----------------------------
    def insert(
        self,
        node: TreeNode,
        parent_id: str,
        *,
        position: Optional[int] = None,
    ) -> int:
        """
        Insert `node` under `parent_id` and return its sibling position.

        Args:
            node: A fresh node (no children yet).
            parent_id: Id of an existing node.
            position: Where to place the node among its siblings; appends when
                None.

        Raises:
            UnknownParentError: parent_id is not in the tree.
            DuplicateIdError: node.id is already in the tree.
            InvalidArgumentError: position out of range or node has children.
        """
        parent = self.nodes_by_id.get(parent_id)
        if parent is None:
            raise UnknownParentError(
                f"Parent does not exist: {parent_id}",
                details={"node_id": node.id, "parent_id": parent_id},
            )
        if node.id in self.nodes_by_id:
            raise DuplicateIdError(
                f"Node already exists: {node.id}",
                details={"node_id": node.id, "parent_id": parent_id},
            )
        if node.children:
            raise InvalidArgumentError(
                f"Inserted node must not list children: {node.id}",
                details={"node_id": node.id},
            )

        count = len(parent.children)
        if position is None:
            position = count
        elif not 0 <= position <= count:
            raise InvalidArgumentError(
                f"Position {position} out of range 0..{count}",
                details={"node_id": node.id, "parent_id": parent_id},
            )

        node.parent_id = parent_id
        self.nodes_by_id[node.id] = node
        parent.children.insert(position, node.id)
        return position

    # ----------------------------
    # Queries
    # ----------------------------
    def lookup(self, node_id: str) -> Optional[TreeNode]:
        return self.nodes_by_id.get(node_id)

    def child_count(self, node_id: str) -> int:
        node = self.nodes_by_id.get(node_id)
        if node is None:
            raise UnknownNodeError(
                f"Node does not exist: {node_id}",
                details={"node_id": node_id},
            )
        return len(node.children)

    def child_at(self, node_id: Optional[str], position: int) -> Optional[TreeNode]:
        if node_id is None:
            return None
        node = self.nodes_by_id.get(node_id)
        if node is None or not 0 <= position < len(node.children):
            return None
        return self.nodes_by_id.get(node.children[position])

    def parent_of(self, node_id: str) -> Optional[str]:
        node = self.nodes_by_id.get(node_id)
        if node is None:
            return None
        return node.parent_id

    def position_of(self, child_id: str) -> Optional[int]:
        parent_id = self.parent_of(child_id)
        if parent_id is None:
            return None
        parent = self.nodes_by_id.get(parent_id)
        if parent is None:
            return None
        try:
            return parent.children.index(child_id)
        except ValueError:
            return None

    def children_of(self, node_id: str) -> list[TreeNode]:
        node = self.nodes_by_id.get(node_id)
        if node is None:
            return []
        return [self.nodes_by_id[cid] for cid in node.children]

    # ----------------------------
    # Addressing
    # ----------------------------
    def address_of(self, node_id: str) -> Optional[Address]:
        """Return (parent_id, position) for node_id; Address(None, 0) for root."""
        if node_id == ROOT_ID:
            return ROOT_ADDRESS
        parent_id = self.parent_of(node_id)
        position = self.position_of(node_id)
        if parent_id is None or position is None:
            return None
        return Address(parent_id=parent_id, position=position)

    def parent_address(self, node_id: str) -> Optional[Address]:
        """
        Return the address of node_id's parent.

        Two hops: the parent id, then the parent's own parent and position.
        Nothing is cached because positions shift on sibling insertion.
        """
        parent_id = self.parent_of(node_id)
        if parent_id is None:
            return None
        return self.address_of(parent_id)

    def resolve(self, address: Address) -> Optional[TreeNode]:
        if address.is_root:
            return self.root if address.position == 0 else None
        return self.child_at(address.parent_id, address.position)

    # ----------------------------
    # Traversal
    # ----------------------------
    def ancestors(self, node_id: str) -> list[str]:
        """Return the parent chain of node_id, nearest first, ending at root."""
        chain: list[str] = []
        seen: set[str] = {node_id}
        cur = self.parent_of(node_id)
        while cur is not None:
            if cur in seen:
                # insert() never creates cycles.
                break
            seen.add(cur)
            chain.append(cur)
            cur = self.parent_of(cur)
        return chain

    def iter_subtree(self, node_id: str = ROOT_ID) -> Iterator[TreeNode]:
        """Breadth-first traversal starting at (and including) node_id."""
        if node_id not in self.nodes_by_id:
            return
        q: deque[str] = deque([node_id])
        visited: set[str] = set()
        while q:
            cur = q.popleft()
            if cur in visited:
                continue
            visited.add(cur)
            node = self.nodes_by_id[cur]
            yield node
            for child_id in node.children:
                if child_id not in visited:
                    q.append(child_id)
