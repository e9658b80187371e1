"""Buffer for nodes whose parent has not been mirrored yet."""

from __future__ import annotations

from dataclasses import dataclass, field

from drivetree.models import TreeNode


@dataclass(slots=True)
class PendingInserts:
    """
    Nodes waiting for their parent, keyed by the missing parent id.

    Arrival order is kept per parent so that replay preserves listing order.
    """

    nodes_by_parent_id: dict[str, list[TreeNode]] = field(default_factory=dict)

    def __len__(self) -> int:
        return sum(len(nodes) for nodes in self.nodes_by_parent_id.values())

    def has(self, node_id: str) -> bool:
        return any(
            node.id == node_id
            for nodes in self.nodes_by_parent_id.values()
            for node in nodes
        )

    def defer(self, node: TreeNode, parent_id: str) -> bool:
        """Buffer node under parent_id. Returns False if node.id is already waiting."""
        if self.has(node.id):
            return False
        self.nodes_by_parent_id.setdefault(parent_id, []).append(node)
        return True

    def release(self, parent_id: str) -> list[TreeNode]:
        """Remove and return every node waiting for parent_id."""
        return self.nodes_by_parent_id.pop(parent_id, [])

    def waiting_parents(self) -> list[str]:
        return list(self.nodes_by_parent_id)
