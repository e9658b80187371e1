"""Public model exports for drivetree."""

from __future__ import annotations

from .results import Diagnostic, DiagnosticKind
from .token_grant import TokenGrant
from .tree_node import TreeNode

__all__ = [
    "TreeNode",
    "TokenGrant",
    "Diagnostic",
    "DiagnosticKind",
]
