"""drivetree public API."""

from __future__ import annotations

from drivetree.auth import AuthInfo, AuthState, OAuthClient, TokenEvent, TokenState
from drivetree.config import SyncConfig, load_config
from drivetree.errors import (
    ApiError,
    AuthError,
    DecodeError,
    DriveTreeError,
    DuplicateIdError,
    HttpError,
    InvalidArgumentError,
    InvalidStateError,
    InvalidTransitionError,
    NetworkError,
    TreeError,
    UnknownNodeError,
    UnknownParentError,
)
from drivetree.models import Diagnostic, DiagnosticKind, TokenGrant, TreeNode
from drivetree.remote import DriveRemoteClient, MultipartPart, RawResponse, RemoteClient
from drivetree.sync import ChangeNotifier, Intent, SyncEngine
from drivetree.tree import ROOT_ID, Address, FileTree

__all__ = [
    # High-level
    "SyncEngine",
    "SyncConfig",
    "load_config",
    # Tree
    "FileTree",
    "TreeNode",
    "Address",
    "ROOT_ID",
    "ChangeNotifier",
    # Auth
    "AuthInfo",
    "AuthState",
    "OAuthClient",
    "TokenEvent",
    "TokenState",
    "TokenGrant",
    # Remote
    "RemoteClient",
    "DriveRemoteClient",
    "RawResponse",
    "MultipartPart",
    "Intent",
    # Diagnostics / Errors
    "Diagnostic",
    "DiagnosticKind",
    "DriveTreeError",
    "InvalidStateError",
    "InvalidArgumentError",
    "InvalidTransitionError",
    "DecodeError",
    "TreeError",
    "UnknownParentError",
    "DuplicateIdError",
    "UnknownNodeError",
    "HttpError",
    "AuthError",
    "NetworkError",
    "ApiError",
]
