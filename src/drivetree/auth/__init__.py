"""Public auth exports for drivetree."""

from __future__ import annotations

from .auth_info import AuthInfo
from .oauth_client import OAuthClient
from .token_state import AuthState, TokenEvent, TokenEventKind, TokenState

__all__ = [
    "AuthInfo",
    "OAuthClient",
    "AuthState",
    "TokenEvent",
    "TokenEventKind",
    "TokenState",
]
