"""Engine configuration loaded from code or environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from drivetree.auth.auth_info import AuthInfo
from drivetree.auth.oauth_client import DEFAULT_SCOPES, TOKEN_URI
from drivetree.remote.endpoints import API_BASE_URL, UPLOAD_URL

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class SyncConfig:
    """
    SyncEngine configuration.

    auth_info is required. Behavior switches default to what the plain
    listing flow needs: one root listing, no recursion, orphans dropped.
    """

    auth_info: AuthInfo

    scopes: tuple[str, ...] = DEFAULT_SCOPES
    api_base_url: str = API_BASE_URL
    upload_url: str = UPLOAD_URL
    token_url: str = TOKEN_URI

    recursive: bool = False
    defer_orphans: bool = False
    max_workers: int = 4
    request_timeout_sec: float = 30.0

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError("SyncConfig.max_workers must be >= 1")
        if self.request_timeout_sec <= 0:
            raise ValueError("SyncConfig.request_timeout_sec must be > 0")
        if not self.scopes:
            raise ValueError("SyncConfig.scopes must not be empty")


def load_config(environ: Optional[Mapping[str, str]] = None) -> SyncConfig:
    """
    Construct a SyncConfig from environment variables.

    Required:
        DRIVETREE_CLIENT_ID, DRIVETREE_CLIENT_SECRET, DRIVETREE_REDIRECT_URI

    Optional (with defaults):
        DRIVETREE_SCOPES: space-separated scopes (default: full Drive scope).
        DRIVETREE_RECURSIVE: list folders as they arrive (default: false).
        DRIVETREE_DEFER_ORPHANS: buffer items whose parent is unknown (default: false).
        DRIVETREE_MAX_WORKERS: concurrent requests (default: 4).
        DRIVETREE_REQUEST_TIMEOUT: per-request timeout in seconds (default: 30).

    Raises:
        KeyError: a required variable is missing.
        ValueError: a value is invalid.
    """
    env = os.environ if environ is None else environ

    auth_info = AuthInfo(
        kind="oauth",
        data={
            "client_id": env["DRIVETREE_CLIENT_ID"],
            "client_secret": env["DRIVETREE_CLIENT_SECRET"],
            "redirect_uri": env["DRIVETREE_REDIRECT_URI"],
        },
    )

    scopes_raw = env.get("DRIVETREE_SCOPES", "")
    scopes = tuple(scopes_raw.split()) if scopes_raw.strip() else DEFAULT_SCOPES

    return SyncConfig(
        auth_info=auth_info,
        scopes=scopes,
        recursive=_flag(env.get("DRIVETREE_RECURSIVE")),
        defer_orphans=_flag(env.get("DRIVETREE_DEFER_ORPHANS")),
        max_workers=int(env.get("DRIVETREE_MAX_WORKERS", "4")),
        request_timeout_sec=float(env.get("DRIVETREE_REQUEST_TIMEOUT", "30")),
    )


def _flag(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in _TRUE_VALUES
