"""Tokens returned by the OAuth token endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from drivetree.errors import DecodeError


@dataclass(frozen=True, slots=True)
class TokenGrant:
    """Access/refresh token pair. refresh_token is empty when absent."""

    access_token: str
    refresh_token: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> TokenGrant:
        """
        Build a grant from a token endpoint JSON payload.

        Raises:
            DecodeError: access_token is missing or not a string.
        """
        access = payload.get("access_token")
        refresh = payload.get("refresh_token")
        if not isinstance(access, str) or not access:
            raise DecodeError("Token response has no access_token")
        return cls(
            access_token=access,
            refresh_token=refresh if isinstance(refresh, str) else "",
        )

    def __repr__(self) -> str:
        return "TokenGrant(access_token=***, refresh_token=***)"
