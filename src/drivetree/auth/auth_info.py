"""Authentication information for drivetree (OAuth only)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    OAuth client credentials.

    Only kind = "oauth" is supported; data must include:
        - client_id
        - client_secret
        - redirect_uri
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind != "oauth":
            raise ValueError("AuthInfo.kind must be 'oauth'")

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        for key in ("client_id", "client_secret", "redirect_uri"):
            value = self.data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"AuthInfo.data['{key}'] must be a non-empty string")

    @classmethod
    def from_client_secrets_file(
        cls,
        path: str,
        *,
        redirect_uri: Optional[str] = None,
    ) -> AuthInfo:
        """
        Build AuthInfo from a Google client secrets JSON file.

        The file holds an "installed" or "web" section. The first registered
        redirect URI is used unless `redirect_uri` is given.
        """
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)

        section = payload.get("installed") or payload.get("web")
        if not isinstance(section, dict):
            raise ValueError("client secrets file must contain 'installed' or 'web'")

        if redirect_uri is None:
            uris = section.get("redirect_uris") or []
            redirect_uri = uris[0] if uris else ""

        return cls(
            kind="oauth",
            data={
                "client_id": section.get("client_id", ""),
                "client_secret": section.get("client_secret", ""),
                "redirect_uri": redirect_uri,
            },
        )

    @property
    def client_id(self) -> str:
        return str(self.data["client_id"])

    @property
    def client_secret(self) -> str:
        return str(self.data["client_secret"])

    @property
    def redirect_uri(self) -> str:
        return str(self.data["redirect_uri"])

    def to_client_config(self, *, auth_uri: str, token_uri: str) -> dict[str, Any]:
        """Return the client config dict accepted by google_auth_oauthlib."""
        return {
            "web": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uris": [self.redirect_uri],
                "auth_uri": auth_uri,
                "token_uri": token_uri,
            }
        }
