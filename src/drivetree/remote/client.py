"""RemoteClient contract used by SyncEngine."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from drivetree.errors import HttpErrorInfo
from drivetree.models import TokenGrant


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Status code and undecoded body of a finished HTTP exchange."""

    status_code: int
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code <= 299

    def error_info(self) -> HttpErrorInfo:
        """Extract status, reason and message from a Google JSON error body."""
        reason = None
        message = None
        details: dict[str, Any] = {}
        try:
            payload = json.loads(self.body.decode("utf-8")) if self.body else {}
        except (UnicodeDecodeError, ValueError):
            payload = {}

        err = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

        return HttpErrorInfo(
            status_code=self.status_code,
            reason=reason,
            message=message if isinstance(message, str) else None,
            details=details or None,
        )


@dataclass(frozen=True, slots=True)
class MultipartPart:
    """One part of a multipart/related request body."""

    content_type: str
    body: bytes


@runtime_checkable
class RemoteClient(Protocol):
    """
    Transport collaborator.

    Every method blocks until the exchange finishes. Non-2xx answers to get()
    and post_multipart() come back as RawResponse; only transport failures
    raise (NetworkError). exchange_token()/refresh_token() raise HttpError
    subclasses when the token endpoint refuses.
    """

    def exchange_token(
        self,
        code: str,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
    ) -> TokenGrant: ...

    def refresh_token(
        self,
        refresh_token: str,
        client_id: str,
        client_secret: str,
    ) -> TokenGrant: ...

    def get(self, url: str, headers: Mapping[str, str]) -> RawResponse: ...

    def post_multipart(
        self,
        url: str,
        headers: Mapping[str, str],
        parts: Sequence[MultipartPart],
    ) -> RawResponse: ...
