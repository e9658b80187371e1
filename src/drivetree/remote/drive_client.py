"""requests-based RemoteClient for the Drive v2 REST API."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

import requests

from drivetree.auth.auth_info import AuthInfo
from drivetree.auth.oauth_client import (
    DEFAULT_SCOPES,
    TOKEN_URI,
    OAuthClient,
    refresh_access_token,
)
from drivetree.errors import ApiError, NetworkError
from drivetree.models import TokenGrant
from drivetree.util.ids import new_boundary

from .client import MultipartPart, RawResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class DriveRemoteClient:
    """
    Blocking HTTP transport for SyncEngine.

    Notes:
        - 429 and 5xx answers and connection failures are retried with
          exponential backoff; the final answer is returned as RawResponse.
        - Other statuses (including 401) are returned as-is for the engine
          to route.
    """

    def __init__(
        self,
        *,
        scopes: Sequence[str] = DEFAULT_SCOPES,
        token_uri: str = TOKEN_URI,
        timeout_sec: float = 30.0,
        session: Optional[requests.Session] = None,
        max_retries: int = 3,
    ) -> None:
        self._scopes = list(scopes)
        self._token_uri = token_uri
        self._timeout_sec = timeout_sec
        self._session = session or requests.Session()
        self._retry_policy = _RetryPolicy(max_retries=max_retries)

    # ----------------------------
    # RemoteClient
    # ----------------------------
    def exchange_token(
        self,
        code: str,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
    ) -> TokenGrant:
        auth_info = AuthInfo(
            kind="oauth",
            data={
                "client_id": client_id,
                "client_secret": client_secret,
                "redirect_uri": redirect_uri,
            },
        )
        client = OAuthClient(auth_info, scopes=self._scopes, token_uri=self._token_uri)
        return client.exchange_code(code)

    def refresh_token(
        self,
        refresh_token: str,
        client_id: str,
        client_secret: str,
    ) -> TokenGrant:
        return refresh_access_token(
            refresh_token,
            client_id=client_id,
            client_secret=client_secret,
            scopes=self._scopes,
            token_uri=self._token_uri,
        )

    def get(self, url: str, headers: Mapping[str, str]) -> RawResponse:
        logger.debug("GET %s", url)
        return self._execute(
            lambda: self._session.get(url, headers=dict(headers), timeout=self._timeout_sec)
        )

    def post_multipart(
        self,
        url: str,
        headers: Mapping[str, str],
        parts: Sequence[MultipartPart],
    ) -> RawResponse:
        body, content_type = encode_multipart_related(parts)
        all_headers = dict(headers)
        all_headers["Content-Type"] = content_type
        logger.debug("POST %s (%d parts, %d bytes)", url, len(parts), len(body))
        return self._execute(
            lambda: self._session.post(
                url,
                headers=all_headers,
                data=body,
                timeout=self._timeout_sec,
            )
        )

    # ----------------------------
    # Internals
    # ----------------------------
    def _execute(self, func: Callable[[], requests.Response]) -> RawResponse:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            last_attempt = attempt >= self._retry_policy.max_retries
            try:
                resp = func()
            except requests.RequestException as exc:
                if last_attempt:
                    raise NetworkError("Network error", cause=exc) from exc
                logger.warning("Request failed (%s), retrying in %.1fs", exc, delay)
            else:
                raw = _to_raw_response(resp)
                if not _should_retry(raw.status_code) or last_attempt:
                    return raw
                logger.warning(
                    "HTTP %d, retrying in %.1fs", raw.status_code, delay
                )
            time.sleep(delay)
            delay *= 2

        raise ApiError("Unexpected retry loop termination")


def _should_retry(status_code: int) -> bool:
    return status_code == 429 or 500 <= status_code <= 599


def _to_raw_response(resp: requests.Response) -> RawResponse:
    return RawResponse(
        status_code=resp.status_code,
        body=resp.content or b"",
    )


def encode_multipart_related(
    parts: Sequence[MultipartPart],
    *,
    boundary: Optional[str] = None,
) -> tuple[bytes, str]:
    """
    Encode parts as a multipart/related body (Drive's multipart upload format).

    Returns:
        (body, content_type header value)
    """
    boundary = boundary or new_boundary()
    chunks: list[bytes] = []
    for part in parts:
        chunks.append(f"--{boundary}\r\n".encode("ascii"))
        chunks.append(f"Content-Type: {part.content_type}\r\n\r\n".encode("ascii"))
        chunks.append(part.body)
        chunks.append(b"\r\n")
    chunks.append(f"--{boundary}--\r\n".encode("ascii"))
    return b"".join(chunks), f"multipart/related; boundary={boundary}"


def metadata_part(metadata: dict[str, Any]) -> MultipartPart:
    """JSON metadata part for a multipart upload."""
    return MultipartPart(
        content_type="application/json; charset=UTF-8",
        body=json.dumps(metadata).encode("utf-8"),
    )
