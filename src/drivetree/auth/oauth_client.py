"""OAuth client utilities for drivetree."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from drivetree.errors import (
    AuthError,
    HttpError,
    HttpErrorInfo,
    InvalidArgumentError,
    map_http_error,
)
from drivetree.models import TokenGrant

from .auth_info import AuthInfo

logger = logging.getLogger(__name__)

AUTH_URI: str = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI: str = "https://oauth2.googleapis.com/token"
DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive",)


class OAuthClient:
    """Build the consent URL and exchange authorization codes for tokens."""

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        scopes: Sequence[str] = DEFAULT_SCOPES,
        token_uri: str = TOKEN_URI,
    ) -> None:
        if auth_info.kind != "oauth":
            raise InvalidArgumentError("OAuthClient requires AuthInfo(kind='oauth')")
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise InvalidArgumentError("scopes must be a non-empty sequence of strings")
        self._auth_info = auth_info
        self._scopes = list(scopes)
        self._token_uri = token_uri

    def authorization_url(self) -> str:
        """
        Return the Google consent URL for this client.

        The user is sent there by the (external) browser flow; the code that
        comes back is passed to exchange_code().
        """
        flow = self._build_flow()
        url, _state = flow.authorization_url(access_type="offline", prompt="consent")
        return url

    def exchange_code(self, code: str) -> TokenGrant:
        """
        Exchange an authorization code for tokens.

        Raises:
            HttpError: AuthError/BadRequestError/... when the token endpoint
                rejects the code.
        """
        if not isinstance(code, str) or not code.strip():
            raise InvalidArgumentError("authorization code must be a non-empty string")

        flow = self._build_flow()
        try:
            token = flow.fetch_token(code=code)
        except Exception as exc:
            raise _map_exception(exc, "Token exchange failed") from exc

        logger.info("Authorization code exchanged for tokens")
        return TokenGrant.from_payload(dict(token))

    def _build_flow(self) -> Any:
        try:
            from google_auth_oauthlib.flow import Flow
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "Google auth libraries are not available",
                details={"hint": "Install google-auth-oauthlib"},
                cause=exc,
            ) from exc

        client_config = self._auth_info.to_client_config(
            auth_uri=AUTH_URI,
            token_uri=self._token_uri,
        )
        # Each call builds a fresh flow, so no PKCE verifier can be carried
        # from the consent URL to the exchange.
        return Flow.from_client_config(
            client_config,
            scopes=self._scopes,
            redirect_uri=self._auth_info.redirect_uri,
            autogenerate_code_verifier=False,
        )


def refresh_access_token(
    refresh_token: str,
    *,
    client_id: str,
    client_secret: str,
    scopes: Sequence[str] = DEFAULT_SCOPES,
    token_uri: str = TOKEN_URI,
) -> TokenGrant:
    """Refresh with google-auth credentials; no redirect URI is involved."""
    if not refresh_token:
        raise InvalidArgumentError("refresh token must be a non-empty string")

    try:
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials
    except Exception as exc:  # pragma: no cover
        raise AuthError(
            "Google auth libraries are not available",
            details={"hint": "Install google-auth"},
            cause=exc,
        ) from exc

    creds = Credentials(
        token=None,
        refresh_token=refresh_token,
        token_uri=token_uri,
        client_id=client_id,
        client_secret=client_secret,
        scopes=list(scopes),
    )
    try:
        creds.refresh(Request())
    except Exception as exc:
        raise _map_exception(exc, "Failed to refresh OAuth credentials") from exc

    logger.info("Access token refreshed")
    rotated = creds.refresh_token if creds.refresh_token != refresh_token else ""
    return TokenGrant(access_token=creds.token or "", refresh_token=rotated or "")


def _map_exception(exc: Exception, message: str) -> HttpError:
    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int) and status_code:
        reason = getattr(exc, "error", None)
        info = HttpErrorInfo(
            status_code=status_code,
            reason=reason if isinstance(reason, str) else None,
            message=message,
        )
        return map_http_error(info, cause=exc)
    return AuthError(message, cause=exc)
