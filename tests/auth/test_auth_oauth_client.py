import unittest
from unittest.mock import Mock, patch

from drivetree.auth import AuthInfo, OAuthClient
from drivetree.auth.oauth_client import refresh_access_token
from drivetree.errors import AuthError, BadRequestError, InvalidArgumentError


class _TokenEndpointError(Exception):
    def __init__(self, status_code: int, error: str) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error


def _info() -> AuthInfo:
    return AuthInfo(
        kind="oauth",
        data={
            "client_id": "cid",
            "client_secret": "secret",
            "redirect_uri": "http://localhost:8080",
        },
    )


class TestOAuthClient(unittest.TestCase):
    def test_authorization_url_uses_flow(self) -> None:
        flow = Mock()
        flow.authorization_url.return_value = ("https://consent", "state")
        with patch("google_auth_oauthlib.flow.Flow.from_client_config", return_value=flow) as f:
            url = OAuthClient(_info()).authorization_url()

        self.assertEqual(url, "https://consent")
        config = f.call_args.args[0]
        self.assertEqual(config["web"]["client_id"], "cid")
        self.assertEqual(f.call_args.kwargs["redirect_uri"], "http://localhost:8080")
        self.assertEqual(flow.authorization_url.call_args.kwargs["access_type"], "offline")

    def test_exchange_code_returns_grant(self) -> None:
        flow = Mock()
        flow.fetch_token.return_value = {
            "access_token": "A",
            "refresh_token": "B",
            "token_type": "Bearer",
        }
        with patch("google_auth_oauthlib.flow.Flow.from_client_config", return_value=flow):
            grant = OAuthClient(_info()).exchange_code("the-code")

        flow.fetch_token.assert_called_once_with(code="the-code")
        self.assertEqual(grant.access_token, "A")
        self.assertEqual(grant.refresh_token, "B")

    def test_exchange_code_maps_endpoint_error(self) -> None:
        flow = Mock()
        flow.fetch_token.side_effect = _TokenEndpointError(400, "invalid_grant")
        with patch("google_auth_oauthlib.flow.Flow.from_client_config", return_value=flow):
            with self.assertRaises(BadRequestError) as ctx:
                OAuthClient(_info()).exchange_code("bad")

        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.details["reason"], "invalid_grant")

    def test_exchange_code_unclassified_error_is_auth_error(self) -> None:
        flow = Mock()
        flow.fetch_token.side_effect = RuntimeError("boom")
        with patch("google_auth_oauthlib.flow.Flow.from_client_config", return_value=flow):
            with self.assertRaises(AuthError):
                OAuthClient(_info()).exchange_code("code")

    def test_exchange_code_requires_code(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            OAuthClient(_info()).exchange_code("")

    def test_scopes_validated(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            OAuthClient(_info(), scopes=[])

    def test_refresh_uses_google_credentials(self) -> None:
        creds = Mock()
        creds.token = "A2"
        creds.refresh_token = "B"
        with patch("google.oauth2.credentials.Credentials", return_value=creds) as cls, \
                patch("google.auth.transport.requests.Request") as req:
            grant = refresh_access_token("B", client_id="cid", client_secret="secret")

        creds.refresh.assert_called_once_with(req.return_value)
        self.assertEqual(cls.call_args.kwargs["refresh_token"], "B")
        self.assertEqual(cls.call_args.kwargs["client_id"], "cid")
        self.assertEqual(grant.access_token, "A2")
        # Not rotated.
        self.assertEqual(grant.refresh_token, "")

    def test_refresh_reports_rotated_token(self) -> None:
        creds = Mock()
        creds.token = "A2"
        creds.refresh_token = "B2"
        with patch("google.oauth2.credentials.Credentials", return_value=creds), \
                patch("google.auth.transport.requests.Request"):
            grant = refresh_access_token("B", client_id="cid", client_secret="secret")
        self.assertEqual(grant.refresh_token, "B2")

    def test_refresh_failure_is_auth_error(self) -> None:
        creds = Mock()
        creds.refresh.side_effect = RuntimeError("invalid_grant")
        with patch("google.oauth2.credentials.Credentials", return_value=creds), \
                patch("google.auth.transport.requests.Request"):
            with self.assertRaises(AuthError):
                refresh_access_token("B", client_id="cid", client_secret="secret")

    def test_refresh_requires_token(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            refresh_access_token("", client_id="cid", client_secret="secret")


if __name__ == "__main__":
    unittest.main()
