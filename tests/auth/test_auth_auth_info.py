import json
import tempfile
import unittest
from pathlib import Path

from drivetree.auth import AuthInfo


class TestAuthInfo(unittest.TestCase):
    def _data(self) -> dict:
        return {
            "client_id": "cid",
            "client_secret": "secret",
            "redirect_uri": "http://localhost:8080",
        }

    def test_valid(self) -> None:
        info = AuthInfo(kind="oauth", data=self._data())
        self.assertEqual(info.client_id, "cid")
        self.assertEqual(info.client_secret, "secret")
        self.assertEqual(info.redirect_uri, "http://localhost:8080")

    def test_invalid_kind(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="service_account", data=self._data())

    def test_missing_fields(self) -> None:
        for key in ("client_id", "client_secret", "redirect_uri"):
            data = self._data()
            data[key] = " "
            with self.assertRaises(ValueError):
                AuthInfo(kind="oauth", data=data)

    def test_data_must_be_dict(self) -> None:
        with self.assertRaises(TypeError):
            AuthInfo(kind="oauth", data=[])  # type: ignore[arg-type]

    def test_from_client_secrets_file(self) -> None:
        payload = {
            "installed": {
                "client_id": "cid",
                "client_secret": "secret",
                "redirect_uris": ["http://localhost", "urn:ietf:wg:oauth:2.0:oob"],
            }
        }
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "client_secrets.json"
            path.write_text(json.dumps(payload), encoding="utf-8")

            info = AuthInfo.from_client_secrets_file(str(path))
            self.assertEqual(info.client_id, "cid")
            self.assertEqual(info.redirect_uri, "http://localhost")

            info = AuthInfo.from_client_secrets_file(str(path), redirect_uri="http://x")
            self.assertEqual(info.redirect_uri, "http://x")

    def test_from_client_secrets_file_without_section(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "client_secrets.json"
            path.write_text(json.dumps({"other": {}}), encoding="utf-8")
            with self.assertRaises(ValueError):
                AuthInfo.from_client_secrets_file(str(path))

    def test_to_client_config(self) -> None:
        info = AuthInfo(kind="oauth", data=self._data())
        config = info.to_client_config(auth_uri="https://a", token_uri="https://t")
        self.assertEqual(config["web"]["client_id"], "cid")
        self.assertEqual(config["web"]["redirect_uris"], ["http://localhost:8080"])
        self.assertEqual(config["web"]["token_uri"], "https://t")


if __name__ == "__main__":
    unittest.main()
