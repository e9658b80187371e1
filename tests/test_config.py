import unittest

from drivetree.auth import AuthInfo
from drivetree.auth.oauth_client import DEFAULT_SCOPES
from drivetree.config import SyncConfig, load_config


def _env(**extra) -> dict:
    env = {
        "DRIVETREE_CLIENT_ID": "cid",
        "DRIVETREE_CLIENT_SECRET": "secret",
        "DRIVETREE_REDIRECT_URI": "http://localhost:8080",
    }
    env.update(extra)
    return env


class TestLoadConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        config = load_config(_env())
        self.assertEqual(config.auth_info.client_id, "cid")
        self.assertEqual(config.auth_info.redirect_uri, "http://localhost:8080")
        self.assertEqual(config.scopes, DEFAULT_SCOPES)
        self.assertFalse(config.recursive)
        self.assertFalse(config.defer_orphans)
        self.assertEqual(config.max_workers, 4)
        self.assertEqual(config.request_timeout_sec, 30.0)

    def test_overrides(self) -> None:
        config = load_config(
            _env(
                DRIVETREE_SCOPES="scope.a scope.b",
                DRIVETREE_RECURSIVE="yes",
                DRIVETREE_DEFER_ORPHANS="1",
                DRIVETREE_MAX_WORKERS="8",
                DRIVETREE_REQUEST_TIMEOUT="2.5",
            )
        )
        self.assertEqual(config.scopes, ("scope.a", "scope.b"))
        self.assertTrue(config.recursive)
        self.assertTrue(config.defer_orphans)
        self.assertEqual(config.max_workers, 8)
        self.assertEqual(config.request_timeout_sec, 2.5)

    def test_false_flags(self) -> None:
        config = load_config(_env(DRIVETREE_RECURSIVE="off", DRIVETREE_DEFER_ORPHANS="0"))
        self.assertFalse(config.recursive)
        self.assertFalse(config.defer_orphans)

    def test_missing_required_variable(self) -> None:
        env = _env()
        del env["DRIVETREE_CLIENT_SECRET"]
        with self.assertRaises(KeyError):
            load_config(env)

    def test_invalid_values(self) -> None:
        with self.assertRaises(ValueError):
            load_config(_env(DRIVETREE_MAX_WORKERS="0"))
        with self.assertRaises(ValueError):
            load_config(_env(DRIVETREE_REQUEST_TIMEOUT="abc"))


class TestSyncConfig(unittest.TestCase):
    def test_validation(self) -> None:
        info = AuthInfo(
            kind="oauth",
            data={"client_id": "c", "client_secret": "s", "redirect_uri": "http://x"},
        )
        with self.assertRaises(ValueError):
            SyncConfig(auth_info=info, scopes=())
        with self.assertRaises(ValueError):
            SyncConfig(auth_info=info, request_timeout_sec=0)


if __name__ == "__main__":
    unittest.main()
