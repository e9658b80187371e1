import unittest

from drivetree.errors.exceptions import (
    ApiError,
    AuthError,
    BadRequestError,
    ConflictError,
    DriveTreeError,
    DuplicateIdError,
    HttpError,
    HttpErrorInfo,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    TreeError,
    UnknownParentError,
    map_http_error,
)


class TestExceptions(unittest.TestCase):
    def test_base_error_keeps_details_and_cause(self) -> None:
        cause = RuntimeError("root")
        err = DriveTreeError("msg", details={"k": "v"}, cause=cause)
        self.assertEqual(str(err), "msg")
        self.assertEqual(err.details["k"], "v")
        self.assertIs(err.cause, cause)

    def test_tree_errors_share_base(self) -> None:
        self.assertTrue(issubclass(UnknownParentError, TreeError))
        self.assertTrue(issubclass(DuplicateIdError, TreeError))
        self.assertTrue(issubclass(TreeError, DriveTreeError))

    def test_map_http_error_basic(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=404, message="not found"))
        self.assertIsInstance(err, NotFoundError)

        err = map_http_error(HttpErrorInfo(status_code=400, message="bad req"))
        self.assertIsInstance(err, BadRequestError)

        err = map_http_error(HttpErrorInfo(status_code=429, message="rate"))
        self.assertIsInstance(err, RateLimitError)

        err = map_http_error(HttpErrorInfo(status_code=412, message="conflict"))
        self.assertIsInstance(err, ConflictError)

        err = map_http_error(HttpErrorInfo(status_code=401, message="auth"))
        self.assertIsInstance(err, AuthError)
        self.assertEqual(err.status_code, 401)

    def test_map_http_error_403_quota_vs_permission(self) -> None:
        err = map_http_error(
            HttpErrorInfo(status_code=403, reason="dailyLimitExceeded", message="quota")
        )
        self.assertIsInstance(err, QuotaExceededError)

        err = map_http_error(
            HttpErrorInfo(status_code=403, reason="insufficientPermissions", message="x")
        )
        self.assertIsInstance(err, PermissionError)

    def test_map_http_error_other_is_api_error(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=503, message="unavail"))
        self.assertIsInstance(err, ApiError)
        err = map_http_error(HttpErrorInfo(status_code=418))
        self.assertIsInstance(err, ApiError)
        self.assertEqual(str(err), "HTTP error 418")

    def test_all_http_errors_expose_status(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=409, details={"domain": "global"}))
        self.assertIsInstance(err, HttpError)
        self.assertEqual(err.status_code, 409)
        self.assertEqual(err.details["domain"], "global")
        self.assertEqual(HttpError("no status").status_code, 0)


if __name__ == "__main__":
    unittest.main()
