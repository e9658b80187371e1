import unittest

from drivetree.sync import Intent, OutstandingRequest


class TestOutstandingRequest(unittest.TestCase):
    def test_token_requests_need_no_fields(self) -> None:
        OutstandingRequest("r1", Intent.TOKEN_EXCHANGE).validate_required_fields()
        OutstandingRequest("r2", Intent.TOKEN_REFRESH).validate_required_fields()

    def test_list_requires_parent(self) -> None:
        OutstandingRequest("r1", Intent.LIST_CHILDREN, parent_id="root").validate_required_fields()
        with self.assertRaises(ValueError):
            OutstandingRequest("r2", Intent.LIST_CHILDREN).validate_required_fields()
        with self.assertRaises(ValueError):
            OutstandingRequest("r3", Intent.LIST_CHILDREN, parent_id=" ").validate_required_fields()

    def test_upload_requires_parent_and_path(self) -> None:
        OutstandingRequest(
            "r1", Intent.UPLOAD, parent_id="root", local_path="/tmp/a"
        ).validate_required_fields()
        with self.assertRaises(ValueError):
            OutstandingRequest("r2", Intent.UPLOAD, parent_id="root").validate_required_fields()


if __name__ == "__main__":
    unittest.main()
