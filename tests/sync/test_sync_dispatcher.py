import unittest
from concurrent.futures import Executor, Future

from drivetree.sync import Completion, Intent, OutstandingRequest, RequestDispatcher


class InlineExecutor(Executor):
    """Runs each call immediately on the submitting thread."""

    def submit(self, fn, /, *args, **kwargs):
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


class TestRequestDispatcher(unittest.TestCase):
    def test_completions_drained_in_order(self) -> None:
        dispatcher = RequestDispatcher(InlineExecutor())
        dispatcher.submit(OutstandingRequest("r1", Intent.TOKEN_EXCHANGE), lambda: 1)
        dispatcher.submit(OutstandingRequest("r2", Intent.TOKEN_REFRESH), lambda: 2)
        self.assertEqual([r.request_id for r in dispatcher.outstanding], ["r1", "r2"])

        seen: list[Completion] = []
        self.assertEqual(dispatcher.drain(seen.append), 2)

        self.assertEqual([c.request.request_id for c in seen], ["r1", "r2"])
        self.assertEqual([c.result for c in seen], [1, 2])
        self.assertEqual(dispatcher.outstanding, [])
        self.assertEqual(dispatcher.drain(seen.append), 0)

    def test_errors_are_captured(self) -> None:
        dispatcher = RequestDispatcher(InlineExecutor())

        def fail():
            raise RuntimeError("boom")

        dispatcher.submit(OutstandingRequest("r1", Intent.TOKEN_EXCHANGE), fail)
        seen: list[Completion] = []
        dispatcher.drain(seen.append)

        self.assertIsInstance(seen[0].error, RuntimeError)
        self.assertIsNone(seen[0].result)

    def test_invalid_request_not_submitted(self) -> None:
        dispatcher = RequestDispatcher(InlineExecutor())
        with self.assertRaises(ValueError):
            dispatcher.submit(OutstandingRequest("r1", Intent.LIST_CHILDREN), lambda: None)
        self.assertEqual(dispatcher.outstanding, [])

    def test_handler_submissions_drained_in_same_pass(self) -> None:
        dispatcher = RequestDispatcher(InlineExecutor())
        order: list[str] = []

        def handler(completion: Completion) -> None:
            order.append(completion.request.request_id)
            if completion.request.request_id == "r1":
                dispatcher.submit(OutstandingRequest("r2", Intent.TOKEN_REFRESH), lambda: None)

        dispatcher.submit(OutstandingRequest("r1", Intent.TOKEN_EXCHANGE), lambda: None)
        self.assertEqual(dispatcher.drain(handler), 2)
        self.assertEqual(order, ["r1", "r2"])

    def test_thread_pool_blocking_drain(self) -> None:
        dispatcher = RequestDispatcher(max_workers=2)
        try:
            dispatcher.submit(OutstandingRequest("r1", Intent.TOKEN_EXCHANGE), lambda: "done")
            seen: list[Completion] = []
            handled = dispatcher.drain(seen.append, block=True, timeout=5.0)
        finally:
            dispatcher.shutdown()

        self.assertEqual(handled, 1)
        self.assertEqual(seen[0].result, "done")


if __name__ == "__main__":
    unittest.main()
