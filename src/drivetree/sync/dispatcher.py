"""Request submission and completion queue."""

from __future__ import annotations

import logging
import queue
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .intent import OutstandingRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Completion:
    """A finished request: exactly one of result/error is meaningful."""

    request: OutstandingRequest
    result: Any = None
    error: Optional[BaseException] = None


class RequestDispatcher:
    """
    Runs blocking RemoteClient calls on an executor and queues their outcome.

    Worker threads only enqueue Completion records. Whoever calls drain()
    applies them, one at a time, on its own thread.
    """

    def __init__(
        self,
        executor: Optional[Executor] = None,
        *,
        max_workers: int = 4,
    ) -> None:
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="drivetree",
        )
        self._completed: queue.Queue[Completion] = queue.Queue()
        self._outstanding: dict[str, OutstandingRequest] = {}

    @property
    def outstanding(self) -> list[OutstandingRequest]:
        """Requests submitted but not yet drained."""
        return list(self._outstanding.values())

    def submit(self, request: OutstandingRequest, call: Callable[[], Any]) -> None:
        request.validate_required_fields()
        self._outstanding[request.request_id] = request
        logger.debug("Submitting %s request %s", request.intent.value, request.request_id)
        future = self._executor.submit(call)
        future.add_done_callback(lambda f: self._on_done(request, f))

    def drain(
        self,
        handler: Callable[[Completion], None],
        *,
        block: bool = False,
        timeout: Optional[float] = None,
    ) -> int:
        """
        Hand queued completions to handler, in arrival order.

        Args:
            block: Wait for the first completion if none is queued yet.
            timeout: Upper bound for that wait (seconds).

        Returns:
            Number of completions handled.
        """
        handled = 0
        wait = block
        while True:
            try:
                completion = self._completed.get(block=wait, timeout=timeout if wait else None)
            except queue.Empty:
                return handled
            wait = False
            self._outstanding.pop(completion.request.request_id, None)
            handler(completion)
            handled += 1

    def shutdown(self, *, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def _on_done(self, request: OutstandingRequest, future: Future) -> None:
        error = future.exception()
        if error is not None:
            self._completed.put(Completion(request=request, error=error))
        else:
            self._completed.put(Completion(request=request, result=future.result()))
