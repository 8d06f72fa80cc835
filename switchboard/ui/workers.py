"""
Background work for the dashboard.

Blocking client calls run on a thread pool. Their results never touch UI
state directly: success and failure callbacks are handed to a ``post``
callable which runs them on the UI owner. In the Textual app that is
``App.call_from_thread``; headless code and tests use CallbackQueue and
drain it explicitly.
"""

import concurrent.futures
import logging
import threading
from collections import deque
from collections.abc import Callable
from functools import partial
from typing import Any, Deque, Optional

from switchboard.config.constants import DEFAULT_WORKER_THREADS

logger = logging.getLogger(__name__)

Post = Callable[[Callable[[], Any]], Any]


class CallbackQueue:
    """Thread-safe queue of callbacks run by whoever calls drain()."""

    def __init__(self):
        self._lock = threading.Lock()
        self._pending: Deque[Callable[[], Any]] = deque()

    def post(self, callback: Callable[[], Any]) -> None:
        with self._lock:
            self._pending.append(callback)

    def drain(self) -> int:
        """Run queued callbacks in order. Returns how many ran."""
        ran = 0
        while True:
            with self._lock:
                if not self._pending:
                    return ran
                callback = self._pending.popleft()
            callback()
            ran += 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)


class BackgroundRunner:
    """Runs blocking callables off the UI thread and posts their outcome."""

    def __init__(self, post: Post, max_workers: int = DEFAULT_WORKER_THREADS):
        self._post = post
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="switchboard-worker"
        )
        self._closed = False
        self._lock = threading.Lock()
        self._in_flight = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def idle(self) -> bool:
        """True when no submitted work is still running or posting."""
        with self._lock:
            return self._in_flight == 0

    def submit(
        self,
        work: Callable[[], Any],
        on_success: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        description: str = "",
    ) -> Optional[concurrent.futures.Future]:
        """
        Run work on a worker thread.

        on_success receives the return value, on_error the exception. Both
        are posted, never called on the worker thread.
        """
        if self._closed:
            logger.warning(f"Runner closed, dropping work: {description or work!r}")
            return None

        label = description or getattr(work, "__name__", repr(work))

        def run():
            try:
                try:
                    result = work()
                except Exception as e:
                    logger.error(f"Background work failed ({label}): {e}", exc_info=True)
                    if on_error is not None:
                        self._post(partial(on_error, e))
                    return
                logger.debug(f"Background work done: {label}")
                if on_success is not None:
                    self._post(partial(on_success, result))
            finally:
                with self._lock:
                    self._in_flight -= 1

        with self._lock:
            self._in_flight += 1
        return self._executor.submit(run)

    def shutdown(self, wait: bool = False) -> None:
        self._closed = True
        self._executor.shutdown(wait=wait)
