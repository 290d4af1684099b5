"""Module: callback_dispatcher.py.

Author: Michael Economou
Date: 2026-10-19

Delivers (error, result) callbacks off the caller's stack.

Every callback handed to request() reaches its owner through this
dispatcher, whether the answer came from the cache or from a finished
generation job. A single delivery thread keeps callbacks in dispatch order,
so waiters of one job are notified in the order they arrived.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from mediabox.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

ResultCallback = Callable[[BaseException | None, Any], None]


class CallbackDispatcher:
    """Single-thread FIFO delivery of result callbacks."""

    def __init__(self, thread_name_prefix: str = "mediabox-notify"):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=thread_name_prefix)
        self._lock = threading.Lock()
        self._delivered = 0
        self._closed = False

    def dispatch(
        self, callback: ResultCallback, error: BaseException | None, result: Any = None
    ) -> Future:
        """Schedule callback(error, result) on the delivery thread.

        Returns:
            Future completing once the callback has run.

        Raises:
            RuntimeError: If the dispatcher has been shut down.

        """
        with self._lock:
            if self._closed:
                raise RuntimeError("CallbackDispatcher is shut down")
            return self._executor.submit(self._deliver, callback, error, result)

    def dispatch_all(
        self,
        callbacks: list[ResultCallback],
        error: BaseException | None,
        result: Any = None,
    ) -> Future:
        """Schedule every callback, in list order, as one delivery batch."""
        with self._lock:
            if self._closed:
                raise RuntimeError("CallbackDispatcher is shut down")
            return self._executor.submit(self._deliver_all, list(callbacks), error, result)

    def _deliver_all(
        self, callbacks: list[ResultCallback], error: BaseException | None, result: Any
    ) -> None:
        for callback in callbacks:
            self._deliver(callback, error, result)

    def _deliver(self, callback: ResultCallback, error: BaseException | None, result: Any) -> None:
        try:
            callback(error, result)
        except Exception:
            logger.exception(
                "[CallbackDispatcher] Callback %s raised",
                getattr(callback, "__name__", repr(callback)),
            )
        finally:
            with self._lock:
                self._delivered += 1

    @property
    def delivered_count(self) -> int:
        with self._lock:
            return self._delivered

    def flush(self, timeout: float | None = None) -> None:
        """Block until every callback dispatched so far has been delivered."""
        with self._lock:
            if self._closed:
                return
            marker = self._executor.submit(lambda: None)
        marker.result(timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)
