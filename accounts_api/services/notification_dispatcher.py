from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional, Set

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Runs outbound notifications in the background.

    Callers never wait on the result: a raised exception or a ``False``
    return value is logged and otherwise dropped.
    """

    def __init__(self, max_workers: int = 2) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notify")
        self._pending: Set[Future] = set()
        self._lock = threading.Lock()
        self._closed = False

    def dispatch(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Optional[Future]:
        with self._lock:
            if self._closed:
                logger.warning("Notification dispatcher is shut down; dropping %s.", _describe(fn))
                return None
            try:
                future = self._executor.submit(fn, *args, **kwargs)
            except RuntimeError as exc:
                logger.warning("Could not schedule %s: %s", _describe(fn), exc)
                return None
            self._pending.add(future)
        # Outside the lock: the callback runs inline if the future is already done.
        future.add_done_callback(lambda done: self._on_done(fn, done))
        return future

    def drain(self, timeout: Optional[float] = None) -> None:
        """Block until every notification dispatched so far has finished."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        logger.info("Stopping notification dispatcher.")
        self._executor.shutdown(wait=True)

    def _on_done(self, fn: Callable[..., Any], future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
        exc = future.exception()
        if exc is not None:
            logger.error("Notification %s failed: %s", _describe(fn), exc, exc_info=exc)
        elif future.result() is False:
            logger.warning("Notification %s was not delivered.", _describe(fn))


def _describe(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__qualname__", repr(fn))
