"""Owner-thread dispatching.

All tree reads and step-list mutations happen on a single owner context (the
UI thread). Work arriving from elsewhere, such as a debounce timer firing on a
background thread, is marshalled onto that context through an
OwnerDispatcher.
"""

from __future__ import annotations

import queue
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import Future
from typing import TypeVar

from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class OwnerDispatcher(ABC):
    """Runs callables on the owner execution context."""

    @abstractmethod
    def check_access(self) -> bool:
        """Check whether the caller is already on the owner context."""
        ...

    @abstractmethod
    def post(self, fn: Callable[[], object]) -> None:
        """Schedule ``fn`` on the owner context without waiting for it."""
        ...

    @abstractmethod
    def invoke(self, fn: Callable[[], T]) -> T:
        """Run ``fn`` on the owner context and return its result.

        Runs inline when the caller already has access. Exceptions raised by
        ``fn`` propagate to the caller.
        """
        ...


class ImmediateDispatcher(OwnerDispatcher):
    """Dispatcher for hosts where every caller is the owner.

    Used by headless hosts and tests; ``post`` runs the callable at once.
    """

    def check_access(self) -> bool:
        return True

    def post(self, fn: Callable[[], object]) -> None:
        fn()

    def invoke(self, fn: Callable[[], T]) -> T:
        return fn()


class QueueDispatcher(OwnerDispatcher):
    """Dispatcher bound to the thread that created it.

    The owner thread drains posted work by calling ``run_pending()`` from its
    event loop, the way a UI framework runs queued jobs between input events.

    Example:
        >>> dispatcher = QueueDispatcher()
        >>> dispatcher.post(lambda: print("flushed"))
        >>> dispatcher.run_pending()
        flushed
        1
    """

    def __init__(self, owner: threading.Thread | None = None) -> None:
        self._owner = owner or threading.current_thread()
        self._queue: queue.SimpleQueue[Callable[[], object]] = queue.SimpleQueue()

    @property
    def owner(self) -> threading.Thread:
        return self._owner

    def check_access(self) -> bool:
        return threading.current_thread() is self._owner

    def post(self, fn: Callable[[], object]) -> None:
        self._queue.put(fn)

    def invoke(self, fn: Callable[[], T]) -> T:
        if self.check_access():
            return fn()

        future: Future[T] = Future()

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(fn())
            except BaseException as e:
                future.set_exception(e)

        self.post(run)
        return future.result()

    def run_pending(self) -> int:
        """Run everything queued so far on the calling (owner) thread.

        Returns:
            Number of callables run

        Raises:
            RuntimeError: If called from a thread other than the owner
        """
        if not self.check_access():
            raise RuntimeError("run_pending must be called on the owner thread")

        count = 0
        while True:
            try:
                fn = self._queue.get_nowait()
            except queue.Empty:
                return count
            try:
                fn()
            except Exception as e:
                logger.error("dispatched_callable_failed", error=str(e), exc_info=True)
            count += 1

    @property
    def pending(self) -> int:
        return self._queue.qsize()
