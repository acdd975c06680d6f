"""Text input coalescing.

Characters typed into the same control are batched into one pending buffer
and flushed as a single step once typing pauses, the target changes, or
another interaction needs the steps to be in order.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

from ..dispatch import OwnerDispatcher
from ..logging import get_logger
from ..tree.interfaces import TreeNode

logger = get_logger(__name__)


class DebounceTimer(ABC):
    """A restartable one-shot timer."""

    @abstractmethod
    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        """Arm the timer, replacing any pending callback.

        The callback may run on any thread.
        """
        ...

    @abstractmethod
    def cancel(self) -> None:
        """Disarm the timer. Safe to call when not armed."""
        ...


class ThreadingDebounceTimer(DebounceTimer):
    """DebounceTimer on ``threading.Timer`` (callbacks run on a timer thread)."""

    def __init__(self) -> None:
        self._timer: threading.Timer | None = None

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        self.cancel()
        self._timer = threading.Timer(delay, callback)
        self._timer.daemon = True
        self._timer.start()

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class TextCoalescer:
    """Batches consecutive characters typed into one control.

    Timer expiry is marshalled onto the owner dispatcher before the buffer is
    touched. Each feed bumps a generation counter so a timer that fired
    before the latest keystroke cannot flush a buffer that is still growing.
    """

    def __init__(
        self,
        on_flush: Callable[[TreeNode, str], None],
        dispatcher: OwnerDispatcher,
        timer: DebounceTimer | None = None,
        delay: float = 0.5,
    ) -> None:
        """Initialize the coalescer.

        Args:
            on_flush: Called on the owner context with (target, text)
            dispatcher: Owner context for buffer access
            timer: Debounce timer (default: ThreadingDebounceTimer)
            delay: Quiet period in seconds before the buffer is flushed
        """
        self._on_flush = on_flush
        self._dispatcher = dispatcher
        self._timer = timer or ThreadingDebounceTimer()
        self.delay = delay
        self._target: TreeNode | None = None
        self._buffer = ""
        self._generation = 0

    @property
    def target(self) -> TreeNode | None:
        return self._target

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def has_pending(self) -> bool:
        return self._target is not None and bool(self._buffer)

    def feed(self, target: TreeNode, text: str) -> None:
        """Append typed text for ``target``.

        A different target flushes the current buffer first.
        """
        if not text:
            return
        if self._target is not None and self._target != target:
            logger.debug("text_target_switched", previous=self._target.type_tag())
            self.flush()

        self._target = target
        self._buffer += text
        self._generation += 1
        generation = self._generation
        self._timer.schedule(self.delay, lambda: self._timer_elapsed(generation))

    def flush(self) -> None:
        """Emit the pending buffer (if any) and reset."""
        self._timer.cancel()
        target, text = self._target, self._buffer
        self._target = None
        self._buffer = ""
        if target is not None and text:
            self._on_flush(target, text)

    def discard(self) -> None:
        """Drop the pending buffer without emitting it."""
        self._timer.cancel()
        self._target = None
        self._buffer = ""

    def _timer_elapsed(self, generation: int) -> None:
        # Runs on the timer thread; the buffer belongs to the owner
        self._dispatcher.post(lambda: self._flush_if_current(generation))

    def _flush_if_current(self, generation: int) -> None:
        if generation != self._generation:
            return
        logger.debug("text_debounce_elapsed", length=len(self._buffer))
        self.flush()
