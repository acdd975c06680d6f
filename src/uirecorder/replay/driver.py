"""Replay driver for generated tests.

Generated test code calls ReplayDriver methods with recorded locator strings.
The driver finds the control through the replay finder and hands the
physical action to an InputBackend supplied by the host (a headless
application, an accessibility bridge, ...).
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..exceptions import LocatorResolutionError, ReplayAssertionError, ReplayTimeoutError
from ..locators.finder import ReplayFinder
from ..logging import get_logger
from ..recording.events import SPECIAL_KEYS, PointerButton
from ..tree.interfaces import TreeNode

logger = get_logger(__name__)


class InputBackend(ABC):
    """Interface for delivering input to the application under test."""

    @abstractmethod
    def click(
        self, node: TreeNode, button: PointerButton = PointerButton.LEFT, clicks: int = 1
    ) -> None:
        """Press and release a pointer button over ``node``."""
        ...

    @abstractmethod
    def hover(self, node: TreeNode) -> None:
        """Move the pointer over ``node``."""
        ...

    @abstractmethod
    def type_text(self, node: TreeNode, text: str) -> None:
        """Focus ``node`` and type ``text`` one character at a time."""
        ...

    @abstractmethod
    def key_press(self, key: str) -> None:
        """Press a named key on the focused control."""
        ...

    @abstractmethod
    def scroll(self, node: TreeNode, delta_x: float, delta_y: float) -> None:
        """Scroll ``node`` by the given wheel deltas."""
        ...

    @abstractmethod
    def select_item(self, node: TreeNode, item: str) -> None:
        """Select ``item`` in a selector control such as a combo box."""
        ...

    def process_events(self) -> None:
        """Let the application process queued input. Called while waiting."""
        return None


@dataclass(frozen=True)
class BackendCall:
    """One action received by a RecordingBackend."""

    action: str
    node: TreeNode | None
    args: tuple[Any, ...] = ()


@dataclass
class RecordingBackend(InputBackend):
    """InputBackend that only records the calls it receives.

    Used for dry runs of generated tests and in the test suite.
    """

    calls: list[BackendCall] = field(default_factory=list)

    def click(
        self, node: TreeNode, button: PointerButton = PointerButton.LEFT, clicks: int = 1
    ) -> None:
        self.calls.append(BackendCall("click", node, (button, clicks)))

    def hover(self, node: TreeNode) -> None:
        self.calls.append(BackendCall("hover", node))

    def type_text(self, node: TreeNode, text: str) -> None:
        self.calls.append(BackendCall("type_text", node, (text,)))

    def key_press(self, key: str) -> None:
        self.calls.append(BackendCall("key_press", None, (key,)))

    def scroll(self, node: TreeNode, delta_x: float, delta_y: float) -> None:
        self.calls.append(BackendCall("scroll", node, (delta_x, delta_y)))

    def select_item(self, node: TreeNode, item: str) -> None:
        self.calls.append(BackendCall("select_item", node, (item,)))

    def actions(self) -> list[str]:
        return [call.action for call in self.calls]


class ReplayDriver:
    """Executes recorded steps against a live tree.

    Example:
        ```python
        ui = ReplayDriver(window, backend)
        ui.click("LoginButton")
        ui.type_text("UsernameInput", "alice")
        ui.assert_text("StatusLabel", "Welcome")
        ```
    """

    def __init__(
        self,
        root: TreeNode,
        backend: InputBackend | None = None,
        timeout: float = 5.0,
        poll_interval: float = 0.05,
        finder: ReplayFinder | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the driver.

        Args:
            root: Root of the tree under test
            backend: Input delivery (default: RecordingBackend)
            timeout: Default timeout for wait operations in seconds
            poll_interval: Delay between wait polls in seconds
            finder: Finder for locator strings (default: ReplayFinder(root))
            clock: Monotonic time source used by waits
            sleep: Sleep function used by waits
        """
        self.root = root
        self.backend = backend or RecordingBackend()
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.finder = finder or ReplayFinder(root)
        self._clock = clock
        self._sleep = sleep

    def find(self, locator: str) -> TreeNode:
        """Find a control, raising ControlNotFoundError with the known ids."""
        return self.finder.find(locator)

    # Pointer

    def click(self, locator: str) -> None:
        node = self.find(locator)
        logger.debug("replay_click", locator=locator)
        self.backend.click(node, PointerButton.LEFT, 1)

    def right_click(self, locator: str) -> None:
        node = self.find(locator)
        logger.debug("replay_right_click", locator=locator)
        self.backend.click(node, PointerButton.RIGHT, 1)

    def double_click(self, locator: str) -> None:
        node = self.find(locator)
        logger.debug("replay_double_click", locator=locator)
        self.backend.click(node, PointerButton.LEFT, 2)

    def hover(self, locator: str) -> None:
        self.backend.hover(self.find(locator))

    def scroll(self, locator: str, delta_x: float, delta_y: float = 0.0) -> None:
        node = self.find(locator)
        logger.debug("replay_scroll", locator=locator, delta_x=delta_x, delta_y=delta_y)
        self.backend.scroll(node, delta_x, delta_y)

    # Keyboard

    def type_text(self, locator: str, text: str) -> None:
        node = self.find(locator)
        logger.debug("replay_type_text", locator=locator, length=len(text))
        self.backend.type_text(node, text)

    def key_press(self, key: str) -> None:
        """Press a named key.

        Raises:
            ValueError: If ``key`` is neither a special key nor a single character
        """
        if key not in SPECIAL_KEYS and len(key) != 1:
            raise ValueError(f"Invalid key: {key!r}")
        logger.debug("replay_key_press", key=key)
        self.backend.key_press(key)

    def select_item(self, locator: str, item: str) -> None:
        self.backend.select_item(self.find(locator), item)

    # Assertions

    def assert_text(self, locator: str, expected: str) -> None:
        actual = self.find(locator).text() or ""
        if actual != expected:
            raise ReplayAssertionError(locator, expected, actual, what="text")

    def assert_checked(self, locator: str, expected: bool | None) -> None:
        node = self.find(locator)
        if not node.is_checkable():
            raise ReplayAssertionError(locator, True, False, what="checkable control")
        actual = node.checked()
        if actual != expected:
            raise ReplayAssertionError(locator, expected, actual, what="checked state")

    def assert_visible(self, locator: str) -> None:
        if not self.find(locator).is_visible():
            raise ReplayAssertionError(locator, True, False, what="visibility")

    def assert_enabled(self, locator: str) -> None:
        if not self.find(locator).is_enabled():
            raise ReplayAssertionError(locator, True, False, what="enabled state")

    # Waits

    def wait_for(
        self,
        locator: str,
        condition: Callable[[TreeNode], bool],
        timeout: float | None = None,
    ) -> TreeNode:
        """Poll until the control exists and ``condition`` holds for it.

        A control that cannot be found yet counts as the condition not
        holding.

        Args:
            locator: Locator string
            condition: Predicate over the found control
            timeout: Seconds to wait (default: the driver timeout)

        Returns:
            The control the condition held for

        Raises:
            ReplayTimeoutError: If the timeout expires first
        """
        timeout = self.timeout if timeout is None else timeout
        deadline = self._clock() + timeout

        while True:
            node = self.finder.try_find(locator)
            if node is not None and condition(node):
                return node
            if self._clock() >= deadline:
                break
            self.backend.process_events()
            self._sleep(self.poll_interval)

        logger.warning("replay_wait_timeout", locator=locator, timeout=timeout)
        raise ReplayTimeoutError(locator, timeout)

    def wait_for_text(self, locator: str, expected: str, timeout: float | None = None) -> TreeNode:
        return self.wait_for(locator, lambda node: (node.text() or "") == expected, timeout)

    def wait_for_visible(self, locator: str, timeout: float | None = None) -> TreeNode:
        return self.wait_for(locator, lambda node: node.is_visible(), timeout)

    def wait_for_enabled(self, locator: str, timeout: float | None = None) -> TreeNode:
        return self.wait_for(locator, lambda node: node.is_enabled(), timeout)

    def exists(self, locator: str) -> bool:
        """Check whether a locator currently resolves, without raising."""
        try:
            self.finder.find(locator)
        except LocatorResolutionError:
            return False
        return True
