"""Pytest configuration and fixtures."""

from collections.abc import Callable
from datetime import datetime

import pytest

from uirecorder.config import RecorderSettings, reset_settings
from uirecorder.dispatch import ImmediateDispatcher
from uirecorder.recording.coalescer import DebounceTimer
from uirecorder.recording.session import RecordingSession
from uirecorder.tree import Bounds, MemoryNode, find_first

FIXED_TIME = datetime(2025, 1, 15, 10, 30, 0)


class ManualTimer(DebounceTimer):
    """Debounce timer fired explicitly by the test."""

    def __init__(self) -> None:
        self.callback: Callable[[], None] | None = None
        self.delay: float | None = None
        self.schedule_count = 0

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.schedule_count += 1

    def cancel(self) -> None:
        self.callback = None

    @property
    def armed(self) -> bool:
        return self.callback is not None

    def fire(self) -> None:
        callback, self.callback = self.callback, None
        if callback is not None:
            callback()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep tests independent of the developer's environment."""
    monkeypatch.setenv("UIRECORDER_DISABLE_CONSOLE_LOGGING", "1")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings(tmp_path) -> RecorderSettings:
    """Default settings writing into a temporary directory."""
    return RecorderSettings(
        _env_file=None,
        app_name="SampleApp",
        scenario_name="Login",
        output_directory=tmp_path / "RecordedTests",
    )


@pytest.fixture
def manual_timer() -> ManualTimer:
    return ManualTimer()


@pytest.fixture
def login_window() -> MemoryNode:
    """A login form.

    Window
      StackPanel
        TextBlock (text "Please sign in")
        TextBox id=UsernameInput
        TextBox id=PasswordInput
        Button id=LoginButton
          TextBlock (text "Log in")
        CheckBox id=RememberMe (unchecked)
        TextBlock id=StatusLabel (text "Ready")
    """
    window = MemoryNode("Window", root_boundary=True)
    panel = window.add(MemoryNode("StackPanel", bounds=Bounds(0, 0, 400, 300)))
    panel.add(MemoryNode("TextBlock", text="Please sign in", bounds=Bounds(10, 0, 200, 20)))
    panel.add(MemoryNode("TextBox", stable_id="UsernameInput", bounds=Bounds(10, 30, 200, 20)))
    panel.add(MemoryNode("TextBox", stable_id="PasswordInput", bounds=Bounds(10, 60, 200, 20)))
    button = panel.add(MemoryNode("Button", stable_id="LoginButton", bounds=Bounds(10, 90, 80, 24)))
    button.add(MemoryNode("TextBlock", text="Log in", bounds=Bounds(15, 92, 60, 20)))
    panel.add(
        MemoryNode(
            "CheckBox", stable_id="RememberMe", checked=False, bounds=Bounds(10, 120, 80, 20)
        )
    )
    panel.add(
        MemoryNode(
            "TextBlock", stable_id="StatusLabel", text="Ready", bounds=Bounds(10, 150, 200, 20)
        )
    )
    return window


@pytest.fixture
def anonymous_window() -> MemoryNode:
    """Window whose controls declare neither ids nor names.

    Window
      Panel
        Button
        Button
        Button
    """
    window = MemoryNode("Window", root_boundary=True)
    panel = window.add(MemoryNode("Panel"))
    for _ in range(3):
        panel.add(MemoryNode("Button"))
    return window


@pytest.fixture
def make_session(settings, manual_timer):
    """Factory for sessions with a manual timer and a fixed clock."""

    def factory(root: MemoryNode, **overrides) -> RecordingSession:
        options = {
            "settings": settings,
            "dispatcher": ImmediateDispatcher(),
            "timer": manual_timer,
            "clock": lambda: FIXED_TIME,
        }
        options.update(overrides)
        return RecordingSession(root, **options)

    return factory


@pytest.fixture
def node_by_id() -> Callable[[MemoryNode, str], MemoryNode]:
    """Look a node up by stable id in test trees."""

    def lookup(root: MemoryNode, stable_id: str) -> MemoryNode:
        node = find_first(root, lambda n: n.stable_id() == stable_id)
        assert node is not None, f"no node with id {stable_id}"
        return node

    return lookup
