"""Tests for locator resolution."""

import threading

import pytest
from pydantic import ValidationError

from uirecorder.dispatch import QueueDispatcher
from uirecorder.locators import (
    Locator,
    LocatorKind,
    LocatorOptions,
    LocatorResolver,
    ReplayFinder,
    StepQuality,
)
from uirecorder.locators.resolver import (
    DISPLAY_NAME_WARNING,
    STRUCTURAL_PATH_WARNING,
    UNRESOLVED_WARNING,
)
from uirecorder.locators.types import (
    DISPLAY_NAME_DIAGNOSTIC,
    STRUCTURAL_PATH_DIAGNOSTIC,
    UNRESOLVED_DIAGNOSTIC,
)
from uirecorder.tree import MemoryNode


class ThreadTrackingNode(MemoryNode):
    """MemoryNode remembering which threads read its stable id."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.reader_threads: list[threading.Thread] = []

    def stable_id(self) -> str:
        self.reader_threads.append(threading.current_thread())
        return super().stable_id()


@pytest.fixture
def nested_window() -> MemoryNode:
    """Window > Grid(id=Outer) > Border(id=Inner) > StackPanel > TextBlock."""
    window = MemoryNode("Window", root_boundary=True)
    outer = window.add(MemoryNode("Grid", stable_id="Outer"))
    inner = outer.add(MemoryNode("Border", stable_id="Inner"))
    panel = inner.add(MemoryNode("StackPanel"))
    panel.add(MemoryNode("TextBlock", text="deep"))
    return window


class TestStableIdResolution:
    """Tests for the nearest stable id rule."""

    def test_node_with_own_id(self, login_window, node_by_id):
        """A node with a stable id resolves to it with high quality."""
        resolver = LocatorResolver()
        locator = resolver.resolve(node_by_id(login_window, "LoginButton"))

        assert locator == Locator.stable_id("LoginButton")
        assert locator.quality is StepQuality.HIGH
        assert locator.diagnostic is None
        assert resolver.warning_for(locator) is None

    def test_inner_element_uses_ancestor_id(self, login_window, node_by_id):
        """Events from a templated child resolve to the identified control."""
        label = node_by_id(login_window, "LoginButton").children()[0]

        resolution = LocatorResolver().resolve_target(label)

        assert resolution.locator.value == "LoginButton"
        assert resolution.node is node_by_id(login_window, "LoginButton")

    def test_nearest_ancestor_wins(self, nested_window):
        """The closest identified ancestor wins over outer ones."""
        text = nested_window.children()[0].children()[0].children()[0].children()[0]

        locator = LocatorResolver().resolve(text)

        assert locator.value == "Inner"
        assert locator.kind is LocatorKind.STABLE_ID

    def test_own_id_wins_over_ancestor(self, nested_window):
        inner = nested_window.children()[0].children()[0]
        assert LocatorResolver().resolve(inner).value == "Inner"

    def test_search_stops_at_root_boundary(self):
        """Ids above the root boundary are never used."""
        host = MemoryNode("Host", stable_id="HostId")
        window = host.add(MemoryNode("Window", root_boundary=True))
        button = window.add(MemoryNode("Button"))

        locator = LocatorResolver().resolve(button)

        assert locator.kind is LocatorKind.STRUCTURAL_PATH
        assert locator.value == "Button[0]"


class TestDisplayNameFallback:
    """Tests for the optional display name fallback."""

    @pytest.fixture
    def named_window(self) -> MemoryNode:
        window = MemoryNode("Window", root_boundary=True)
        panel = window.add(MemoryNode("StackPanel", display_name="Login form"))
        panel.add(MemoryNode("Button"))
        return window

    def test_used_when_enabled(self, named_window):
        resolver = LocatorResolver(LocatorOptions(prefer_display_name_fallback=True))
        button = named_window.children()[0].children()[0]

        locator = resolver.resolve(button)

        assert locator.kind is LocatorKind.DISPLAY_NAME
        assert locator.value == "Login form"
        assert locator.quality is StepQuality.MEDIUM
        assert locator.diagnostic == DISPLAY_NAME_DIAGNOSTIC
        assert resolver.warning_for(locator) == DISPLAY_NAME_WARNING

    def test_skipped_when_disabled(self, named_window):
        """Without the flag display names are ignored."""
        button = named_window.children()[0].children()[0]

        locator = LocatorResolver().resolve(button)

        assert locator.kind is LocatorKind.STRUCTURAL_PATH

    def test_stable_id_still_preferred(self):
        window = MemoryNode("Window", root_boundary=True)
        window.add(MemoryNode("Button", stable_id="Ok", display_name="OK"))
        resolver = LocatorResolver(LocatorOptions(prefer_display_name_fallback=True))

        assert resolver.resolve(window.children()[0]).kind is LocatorKind.STABLE_ID


class TestStructuralPathFallback:
    """Tests for structural path locators."""

    def test_same_type_index(self, anonymous_window):
        third = anonymous_window.children()[0].children()[2]
        resolver = LocatorResolver()

        locator = resolver.resolve(third)

        assert locator.value == "Panel[0]/Button[2]"
        assert locator.kind is LocatorKind.STRUCTURAL_PATH
        assert locator.quality is StepQuality.LOW
        assert locator.diagnostic == STRUCTURAL_PATH_DIAGNOSTIC
        assert resolver.warning_for(locator) == STRUCTURAL_PATH_WARNING

    def test_unrelated_siblings_do_not_shift_index(self):
        window = MemoryNode("Window", root_boundary=True)
        panel = window.add(MemoryNode("Panel"))
        panel.add(MemoryNode("TextBlock"))
        panel.add(MemoryNode("Button"))
        panel.add(MemoryNode("TextBlock"))
        second_button = panel.add(MemoryNode("Button"))

        assert LocatorResolver().resolve(second_button).value == "Panel[0]/Button[1]"

    def test_round_trip_through_finder(self, anonymous_window):
        """A structural path looks up the node it was built for."""
        finder = ReplayFinder(anonymous_window)
        resolver = LocatorResolver()

        for button in anonymous_window.children()[0].children():
            assert finder.find(resolver.resolve(button)) is button

    def test_warnings_can_be_disabled(self, anonymous_window):
        resolver = LocatorResolver(LocatorOptions(emit_fallback_warnings=False))
        locator = resolver.resolve(anonymous_window.children()[0].children()[0])

        assert resolver.warning_for(locator) is None


class TestUnresolvable:
    """Tests for the coordinate sentinel."""

    @pytest.fixture
    def resolver(self) -> LocatorResolver:
        return LocatorResolver(
            LocatorOptions(allow_structural_path_fallback=False, emit_fallback_warnings=False)
        )

    def test_sentinel_without_pointer(self, resolver, anonymous_window):
        locator = resolver.resolve(anonymous_window.children()[0].children()[1])

        assert locator.value == "Button_NoId"
        assert locator.kind is LocatorKind.COORDINATE
        assert locator.diagnostic == UNRESOLVED_DIAGNOSTIC
        assert not locator.is_durable

    def test_sentinel_with_pointer(self, resolver, anonymous_window):
        locator = resolver.resolve(anonymous_window.children()[0].children()[1], (10, 20.5))

        assert locator.value == "Button@10,20.5"

    def test_warning_always_emitted(self, resolver, anonymous_window):
        """The unresolved warning ignores emit_fallback_warnings."""
        locator = resolver.resolve(anonymous_window.children()[0])

        assert resolver.warning_for(locator) == UNRESOLVED_WARNING


class TestLocatorModel:
    """Tests for Locator invariants."""

    def test_stable_id_rejects_diagnostic(self):
        with pytest.raises(ValidationError):
            Locator(value="x", kind=LocatorKind.STABLE_ID, diagnostic="nope")

    def test_locator_is_frozen(self):
        locator = Locator.stable_id("x")
        with pytest.raises(ValidationError):
            locator.value = "y"

    def test_unscoped(self):
        locator = Locator.unscoped()

        assert locator.value == ""
        assert locator.quality is StepQuality.HIGH
        assert not locator.is_scoped
        assert locator.is_durable

    @pytest.mark.parametrize(
        "kind,quality",
        [
            (LocatorKind.STABLE_ID, StepQuality.HIGH),
            (LocatorKind.DISPLAY_NAME, StepQuality.MEDIUM),
            (LocatorKind.STRUCTURAL_PATH, StepQuality.LOW),
            (LocatorKind.COORDINATE, StepQuality.LOW),
        ],
    )
    def test_quality_follows_kind(self, kind, quality):
        assert Locator(value="v", kind=kind).quality is quality


class TestOwnerMarshalling:
    """Tests for resolution requested off the owner thread."""

    def test_off_thread_resolve_runs_on_owner(self):
        dispatcher = QueueDispatcher()
        window = MemoryNode("Window", root_boundary=True)
        button = window.add(ThreadTrackingNode("Button", stable_id="Go"))
        resolver = LocatorResolver(dispatcher=dispatcher)
        results: list[Locator] = []

        worker = threading.Thread(target=lambda: results.append(resolver.resolve(button)))
        worker.start()
        while worker.is_alive():
            dispatcher.run_pending()
            worker.join(timeout=0.01)
        dispatcher.run_pending()

        assert results == [Locator.stable_id("Go")]
        assert button.reader_threads
        assert all(t is threading.current_thread() for t in button.reader_threads)
