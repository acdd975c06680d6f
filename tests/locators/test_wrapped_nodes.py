"""Tests for trees exposed through adapters that re-wrap nodes on navigation."""

from collections.abc import Sequence

import pytest

from uirecorder.dispatch import ImmediateDispatcher
from uirecorder.locators import LocatorKind, LocatorResolver, ReplayFinder
from uirecorder.locators.paths import same_type_index, structurally_equal
from uirecorder.recording import Step, StepKind
from uirecorder.recording.coalescer import TextCoalescer
from uirecorder.tree import MemoryNode, TreeNode
from uirecorder.validation import StepValidator


class WrappedNode(TreeNode):
    """Adapter returning a fresh wrapper from every parent()/children() call."""

    def __init__(self, inner: MemoryNode) -> None:
        self.inner = inner

    def __eq__(self, other: object) -> bool:
        return isinstance(other, WrappedNode) and other.inner is self.inner

    def __hash__(self) -> int:
        return id(self.inner)

    def stable_id(self) -> str:
        return self.inner.stable_id()

    def display_name(self) -> str:
        return self.inner.display_name()

    def type_tag(self) -> str:
        return self.inner.type_tag()

    def parent(self) -> TreeNode | None:
        parent = self.inner.parent()
        return WrappedNode(parent) if parent is not None else None

    def children(self) -> Sequence[TreeNode]:
        return [WrappedNode(child) for child in self.inner.children()]

    def is_root_boundary(self) -> bool:
        return self.inner.is_root_boundary()


@pytest.fixture
def third_button(anonymous_window) -> WrappedNode:
    return WrappedNode(anonymous_window.children()[0].children()[2])


class TestWrappedNodes:
    """Nodes are matched by equality, not identity."""

    def test_same_type_index(self, third_button):
        assert same_type_index(third_button) == 2

    def test_resolves_structural_path(self, third_button):
        locator = LocatorResolver().resolve(third_button)

        assert locator.kind is LocatorKind.STRUCTURAL_PATH
        assert locator.value == "Panel[0]/Button[2]"

    def test_finder_round_trip(self, anonymous_window, third_button):
        root = WrappedNode(anonymous_window)
        locator = LocatorResolver().resolve(third_button)

        found = ReplayFinder(root).find(locator)

        assert found == third_button
        assert structurally_equal(found, third_button)

    def test_validation_passes(self, anonymous_window, third_button):
        locator = LocatorResolver().resolve(third_button)
        step = Step(kind=StepKind.CLICK, locator=locator)

        assert StepValidator(WrappedNode(anonymous_window)).validate(step, third_button).ok

    def test_coalescer_keeps_target_across_wrappers(self, anonymous_window, manual_timer):
        flushed = []
        coalescer = TextCoalescer(
            lambda target, text: flushed.append(text), ImmediateDispatcher(), timer=manual_timer
        )
        inner = anonymous_window.children()[0].children()[0]

        for char in "abc":
            coalescer.feed(WrappedNode(inner), char)

        assert flushed == []
        assert coalescer.buffer == "abc"
