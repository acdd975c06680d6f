"""Tests for step validation."""

import pytest

from uirecorder.locators import Locator, LocatorKind, LocatorResolver
from uirecorder.recording.steps import Step, StepKind
from uirecorder.tree import MemoryNode
from uirecorder.validation import AMBIGUOUS_REASON, StepValidator, ValidationResult
from uirecorder.validation.validator import NOT_DURABLE_REASON


def click(locator: Locator) -> Step:
    return Step(kind=StepKind.CLICK, locator=locator)


class TestValidationPasses:
    """Steps whose locator finds the recorded control."""

    def test_unique_stable_id(self, login_window, node_by_id):
        button = node_by_id(login_window, "LoginButton")
        step = click(Locator.stable_id("LoginButton"))
        result = StepValidator(login_window).validate(step, button)

        assert result == ValidationResult(ok=True)

    def test_structural_path(self, anonymous_window):
        button = anonymous_window.children()[0].children()[1]
        locator = LocatorResolver().resolve(button)

        result = StepValidator(anonymous_window).validate(click(locator), button)

        assert result.ok
        assert result.reason is None

    def test_key_press_needs_no_lookup(self, login_window):
        step = Step(kind=StepKind.KEY_PRESS, locator=Locator.unscoped(), parameter="Enter")
        assert StepValidator(login_window).validate(step).ok

    def test_without_original_node_only_lookup_is_checked(self, login_window):
        result = StepValidator(login_window).validate(click(Locator.stable_id("LoginButton")))
        assert result.ok


class TestValidationFailures:
    """Steps whose locator is ambiguous, missing or fragile."""

    def test_duplicate_stable_id(self):
        """Two different nodes sharing an id make the locator ambiguous."""
        window = MemoryNode("Window", root_boundary=True)
        first = window.add(MemoryNode("Button", stable_id="x"))
        window.add(MemoryNode("Panel")).add(MemoryNode("Button", stable_id="x"))

        result = StepValidator(window).validate(click(Locator.stable_id("x")), first)

        assert not result.ok
        assert result.reason == AMBIGUOUS_REASON

    def test_duplicate_stable_id_pointing_at_second(self):
        window = MemoryNode("Window", root_boundary=True)
        window.add(MemoryNode("Button", stable_id="x"))
        second = window.add(MemoryNode("TextBox", stable_id="x"))

        result = StepValidator(window).validate(click(Locator.stable_id("x")), second)

        assert result.reason == "locator is ambiguous — multiple nodes may share it"

    def test_display_name_resolving_elsewhere(self):
        """A shared display name finds the first control, not the recorded one."""
        window = MemoryNode("Window", root_boundary=True)
        window.add(MemoryNode("Button", display_name="OK"))
        recorded = window.add(MemoryNode("Button", display_name="OK"))
        locator = Locator(value="OK", kind=LocatorKind.DISPLAY_NAME, diagnostic="fallback")

        result = StepValidator(window).validate(click(locator), recorded)

        assert result.reason == AMBIGUOUS_REASON

    def test_not_found(self, login_window, node_by_id):
        result = StepValidator(login_window).validate(
            click(Locator.stable_id("Gone")), node_by_id(login_window, "LoginButton")
        )

        assert not result.ok
        assert result.reason == "not found: Gone"

    def test_malformed_path(self, login_window):
        locator = Locator(value="Grid[x]", kind=LocatorKind.STRUCTURAL_PATH, diagnostic="d")

        result = StepValidator(login_window).validate(click(locator))

        assert not result.ok
        assert result.reason.startswith("not found: Grid[x]")

    def test_coordinate_sentinel_is_not_durable(self, anonymous_window):
        locator = Locator(value="Button_NoId", kind=LocatorKind.COORDINATE, diagnostic="d")

        result = StepValidator(anonymous_window).validate(click(locator))

        assert result == ValidationResult.failed(NOT_DURABLE_REASON)


@pytest.mark.parametrize("ok,reason", [(True, None), (False, "why")])
def test_result_constructors(ok, reason):
    result = ValidationResult.passed() if ok else ValidationResult.failed(reason)
    assert (result.ok, result.reason) == (ok, reason)
