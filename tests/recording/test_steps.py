"""Tests for the Step model."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from uirecorder.locators import Locator, LocatorKind, StepQuality
from uirecorder.recording.steps import VALIDATION_FAILED_PREFIX, Step, StepKind


class TestStepQuality:
    """Quality always follows the locator kind."""

    def test_derived_when_omitted(self):
        locator = Locator(value="Grid[0]", kind=LocatorKind.STRUCTURAL_PATH, diagnostic="d")
        step = Step(kind=StepKind.CLICK, locator=locator)

        assert step.quality is StepQuality.LOW

    def test_derived_from_locator_dict(self):
        step = Step.model_validate(
            {"kind": "click", "locator": {"value": "Ok", "kind": "display_name"}}
        )
        assert step.quality is StepQuality.MEDIUM

    def test_inconsistent_quality_rejected(self):
        with pytest.raises(ValidationError, match="does not match"):
            Step(kind=StepKind.CLICK, locator=Locator.stable_id("Ok"), quality=StepQuality.LOW)

    def test_consistent_quality_accepted(self):
        step = Step(kind=StepKind.CLICK, locator=Locator.stable_id("Ok"), quality=StepQuality.HIGH)
        assert step.quality is StepQuality.HIGH


class TestStepWarnings:
    """Warnings are appended to copies, never to the step itself."""

    def test_with_warning_returns_copy(self):
        step = Step(kind=StepKind.CLICK, locator=Locator.stable_id("Ok"))
        warned = step.with_warning("careful")

        assert step.warning is None
        assert warned.warning == "careful"

    def test_warnings_joined(self):
        step = Step(kind=StepKind.CLICK, locator=Locator.stable_id("Ok"), warning="first")
        assert step.with_warning("second").warning == "first; second"

    def test_validation_failure_marker(self):
        step = Step(kind=StepKind.CLICK, locator=Locator.stable_id("Ok"))
        failed = step.with_validation_failure("not found: Ok")

        assert failed.warning == f"{VALIDATION_FAILED_PREFIX} not found: Ok"

    def test_step_is_frozen(self):
        step = Step(kind=StepKind.CLICK, locator=Locator.stable_id("Ok"))
        with pytest.raises(ValidationError):
            step.parameter = "x"


class TestStepKind:
    def test_assertion_kinds(self):
        assertions = {kind for kind in StepKind if kind.is_assertion}
        assert assertions == {
            StepKind.ASSERT_TEXT,
            StepKind.ASSERT_CHECKED,
            StepKind.ASSERT_VISIBLE,
            StepKind.ASSERT_ENABLED,
        }

    def test_only_key_press_is_unscoped(self):
        assert [kind for kind in StepKind if not kind.is_control_scoped] == [StepKind.KEY_PRESS]


def test_json_round_trip_keeps_fields():
    step = Step(
        kind=StepKind.TYPE_TEXT,
        locator=Locator.stable_id("User"),
        parameter="alice",
        timestamp=datetime(2025, 1, 1, 12, 0, 0),
    )
    assert Step.model_validate_json(step.model_dump_json()) == step
