"""Recorded step definitions."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..locators.types import Locator, StepQuality, quality_for

VALIDATION_FAILED_PREFIX = "VALIDATION FAILED:"


class StepKind(str, Enum):
    """Type of recorded step."""

    CLICK = "click"
    RIGHT_CLICK = "right_click"
    DOUBLE_CLICK = "double_click"
    TYPE_TEXT = "type_text"
    KEY_PRESS = "key_press"
    SCROLL = "scroll"
    HOVER = "hover"
    SELECT_ITEM = "select_item"
    ASSERT_TEXT = "assert_text"
    ASSERT_CHECKED = "assert_checked"
    ASSERT_VISIBLE = "assert_visible"
    ASSERT_ENABLED = "assert_enabled"

    @property
    def is_assertion(self) -> bool:
        return self.value.startswith("assert_")

    @property
    def is_control_scoped(self) -> bool:
        return self is not StepKind.KEY_PRESS


class Step(BaseModel):
    """A single recorded interaction.

    Steps are immutable. ``quality`` always follows ``locator.kind``; it is
    filled in when omitted and rejected when inconsistent.
    """

    model_config = ConfigDict(frozen=True)

    kind: StepKind
    locator: Locator
    parameter: str | None = None
    quality: StepQuality = StepQuality.HIGH
    warning: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="before")
    @classmethod
    def _derive_quality(cls, data):
        if isinstance(data, dict) and data.get("quality") is None:
            locator = data.get("locator")
            if isinstance(locator, Locator):
                data = {**data, "quality": locator.quality}
            elif isinstance(locator, dict) and "kind" in locator:
                data = {**data, "quality": Locator(**locator).quality}
        return data

    @model_validator(mode="after")
    def _quality_matches_locator(self) -> Step:
        expected = quality_for(self.locator.kind)
        if self.quality is not expected:
            raise ValueError(
                f"quality {self.quality.value} does not match locator kind "
                f"{self.locator.kind.value} (expected {expected.value})"
            )
        return self

    @property
    def selector(self) -> str:
        return self.locator.value

    def with_warning(self, warning: str) -> Step:
        """Return a copy with ``warning`` appended to any existing warning."""
        combined = f"{self.warning}; {warning}" if self.warning else warning
        return self.model_copy(update={"warning": combined})

    def with_validation_failure(self, reason: str | None) -> Step:
        """Return a copy flagged as having failed validation."""
        return self.with_warning(f"{VALIDATION_FAILED_PREFIX} {reason or 'unknown reason'}")
