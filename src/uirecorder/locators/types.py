"""Locator type definitions.

Pydantic models for locators and the options that govern how they are
resolved.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

DISPLAY_NAME_DIAGNOSTIC = "fallback: display name"
STRUCTURAL_PATH_DIAGNOSTIC = "fallback: structural path — high risk of breakage"
UNRESOLVED_DIAGNOSTIC = "error: no stable locator available"


class LocatorKind(str, Enum):
    """How a locator identifies its control, from most to least durable."""

    STABLE_ID = "stable_id"
    DISPLAY_NAME = "display_name"
    STRUCTURAL_PATH = "structural_path"
    COORDINATE = "coordinate"


class StepQuality(str, Enum):
    """Trust level of a recorded step, derived from its locator kind."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


_QUALITY_BY_KIND = {
    LocatorKind.STABLE_ID: StepQuality.HIGH,
    LocatorKind.DISPLAY_NAME: StepQuality.MEDIUM,
    LocatorKind.STRUCTURAL_PATH: StepQuality.LOW,
    LocatorKind.COORDINATE: StepQuality.LOW,
}


def quality_for(kind: LocatorKind) -> StepQuality:
    """Map a locator kind to the quality of steps using it."""
    return _QUALITY_BY_KIND[kind]


class Locator(BaseModel):
    """A string that identifies one control in a tree.

    Immutable once created. A stable-id locator never carries a diagnostic.
    """

    model_config = ConfigDict(frozen=True)

    value: str = Field(description="Stable id, display name, or structural path")
    kind: LocatorKind = Field(description="Strategy that produced the value")
    diagnostic: str | None = Field(None, description="Why a fallback was used")

    @model_validator(mode="after")
    def _stable_id_has_no_diagnostic(self) -> Locator:
        if self.kind is LocatorKind.STABLE_ID and self.diagnostic is not None:
            raise ValueError("stable id locators cannot carry a diagnostic")
        return self

    @classmethod
    def stable_id(cls, value: str) -> Locator:
        return cls(value=value, kind=LocatorKind.STABLE_ID)

    @classmethod
    def unscoped(cls) -> Locator:
        """Locator for steps that do not target a control (key presses)."""
        return cls(value="", kind=LocatorKind.STABLE_ID)

    @property
    def quality(self) -> StepQuality:
        return quality_for(self.kind)

    @property
    def is_durable(self) -> bool:
        """Whether the locator may be persisted and looked up again."""
        return self.kind is not LocatorKind.COORDINATE

    @property
    def is_scoped(self) -> bool:
        return bool(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LocatorOptions:
    """Options for locator resolution.

    Attributes:
        prefer_display_name_fallback: Try the nearest display name before a path
        allow_structural_path_fallback: Allow structural path locators
        emit_fallback_warnings: Attach warnings to steps with fallback locators
    """

    prefer_display_name_fallback: bool = False
    allow_structural_path_fallback: bool = True
    emit_fallback_warnings: bool = True
