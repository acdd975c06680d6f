"""Configuration management for uirecorder using pydantic-settings.

Supports environment variables (``UIRECORDER_`` prefix), .env files and type
validation. Sessions take an explicit settings object; ``get_settings`` gives
the process-wide default.
"""

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from ..locators.types import LocatorOptions


class AssertionTarget(str, Enum):
    """Sources for the target of an assertion capture, in priority order."""

    HOVER = "hover"
    POINTER_HIT_TEST = "pointer_hit_test"
    FOCUSED = "focused"


class TestFramework(str, Enum):
    """Test frameworks the renderer can emit code for."""

    __test__ = False

    PYTEST = "pytest"
    UNITTEST = "unittest"


class RecorderSettings(BaseSettings):
    """Main configuration settings for the recorder."""

    model_config = SettingsConfigDict(
        env_prefix="UIRECORDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Locator resolution
    prefer_display_name_fallback: bool = Field(
        False, description="Try the nearest display name before a structural path"
    )
    allow_structural_path_fallback: bool = Field(
        True, description="Allow structural path locators when no stable id exists"
    )
    emit_fallback_warnings: bool = Field(
        True, description="Attach warning comments to steps with fallback locators"
    )

    # Recording
    text_debounce_millis: int = Field(
        500, ge=0, description="Quiet period before coalesced text becomes a step"
    )
    assertion_target_priority: list[AssertionTarget] = Field(
        default_factory=lambda: [
            AssertionTarget.HOVER,
            AssertionTarget.POINTER_HIT_TEST,
            AssertionTarget.FOCUSED,
        ],
        description="Order in which assertion capture picks its target",
    )
    validate_steps: bool = Field(
        True, description="Re-resolve every recorded step through the replay finder"
    )

    # Export
    scenario_name: str = Field("Scenario", description="Scenario name used in file naming")
    app_name: str = Field("App", description="Application identifier used in file naming")
    output_directory: Path = Field(
        Path("RecordedTests"), description="Directory for saved test files"
    )
    test_framework: TestFramework = Field(
        TestFramework.PYTEST, description="Framework of the generated test code"
    )
    namespace: str | None = Field(
        None, description="Module docstring namespace; derived from app_name when unset"
    )
    include_timestamp: bool = Field(True, description="Include timestamp in the test name")

    # Hotkeys
    hotkey_start_stop: str = Field("Ctrl+Shift+R", description="Start/stop recording")
    hotkey_pause_resume: str = Field("Ctrl+Shift+P", description="Pause/resume recording")
    hotkey_save: str = Field("Ctrl+Shift+S", description="Save the recorded test")
    hotkey_capture_assert: str = Field("Ctrl+Shift+A", description="Capture an assertion")

    # Logging
    log_level: str = Field("INFO", description="Log level")
    log_path: Path | None = Field(None, description="Directory for log files")
    structured_logs: bool = Field(False, description="Emit JSON log lines")

    @field_validator("assertion_target_priority")
    @classmethod
    def _check_priority(cls, value: list[AssertionTarget]) -> list[AssertionTarget]:
        if not value:
            raise ValueError("assertion_target_priority must not be empty")
        if len(set(value)) != len(value):
            raise ValueError("assertion_target_priority must not contain duplicates")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def text_debounce_seconds(self) -> float:
        return self.text_debounce_millis / 1000.0

    def locator_options(self) -> "LocatorOptions":
        """Narrow these settings to the options the resolver needs."""
        from ..locators.types import LocatorOptions

        return LocatorOptions(
            prefer_display_name_fallback=self.prefer_display_name_fallback,
            allow_structural_path_fallback=self.allow_structural_path_fallback,
            emit_fallback_warnings=self.emit_fallback_warnings,
        )


# Singleton instance
_settings: RecorderSettings | None = None


def get_settings() -> RecorderSettings:
    """Get the singleton settings instance.

    Returns:
        RecorderSettings instance
    """
    global _settings

    if _settings is None:
        _settings = RecorderSettings()

    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (mainly for testing)."""
    global _settings
    _settings = None
