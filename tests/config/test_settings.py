"""Tests for recorder settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from uirecorder.config import (
    AssertionTarget,
    RecorderSettings,
    TestFramework,
    get_settings,
    reset_settings,
)


class TestDefaults:
    def test_defaults(self):
        settings = RecorderSettings(_env_file=None)

        assert settings.prefer_display_name_fallback is False
        assert settings.allow_structural_path_fallback is True
        assert settings.emit_fallback_warnings is True
        assert settings.text_debounce_millis == 500
        assert settings.text_debounce_seconds == 0.5
        assert settings.assertion_target_priority == [
            AssertionTarget.HOVER,
            AssertionTarget.POINTER_HIT_TEST,
            AssertionTarget.FOCUSED,
        ]
        assert settings.test_framework is TestFramework.PYTEST
        assert settings.output_directory == Path("RecordedTests")

    def test_locator_options(self):
        settings = RecorderSettings(_env_file=None, prefer_display_name_fallback=True)

        options = settings.locator_options()

        assert options.prefer_display_name_fallback is True
        assert options.allow_structural_path_fallback is True


class TestEnvironment:
    """Settings come from UIRECORDER_* variables."""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("UIRECORDER_TEXT_DEBOUNCE_MILLIS", "120")
        monkeypatch.setenv("UIRECORDER_TEST_FRAMEWORK", "unittest")
        monkeypatch.setenv("UIRECORDER_ASSERTION_TARGET_PRIORITY", '["focused", "hover"]')

        settings = RecorderSettings(_env_file=None)

        assert settings.text_debounce_millis == 120
        assert settings.test_framework is TestFramework.UNITTEST
        assert settings.assertion_target_priority == [
            AssertionTarget.FOCUSED,
            AssertionTarget.HOVER,
        ]

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("UIRECORDER_APP_NAME=Inventory\n", encoding="utf-8")

        assert RecorderSettings(_env_file=env_file).app_name == "Inventory"


class TestValidation:
    def test_negative_debounce_rejected(self):
        with pytest.raises(ValidationError):
            RecorderSettings(_env_file=None, text_debounce_millis=-1)

    def test_empty_priority_rejected(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            RecorderSettings(_env_file=None, assertion_target_priority=[])

    def test_duplicate_priority_rejected(self):
        with pytest.raises(ValidationError, match="duplicates"):
            RecorderSettings(_env_file=None, assertion_target_priority=["hover", "hover"])

    def test_log_level_normalized(self):
        assert RecorderSettings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError, match="Unknown log level"):
            RecorderSettings(_env_file=None, log_level="chatty")


def test_singleton(monkeypatch):
    monkeypatch.setenv("UIRECORDER_SCENARIO_NAME", "Checkout")
    reset_settings()

    first = get_settings()

    assert first is get_settings()
    assert first.scenario_name == "Checkout"

    reset_settings()
    assert get_settings() is not first
