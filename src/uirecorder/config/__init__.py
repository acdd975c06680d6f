"""Configuration package for uirecorder."""

from .settings import (
    AssertionTarget,
    RecorderSettings,
    TestFramework,
    get_settings,
    reset_settings,
)

__all__ = [
    "AssertionTarget",
    "RecorderSettings",
    "TestFramework",
    "get_settings",
    "reset_settings",
]
