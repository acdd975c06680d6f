"""Exception classes for uirecorder.

This module contains the root exception hierarchy for locator resolution,
replay and configuration failures. Validation mismatches are not exceptions:
they are reported as values by the step validator.
"""

from typing import Any


class RecorderException(Exception):
    """Base exception for all uirecorder errors.

    Attributes:
        message: Human-readable error message
        error_code: Optional error code for programmatic handling
        context: Additional context information
    """

    def __init__(
        self, message: str, error_code: str | None = None, context: dict[str, Any] | None = None
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message
            error_code: Optional error code
            context: Optional context dictionary
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class LocatorResolutionError(RecorderException):
    """Raised when no lookup strategy could match a locator.

    Carries the attempted locator and every stable id known in the tree so a
    human can repair the locator.
    """

    def __init__(
        self,
        locator: str,
        known_ids: list[str] | None = None,
        message: str | None = None,
        error_code: str = "LOCATOR_UNRESOLVED",
    ) -> None:
        self.locator = locator
        self.known_ids = list(known_ids or [])
        if message is None:
            message = f"Locator could not be resolved: '{locator}'"
        super().__init__(
            message,
            error_code=error_code,
            context={"locator": locator, "known_ids": self.known_ids},
        )


class MalformedLocatorError(LocatorResolutionError):
    """Raised when a structural path cannot be parsed."""

    def __init__(self, locator: str, detail: str, known_ids: list[str] | None = None) -> None:
        self.detail = detail
        super().__init__(
            locator,
            known_ids,
            message=f"Malformed structural path '{locator}': {detail}",
            error_code="LOCATOR_MALFORMED",
        )


class ControlNotFoundError(LocatorResolutionError):
    """Raised at replay time when a control cannot be found in the tree."""

    def __init__(self, locator: str, known_ids: list[str] | None = None) -> None:
        ids = ", ".join(known_ids or []) or "<none>"
        super().__init__(
            locator,
            known_ids,
            message=(
                f"Control not found: '{locator}'. Available stable ids: {ids}. "
                "Structural path failures may indicate tree differences between "
                "recording and replay."
            ),
            error_code="CONTROL_NOT_FOUND",
        )


class ReplayAssertionError(RecorderException):
    """Raised when a replayed assertion does not hold."""

    def __init__(self, locator: str, expected: Any, actual: Any, what: str = "value") -> None:
        self.locator = locator
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Assert failed for '{locator}': expected {what} {expected!r}, but got {actual!r}",
            error_code="ASSERTION_FAILED",
            context={"locator": locator, "expected": expected, "actual": actual},
        )


class ReplayTimeoutError(RecorderException):
    """Raised when a replay wait expires before its condition holds."""

    def __init__(self, locator: str, timeout: float) -> None:
        self.locator = locator
        self.timeout = timeout
        super().__init__(
            f"Timeout waiting for condition on '{locator}' after {timeout}s",
            error_code="REPLAY_TIMEOUT",
            context={"locator": locator, "timeout": timeout},
        )


class ConfigurationError(RecorderException):
    """Raised when recorder configuration is invalid."""

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message, error_code="CONFIGURATION_ERROR", context={"key": key})
