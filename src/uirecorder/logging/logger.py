"""Structured logging configuration for uirecorder using structlog.

Provides structured logging with context preservation for recording sessions,
locator resolution and replay.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, cast

import structlog

DISABLE_ENV_VAR = "UIRECORDER_DISABLE_CONSOLE_LOGGING"


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    structured: bool = True,
    console: bool = True,
    add_timestamp: bool = True,
    add_caller_info: bool = True,
    colorize: bool = True,
) -> None:
    """Configure structured logging for uirecorder.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        structured: Use JSON structured output
        console: Enable console output (overridden by UIRECORDER_DISABLE_CONSOLE_LOGGING)
        add_timestamp: Add timestamps to logs
        add_caller_info: Add caller information
        colorize: Colorize console output (only for non-structured)
    """
    if os.getenv(DISABLE_ENV_VAR) == "1":
        console = False
        log_file = None

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if add_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            )
        )

    processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
    )

    if structured:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colorize and console))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = []

    if console:
        # stdout stays free for generated code and CLI output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)

    if not handlers:
        handlers.append(logging.NullHandler())
        level = "CRITICAL"

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        handlers=handlers,
        force=True,
    )


_logging_initialized = False


def _ensure_logging_initialized() -> None:
    """Ensure logging is initialized (called lazily, not at import time)."""
    global _logging_initialized

    if _logging_initialized:
        return

    if os.getenv(DISABLE_ENV_VAR) == "1":
        # Route structlog through stdlib so nothing reaches stdout
        setup_logging(console=False)
        _logging_initialized = True
        return

    # Imported here: config imports the locator types, which log through this module
    from ..config import get_settings

    try:
        settings = get_settings()
        log_file = None
        if settings.log_path is not None:
            log_file = settings.log_path / f"uirecorder_{datetime.now().strftime('%Y%m%d')}.log"
        setup_logging(
            level=settings.log_level,
            log_file=log_file,
            structured=settings.structured_logs,
            colorize=not settings.structured_logs,
        )
    except (ValueError, OSError):
        # Invalid environment settings or unwritable log path
        setup_logging(level="INFO", structured=False)

    _logging_initialized = True


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    _ensure_logging_initialized()
    return cast(structlog.BoundLogger, structlog.get_logger(name))


class StepLogger:
    """Specialized logger for recorded steps and recorder state."""

    def __init__(self, base_logger: structlog.BoundLogger | None = None) -> None:
        """Initialize step logger.

        Args:
            base_logger: Base logger to use
        """
        self.logger = base_logger or get_logger(__name__)

    def log_step(self, kind: str, locator: str, quality: str, **kwargs) -> None:
        """Log a recorded step.

        Args:
            kind: Step kind
            locator: Locator value
            quality: Locator quality
            **kwargs: Additional context
        """
        self.logger.debug("step_recorded", kind=kind, locator=locator, quality=quality, **kwargs)

    def log_validation_failure(self, kind: str, locator: str, reason: str | None, **kwargs) -> None:
        """Log a step whose locator did not re-resolve to the recorded control."""
        self.logger.warning(
            "step_validation_failed", kind=kind, locator=locator, reason=reason, **kwargs
        )

    def log_state_change(self, from_state: str, to_state: str, **kwargs) -> None:
        """Log a recorder state transition.

        Args:
            from_state: Previous state
            to_state: New state
            **kwargs: Additional context
        """
        self.logger.info(
            "recorder_state_changed", from_state=from_state, to_state=to_state, **kwargs
        )
