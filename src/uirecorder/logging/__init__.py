"""Logging module for uirecorder."""

from .logger import StepLogger, get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "StepLogger",
]
