"""Validation of recorded steps against the live tree."""

from .validator import AMBIGUOUS_REASON, StepValidator, ValidationResult

__all__ = ["StepValidator", "ValidationResult", "AMBIGUOUS_REASON"]
