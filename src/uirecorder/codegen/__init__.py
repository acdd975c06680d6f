"""Rendering of recorded steps into test source."""

from .renderer import RenderRule, StepRenderer, default_rules, escape_string, for_kind
from .templates import (
    PYTEST_TEMPLATE,
    UNITTEST_TEMPLATE,
    CodeTemplate,
    RenderContext,
    suggest_file_name,
    template_for,
)

__all__ = [
    "StepRenderer",
    "RenderRule",
    "default_rules",
    "for_kind",
    "escape_string",
    "CodeTemplate",
    "RenderContext",
    "PYTEST_TEMPLATE",
    "UNITTEST_TEMPLATE",
    "template_for",
    "suggest_file_name",
]
