"""Assertion value extraction.

An ordered table of ``(predicate, handler)`` rules turns the control under an
assertion capture into an ``ASSERT_*`` step. The first rule whose predicate
accepts the control and whose handler produces a value wins.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..tree.interfaces import TreeNode
from .steps import StepKind

TEXT_INPUT_TYPES = frozenset({"TextBox", "AutoCompleteBox", "MaskedTextBox", "NumericUpDown"})
TEXT_DISPLAY_TYPES = frozenset({"TextBlock", "Label", "SelectableTextBlock"})
TOGGLE_TYPES = frozenset({"CheckBox", "RadioButton", "ToggleButton", "ToggleSwitch"})


@dataclass(frozen=True)
class Extraction:
    """The assertion a rule extracted: a step kind and its parameter."""

    kind: StepKind
    parameter: str | None = None


@dataclass(frozen=True)
class ExtractionRule:
    """One entry of the extraction table.

    Attributes:
        name: Rule name for logging
        predicate: Whether the rule applies to a control
        handler: Produces the assertion, or None to defer to later rules
    """

    name: str
    predicate: Callable[[TreeNode], bool]
    handler: Callable[[TreeNode], Extraction | None]


def format_checked(value: bool | None) -> str:
    """Encode a checked state as a step parameter."""
    if value is None:
        return "null"
    return "true" if value else "false"


def _type_in(types: frozenset[str]) -> Callable[[TreeNode], bool]:
    return lambda node: node.type_tag() in types


def _text_of(node: TreeNode) -> Extraction:
    return Extraction(StepKind.ASSERT_TEXT, node.text() or "")


def _checked_of(node: TreeNode) -> Extraction:
    return Extraction(StepKind.ASSERT_CHECKED, format_checked(node.checked()))


def _content_text_of(node: TreeNode) -> Extraction | None:
    text = node.text()
    if not text:
        return None
    return Extraction(StepKind.ASSERT_TEXT, text)


def default_rules() -> list[ExtractionRule]:
    """Built-in rules for common controls."""
    return [
        ExtractionRule("text_input", _type_in(TEXT_INPUT_TYPES), _text_of),
        ExtractionRule("text_display", _type_in(TEXT_DISPLAY_TYPES), _text_of),
        ExtractionRule(
            "toggle",
            lambda node: node.type_tag() in TOGGLE_TYPES or node.is_checkable(),
            _checked_of,
        ),
        ExtractionRule("content_text", lambda node: True, _content_text_of),
    ]


class AssertExtractors:
    """First-match-wins table of extraction rules.

    Example:
        >>> extractors = AssertExtractors()
        >>> extractors.prepend(
        ...     ExtractionRule(
        ...         "slider",
        ...         lambda n: n.type_tag() == "Slider",
        ...         lambda n: Extraction(StepKind.ASSERT_TEXT, n.text()),
        ...     )
        ... )
    """

    def __init__(self, rules: Iterable[ExtractionRule] | None = None) -> None:
        self.rules: list[ExtractionRule] = list(default_rules() if rules is None else rules)

    def add(self, rule: ExtractionRule) -> None:
        """Append a rule; it only runs when every earlier rule declines."""
        self.rules.append(rule)

    def prepend(self, rule: ExtractionRule) -> None:
        """Insert a rule ahead of every existing rule."""
        self.rules.insert(0, rule)

    def extract(self, node: TreeNode) -> tuple[ExtractionRule, Extraction] | None:
        """Run the table against ``node``.

        Returns:
            The winning rule and its extraction, or None when no rule matched
        """
        for rule in self.rules:
            if not rule.predicate(node):
                continue
            extraction = rule.handler(node)
            if extraction is not None:
                return rule, extraction
        return None
