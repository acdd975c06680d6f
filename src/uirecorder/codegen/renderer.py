"""Step rendering.

Turns an ordered list of recorded steps into the source of a test module.
Each step is formatted by the first rule in an ordered ``(predicate,
formatter)`` table that accepts it; steps no rule accepts become a comment
placeholder.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from ..logging import get_logger
from ..recording.steps import Step, StepKind
from .templates import PYTEST_TEMPLATE, CodeTemplate, RenderContext

logger = get_logger(__name__)


def escape_string(value: str | None) -> str:
    """Render ``value`` as a double-quoted string literal."""
    return json.dumps(value or "", ensure_ascii=False)


def format_number(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return repr(value)


def parse_scroll(parameter: str | None) -> tuple[float, float]:
    """Parse a ``"dx, dy"`` scroll parameter; missing or bad parts are 0."""
    deltas = [0.0, 0.0]
    for position, part in enumerate((parameter or "").split(",")[:2]):
        try:
            deltas[position] = float(part.strip())
        except ValueError:
            continue
    return deltas[0], deltas[1]


def _checked_literal(parameter: str | None) -> str:
    return {"true": "True", "false": "False"}.get((parameter or "").strip().lower(), "None")


@dataclass(frozen=True)
class RenderRule:
    """One entry of the rendering table."""

    predicate: Callable[[Step], bool]
    formatter: Callable[[Step], str]


def for_kind(kind: StepKind, formatter: Callable[[Step], str]) -> RenderRule:
    return RenderRule(lambda step: step.kind is kind, formatter)


def _call(method: str, *args: str) -> str:
    return f"ui.{method}({', '.join(args)})"


def _selector_literal(step: Step) -> str:
    return escape_string(step.selector)


def _targeted(method: str) -> Callable[[Step], str]:
    """Formatter for ``ui.method(selector)``."""
    return lambda step: _call(method, _selector_literal(step))


def _targeted_with_text(method: str) -> Callable[[Step], str]:
    """Formatter for ``ui.method(selector, "parameter")``."""
    return lambda step: _call(method, _selector_literal(step), escape_string(step.parameter))


def _key_press(step: Step) -> str:
    return _call("key_press", escape_string(step.parameter))


def _scroll(step: Step) -> str:
    dx, dy = parse_scroll(step.parameter)
    return _call("scroll", _selector_literal(step), format_number(dx), format_number(dy))


def _assert_checked(step: Step) -> str:
    return _call("assert_checked", _selector_literal(step), _checked_literal(step.parameter))


def default_rules() -> list[RenderRule]:
    """Rules emitting ReplayDriver calls for every StepKind."""
    return [
        for_kind(StepKind.CLICK, _targeted("click")),
        for_kind(StepKind.RIGHT_CLICK, _targeted("right_click")),
        for_kind(StepKind.DOUBLE_CLICK, _targeted("double_click")),
        for_kind(StepKind.HOVER, _targeted("hover")),
        for_kind(StepKind.TYPE_TEXT, _targeted_with_text("type_text")),
        for_kind(StepKind.KEY_PRESS, _key_press),
        for_kind(StepKind.SCROLL, _scroll),
        for_kind(StepKind.SELECT_ITEM, _targeted_with_text("select_item")),
        for_kind(StepKind.ASSERT_TEXT, _targeted_with_text("assert_text")),
        for_kind(StepKind.ASSERT_CHECKED, _assert_checked),
        for_kind(StepKind.ASSERT_VISIBLE, _targeted("assert_visible")),
        for_kind(StepKind.ASSERT_ENABLED, _targeted("assert_enabled")),
    ]


class StepRenderer:
    """Renders recorded steps into test source.

    Example:
        >>> renderer = StepRenderer()
        >>> context = RenderContext.for_scenario("SampleApp", "Login", datetime(2025, 1, 1))
        >>> source = renderer.render(session.current_steps(), context)
    """

    def __init__(
        self,
        template: CodeTemplate | None = None,
        rules: Iterable[RenderRule] | None = None,
    ) -> None:
        self.template = template or PYTEST_TEMPLATE
        self.rules: list[RenderRule] = list(default_rules() if rules is None else rules)

    def render_step(self, step: Step) -> str:
        """Render one step as a single line (without indentation)."""
        comment = self.template.comment_prefix
        for rule in self.rules:
            if rule.predicate(step):
                line = rule.formatter(step)
                break
        else:
            logger.warning("no_render_rule", kind=step.kind.value)
            line = f"{comment} Unknown step kind: {step.kind.value}"

        if step.warning:
            line += f"  {comment} {step.warning}"
        return line

    def render_steps(self, steps: Sequence[Step]) -> str:
        indent = self.template.indent
        lines = [self.render_step(step) for step in steps]
        # A body made only of comments is not a valid block
        if all(line.startswith(self.template.comment_prefix) for line in lines):
            lines.append(self.template.empty_body)
        return "\n".join(f"{indent}{line}" for line in lines)

    def render(self, steps: Sequence[Step], context: RenderContext) -> str:
        """Render a complete test module.

        Args:
            steps: Steps in recording order
            context: Names and timestamp for the module

        Returns:
            Module source text
        """
        return self.template.fill(context, self.render_steps(steps))
