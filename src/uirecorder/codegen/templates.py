"""Templates for generated test modules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from string import Template

from ..config.settings import TestFramework

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def to_identifier(text: str, fallback: str = "Scenario") -> str:
    """Collapse ``text`` into a Python identifier fragment."""
    identifier = re.sub(r"\W+", "_", text).strip("_")
    if not identifier:
        return fallback
    if identifier[0].isdigit():
        identifier = f"_{identifier}"
    return identifier


def to_snake_case(text: str) -> str:
    identifier = to_identifier(text)
    identifier = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", identifier)
    return identifier.lower()


def to_pascal_case(text: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in to_identifier(text).split("_") if part)


def suggest_file_name(app_name: str, scenario_name: str, timestamp: datetime) -> str:
    """File name for an exported scenario.

    Composed of the application id, the scenario id and the timestamp, with a
    ``test_`` prefix so pytest collects it.
    """
    return (
        f"test_{to_snake_case(app_name)}_{to_snake_case(scenario_name)}_"
        f"{timestamp.strftime(TIMESTAMP_FORMAT)}.py"
    )


@dataclass(frozen=True)
class RenderContext:
    """Everything a template needs besides the steps.

    The renderer never reads the clock; the timestamp lives here so the same
    steps and context always render identically.
    """

    namespace: str
    class_name: str
    method_name: str
    app_name: str
    scenario_name: str
    timestamp: datetime

    @classmethod
    def for_scenario(
        cls,
        app_name: str,
        scenario_name: str,
        timestamp: datetime,
        namespace: str | None = None,
        include_timestamp: bool = True,
    ) -> RenderContext:
        """Derive class and method names from the scenario."""
        method_name = f"test_scenario_{to_snake_case(scenario_name)}"
        if include_timestamp:
            method_name += f"_{timestamp.strftime(TIMESTAMP_FORMAT)}"
        return cls(
            namespace=namespace or f"{app_name}.tests",
            class_name=f"TestRecorded{to_pascal_case(scenario_name)}",
            method_name=method_name,
            app_name=app_name,
            scenario_name=scenario_name,
            timestamp=timestamp,
        )


@dataclass(frozen=True)
class CodeTemplate:
    """A module template and the syntax details the renderer needs.

    Attributes:
        name: Template name
        body: ``string.Template`` source with $namespace, $class_name,
            $method_name, $app_name, $scenario_name, $generated_at, $steps
        comment_prefix: Token starting an inline comment
        indent: Indentation of each step line
        empty_body: Line emitted when there are no steps
    """

    name: str
    body: str
    comment_prefix: str = "#"
    indent: str = "        "
    empty_body: str = "pass"

    def fill(self, context: RenderContext, steps: str) -> str:
        return Template(self.body).substitute(
            namespace=context.namespace,
            class_name=context.class_name,
            method_name=context.method_name,
            app_name=context.app_name,
            scenario_name=context.scenario_name,
            generated_at=context.timestamp.isoformat(timespec="seconds"),
            steps=steps,
        )


PYTEST_TEMPLATE = CodeTemplate(
    name="pytest",
    body='''"""Recorded scenario '$scenario_name' for $namespace.

Generated by uirecorder on $generated_at. Review steps marked WARNING,
CRITICAL or VALIDATION FAILED before relying on them. The ``ui`` fixture must
provide a ReplayDriver attached to the application under test.
"""

from uirecorder.replay import ReplayDriver


class $class_name:
    def $method_name(self, ui: ReplayDriver) -> None:
$steps
''',
)

UNITTEST_TEMPLATE = CodeTemplate(
    name="unittest",
    body='''"""Recorded scenario '$scenario_name' for $namespace.

Generated by uirecorder on $generated_at. Review steps marked WARNING,
CRITICAL or VALIDATION FAILED before relying on them.
"""

import unittest

from uirecorder.replay import ReplayDriver


class $class_name(unittest.TestCase):
    def setUp(self) -> None:
        self.ui = self.create_driver()

    def create_driver(self) -> ReplayDriver:
        raise NotImplementedError("Return a ReplayDriver attached to the application under test")

    def $method_name(self) -> None:
        ui = self.ui
$steps
''',
)

_TEMPLATES = {
    TestFramework.PYTEST: PYTEST_TEMPLATE,
    TestFramework.UNITTEST: UNITTEST_TEMPLATE,
}


def template_for(framework: TestFramework) -> CodeTemplate:
    return _TEMPLATES[framework]
