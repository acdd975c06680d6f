"""uirecorder CLI - Main entry point.

Provides commands for checking locators, replaying lookups against tree
snapshots and rendering recorded steps into test modules.

Exit codes:
    0: Success
    1: Lookup failed
    2: Configuration or input error
"""

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

import click
from pydantic import TypeAdapter, ValidationError

from .. import __version__
from ..codegen import RenderContext, StepRenderer, suggest_file_name, template_for
from ..config.settings import RecorderSettings, TestFramework
from ..exceptions import LocatorResolutionError, MalformedLocatorError
from ..locators.finder import ReplayFinder
from ..locators.paths import looks_like_path, parse_path
from ..locators.types import LocatorKind
from ..logging import setup_logging
from ..recording.steps import Step
from ..tree.memory import MemoryNode
from ..tree.walk import describe_tree
from .formatters import (
    format_find_result,
    format_locator_check,
    format_node_summary,
    format_settings,
)

# Exit codes
EXIT_SUCCESS = 0
EXIT_LOOKUP_FAILED = 1
EXIT_INPUT_ERROR = 2

_STEP_LIST = TypeAdapter(list[Step])


def _configure_logging(verbose: bool) -> None:
    setup_logging(
        level="DEBUG" if verbose else "WARNING",
        structured=False,
        add_caller_info=verbose,
        colorize=False,
    )


def _read_json(path: str) -> Any | None:
    """Read a JSON file, reporting problems on stderr."""
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        click.echo(f"Error: Invalid JSON in {path}: {e}", err=True)
    except OSError as e:
        click.echo(f"Error: Cannot read {path}: {e}", err=True)
    return None


def load_tree(path: str) -> MemoryNode | None:
    """Load a tree snapshot written as nested JSON.

    Args:
        path: Path to the snapshot

    Returns:
        The root node, or None if the snapshot cannot be loaded
    """
    data = _read_json(path)
    if data is None:
        return None
    if not isinstance(data, dict):
        click.echo(f"Error: Tree snapshot must be a JSON object: {path}", err=True)
        return None
    try:
        return MemoryNode.from_dict(data)
    except (ValueError, TypeError) as e:
        click.echo(f"Error: Invalid tree snapshot {path}: {e}", err=True)
        return None


def load_steps(path: str) -> list[Step] | None:
    """Load recorded steps from a JSON list (or an object with a ``steps`` key)."""
    data = _read_json(path)
    if data is None:
        return None
    if isinstance(data, dict):
        data = data.get("steps", [])
    try:
        return _STEP_LIST.validate_python(data)
    except ValidationError as e:
        click.echo(f"Error: Invalid steps in {path}:\n{e}", err=True)
        return None


@click.group()
@click.version_option(version=__version__, prog_name="uirecorder")
@click.pass_context
def main(ctx: click.Context) -> None:
    """uirecorder CLI - Record, validate and replay UI locators.

    Inspect locators, search tree snapshots and render recorded steps.
    """
    ctx.ensure_object(dict)


@main.command("check-locator")
@click.argument("locator")
def check_locator(locator: str) -> None:
    """Check how a locator string is interpreted.

    LOCATOR: A stable id, display name or structural path such as
    "StackPanel[0]/Button[1]"
    """
    if not locator:
        click.echo("Error: Locator is empty", err=True)
        sys.exit(EXIT_INPUT_ERROR)

    if not looks_like_path(locator):
        click.echo(format_locator_check(locator, LocatorKind.STABLE_ID, []))
        sys.exit(EXIT_SUCCESS)

    try:
        segments = parse_path(locator)
    except MalformedLocatorError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(EXIT_INPUT_ERROR)

    click.echo(format_locator_check(locator, LocatorKind.STRUCTURAL_PATH, segments))
    sys.exit(EXIT_SUCCESS)


@main.command()
@click.argument("tree_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("locator")
@click.option("--json", "as_json", is_flag=True, help="Print the match as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def find(tree_path: str, locator: str, as_json: bool, verbose: bool) -> None:
    """Find a control in a tree snapshot the way replay does.

    TREE_PATH: Path to a JSON tree snapshot

    LOCATOR: The locator to resolve
    """
    _configure_logging(verbose)

    root = load_tree(tree_path)
    if root is None:
        sys.exit(EXIT_INPUT_ERROR)

    finder = ReplayFinder(root)
    try:
        result = finder.locate(locator)
    except MalformedLocatorError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(EXIT_INPUT_ERROR)
    except LocatorResolutionError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(EXIT_LOOKUP_FAILED)

    if as_json:
        summary = format_node_summary(result.node)
        summary["strategy"] = result.strategy_name
        summary["matches"] = len(result.candidates)
        click.echo(json.dumps(summary, indent=2))
    else:
        click.echo(format_find_result(result))
    sys.exit(EXIT_SUCCESS)


@main.command()
@click.argument("tree_path", type=click.Path(exists=True, dir_okay=False))
def tree(tree_path: str) -> None:
    """Print an indented dump of a tree snapshot.

    TREE_PATH: Path to a JSON tree snapshot
    """
    root = load_tree(tree_path)
    if root is None:
        sys.exit(EXIT_INPUT_ERROR)
    click.echo(describe_tree(root))
    sys.exit(EXIT_SUCCESS)


@main.command()
@click.argument("steps_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--framework",
    "-f",
    type=click.Choice([framework.value for framework in TestFramework]),
    help="Test framework of the generated module",
)
@click.option("--app", "app_name", help="Application identifier")
@click.option("--scenario", "scenario_name", help="Scenario name")
@click.option(
    "--timestamp",
    type=click.DateTime(formats=["%Y-%m-%dT%H:%M:%S", "%Y%m%d_%H%M%S"]),
    help="Generation timestamp (default: now)",
)
@click.option("--output-dir", "-o", type=click.Path(file_okay=False), help="Write into directory")
def render(
    steps_path: str,
    framework: str | None,
    app_name: str | None,
    scenario_name: str | None,
    timestamp: datetime | None,
    output_dir: str | None,
) -> None:
    """Render recorded steps into a test module.

    STEPS_PATH: Path to a JSON list of recorded steps
    """
    try:
        settings = RecorderSettings()
    except ValidationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(EXIT_INPUT_ERROR)

    steps = load_steps(steps_path)
    if steps is None:
        sys.exit(EXIT_INPUT_ERROR)

    app = app_name or settings.app_name
    scenario = scenario_name or settings.scenario_name
    when = timestamp or datetime.now()
    selected = TestFramework(framework) if framework else settings.test_framework

    context = RenderContext.for_scenario(
        app,
        scenario,
        when,
        namespace=settings.namespace,
        include_timestamp=settings.include_timestamp,
    )
    code = StepRenderer(template_for(selected)).render(steps, context)

    if output_dir is None:
        click.echo(code, nl=False)
        sys.exit(EXIT_SUCCESS)

    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / suggest_file_name(app, scenario, when)
    path.write_text(code, encoding="utf-8")
    click.echo(f"Test saved to: {path}")
    sys.exit(EXIT_SUCCESS)


@main.command()
def settings() -> None:
    """Print the effective recorder settings as JSON.

    Values come from UIRECORDER_* environment variables and .env.
    """
    try:
        effective = RecorderSettings()
    except ValidationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(EXIT_INPUT_ERROR)
    click.echo(format_settings(effective))
    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
