"""Output formatters for CLI commands."""

import json
from typing import Any

from ..config.settings import RecorderSettings
from ..locators.finder import FindResult
from ..locators.paths import PathSegment, build_path
from ..locators.types import LocatorKind
from ..tree.interfaces import TreeNode


def format_locator_check(value: str, kind: LocatorKind, segments: list[PathSegment]) -> str:
    """Describe how a locator string will be interpreted at replay time.

    Args:
        value: The locator string
        kind: STABLE_ID for bare identifiers, STRUCTURAL_PATH for paths
        segments: Parsed segments (empty for bare identifiers)

    Returns:
        Human-readable description
    """
    lines = [f"Locator: {value}", f"Kind: {kind.value}"]
    if kind is LocatorKind.STRUCTURAL_PATH:
        lines.append(f"Segments: {len(segments)}")
        for depth, segment in enumerate(segments):
            lines.append(f"  {depth}: {segment.type_tag}[{segment.index}]")
    else:
        lines.append("Matched by stable id first, then by display name")
    return "\n".join(lines)


def format_find_result(result: FindResult) -> str:
    node = result.node
    if node is None:
        return "No match"

    lines = [
        f"Strategy: {result.strategy_name}",
        f"Type: {node.type_tag()}",
        f"Path: {build_path(node)}",
    ]
    if node.stable_id():
        lines.append(f"Stable id: {node.stable_id()}")
    if node.display_name():
        lines.append(f"Display name: {node.display_name()}")
    if result.is_ambiguous:
        lines.append(f"Warning: {len(result.candidates)} controls match this locator")
    return "\n".join(lines)


def format_node_summary(node: TreeNode) -> dict[str, Any]:
    return {
        "type": node.type_tag(),
        "id": node.stable_id() or None,
        "name": node.display_name() or None,
        "path": build_path(node),
    }


def format_settings(settings: RecorderSettings) -> str:
    """Render effective settings as JSON."""
    return json.dumps(settings.model_dump(mode="json"), indent=2, sort_keys=True)
