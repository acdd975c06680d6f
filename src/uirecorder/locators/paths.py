"""Structural paths.

A structural path names a control by its position in the tree:
``Type[idx]/Type[idx]/...`` from just below the root boundary down to the
control. ``idx`` is zero-based and counts only siblings sharing the same type
tag, so inserting siblings of unrelated types does not change the path.
Type tags may contain any character except the separator.

The same algorithm serves the resolver (building paths), the validator
(comparing controls) and the replay finder (parsing paths).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..exceptions import MalformedLocatorError
from ..tree.interfaces import TreeNode
from ..tree.walk import ancestors

SEPARATOR = "/"

# The tag is everything before the trailing [index], so tags may contain spaces
_SEGMENT_RE = re.compile(r"^\s*(\S(?:.*\S)?)\s*\[(\d+)\]\s*$")


@dataclass(frozen=True)
class PathSegment:
    """One ``Type[index]`` step of a structural path."""

    type_tag: str
    index: int

    def __str__(self) -> str:
        return f"{self.type_tag}[{self.index}]"


def looks_like_path(value: str) -> bool:
    """Check whether a locator string uses structural path syntax."""
    return SEPARATOR in value or "[" in value


def same_type_index(node: TreeNode) -> int:
    """Position of ``node`` among its parent's children of the same type tag."""
    parent = node.parent()
    if parent is None:
        return 0
    type_tag = node.type_tag()
    index = 0
    for sibling in parent.children():
        if sibling == node:
            return index
        if sibling.type_tag() == type_tag:
            index += 1
    # Not listed by its parent; treat it as the only one of its type
    return 0


def path_segments(node: TreeNode) -> list[PathSegment]:
    """Segments from just below the root boundary down to ``node``.

    A node that is itself the root boundary yields a single segment naming it.
    """
    chain = list(ancestors(node))
    if len(chain) > 1 and chain[-1].is_root_boundary():
        chain = chain[:-1]
    chain.reverse()
    return [PathSegment(n.type_tag(), same_type_index(n)) for n in chain]


def build_path(node: TreeNode) -> str:
    """Build the structural path string for ``node``."""
    return SEPARATOR.join(str(segment) for segment in path_segments(node))


def parse_path(value: str) -> list[PathSegment]:
    """Parse a structural path string.

    Args:
        value: Path such as ``"StackPanel[0]/Button[1]"``

    Returns:
        The parsed segments, in order

    Raises:
        MalformedLocatorError: If the path is empty or any segment is unparsable
    """
    if not value.strip():
        raise MalformedLocatorError(value, "path is empty")

    segments: list[PathSegment] = []
    for position, raw in enumerate(value.split(SEPARATOR)):
        match = _SEGMENT_RE.match(raw)
        if match is None:
            raise MalformedLocatorError(
                value, f"segment {position} '{raw}' is not of the form Type[index]"
            )
        segments.append(PathSegment(match.group(1), int(match.group(2))))
    return segments


def structurally_equal(first: TreeNode | None, second: TreeNode | None) -> bool:
    """Compare two nodes by position rather than identity.

    Two nodes are equivalent when they have the same type tag and the same
    same-type index at every ancestor level up to the root boundary.
    """
    if first is None or second is None:
        return first is None and second is None
    if first == second:
        return True
    if first.type_tag() != second.type_tag():
        return False
    return path_segments(first) == path_segments(second)
