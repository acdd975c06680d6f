"""Replay finder.

Fault-tolerant control lookup used both to validate freshly recorded steps
and, later, by generated code replaying them. The tree seen at replay time may
differ structurally from the one seen while recording (another rendering
backend, extra nesting), so structural paths are matched leniently.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import cast

from ..exceptions import ControlNotFoundError, LocatorResolutionError, MalformedLocatorError
from ..logging import get_logger
from ..tree.interfaces import TreeNode
from ..tree.walk import find_all, iter_descendants
from .paths import PathSegment, looks_like_path, parse_path
from .types import Locator

logger = get_logger(__name__)


class FinderStrategy(ABC):
    """Base class for lookup strategies.

    Each strategy implements one way of turning a locator string into
    candidate nodes. Strategies are tried in sequence until one yields a
    candidate.
    """

    @abstractmethod
    def find(self, value: str, root: TreeNode) -> list[TreeNode]:
        """Find candidate nodes for ``value``.

        Args:
            value: Locator string
            root: Root of the tree to search

        Returns:
            Candidates in document order (empty when nothing matched)
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get strategy name for logging and reporting."""
        pass

    def can_handle(self, value: str) -> bool:
        """Check if this strategy applies to the locator string."""
        return bool(value)


class StableIdStrategy(FinderStrategy):
    """Exact stable-id match anywhere in the tree."""

    def find(self, value: str, root: TreeNode) -> list[TreeNode]:
        return find_all(root, lambda node: node.stable_id() == value)

    def get_name(self) -> str:
        return "StableId"


class DisplayNameStrategy(FinderStrategy):
    """Exact display-name match anywhere in the tree."""

    def find(self, value: str, root: TreeNode) -> list[TreeNode]:
        return find_all(root, lambda node: node.display_name() == value)

    def get_name(self) -> str:
        return "DisplayName"


class StructuralPathStrategy(FinderStrategy):
    """Lenient ``Type[idx]/...`` path matching.

    For each segment, starting at the root:

    1. the child of that type at that same-type index;
    2. otherwise the first child of that type;
    3. otherwise a descendant of that type, using the index as a hint among
       all descendants of that type;
    4. otherwise the segment is skipped and matching continues from the
       current node.

    The match is accepted only if the node reached has the type named by the
    last segment.
    """

    def can_handle(self, value: str) -> bool:
        return looks_like_path(value)

    def find(self, value: str, root: TreeNode) -> list[TreeNode]:
        segments = parse_path(value)
        current = root
        for segment in segments:
            current = self._step(current, segment)

        if current.type_tag() != segments[-1].type_tag:
            logger.debug("structural_path_unmatched", locator=value, reached=current.type_tag())
            return []
        return [current]

    def _step(self, current: TreeNode, segment: PathSegment) -> TreeNode:
        same_type = [c for c in current.children() if c.type_tag() == segment.type_tag]
        if segment.index < len(same_type):
            return same_type[segment.index]
        if same_type:
            logger.debug(
                "structural_path_index_fallback", segment=str(segment), available=len(same_type)
            )
            return same_type[0]

        descendants = find_all(
            current, lambda node: node.type_tag() == segment.type_tag, include_root=False
        )
        if descendants:
            logger.debug(
                "structural_path_descendant_fallback", segment=str(segment), found=len(descendants)
            )
            if segment.index < len(descendants):
                return descendants[segment.index]
            return descendants[0]

        logger.debug("structural_path_segment_skipped", segment=str(segment))
        return current

    def get_name(self) -> str:
        return "StructuralPath"


@dataclass
class FindResult:
    """Result of a replay lookup.

    Attributes:
        node: The node the locator resolves to, or None
        strategy_name: Name of the strategy that matched
        candidates: Every node the matching strategy accepted
        attempted: Names of the strategies tried, in order
    """

    node: TreeNode | None
    strategy_name: str | None = None
    candidates: list[TreeNode] = field(default_factory=list)
    attempted: list[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.node is not None

    @property
    def is_ambiguous(self) -> bool:
        return len(self.candidates) > 1


class ReplayFinder:
    """Resolves locator strings against a tree.

    Strategies run in order: stable id, display name, structural path. The
    first strategy yielding a candidate wins.

    Example:
        >>> finder = ReplayFinder(window)
        >>> finder.find("LoginButton").type_tag()
        'Button'
        >>> finder.find("StackPanel[0]/TextBox[1]").stable_id()
        ''
    """

    def __init__(self, root: TreeNode, strategies: list[FinderStrategy] | None = None) -> None:
        """Initialize the finder.

        Args:
            root: Root of the tree to search (usually the window)
            strategies: Lookup strategies (default: stable id, display name, path)
        """
        self.root = root
        if strategies is None:
            self.strategies: list[FinderStrategy] = [
                StableIdStrategy(),
                DisplayNameStrategy(),
                StructuralPathStrategy(),
            ]
        else:
            self.strategies = strategies

    def lookup(self, locator: Locator | str) -> FindResult:
        """Run the strategies and report what matched.

        Raises:
            MalformedLocatorError: If a structural path cannot be parsed
        """
        value = str(locator)
        result = FindResult(node=None)

        for strategy in self.strategies:
            if not strategy.can_handle(value):
                continue
            result.attempted.append(strategy.get_name())
            try:
                candidates = strategy.find(value, self.root)
            except MalformedLocatorError as e:
                raise MalformedLocatorError(value, e.detail, self.all_stable_ids()) from e

            if candidates:
                result.node = candidates[0]
                result.strategy_name = strategy.get_name()
                result.candidates = candidates
                if result.is_ambiguous:
                    logger.warning(
                        "ambiguous_locator",
                        locator=value,
                        strategy=strategy.get_name(),
                        matches=len(candidates),
                    )
                return result

        return result

    def locate(self, locator: Locator | str) -> FindResult:
        """Like ``lookup``, but a miss is an error.

        Raises:
            ControlNotFoundError: If no strategy matched
            MalformedLocatorError: If a structural path cannot be parsed
            LocatorResolutionError: If the locator is empty
        """
        value = str(locator)
        if not value:
            raise LocatorResolutionError(value, self.all_stable_ids(), message="Locator is empty")

        result = self.lookup(value)
        if result.node is None:
            known_ids = self.all_stable_ids()
            logger.warning("control_not_found", locator=value, attempted=result.attempted)
            raise ControlNotFoundError(value, known_ids)
        return result

    def find(self, locator: Locator | str) -> TreeNode:
        """Find the node a locator refers to; raises as ``locate`` does."""
        return cast(TreeNode, self.locate(locator).node)

    def try_find(self, locator: Locator | str) -> TreeNode | None:
        """Like ``find`` but returns None instead of raising."""
        try:
            return self.find(locator)
        except LocatorResolutionError:
            return None

    def all_stable_ids(self) -> list[str]:
        """Every non-empty stable id in the tree, in document order."""
        return [node.stable_id() for node in iter_descendants(self.root) if node.stable_id()]
