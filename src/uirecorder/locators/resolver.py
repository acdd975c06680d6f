"""Locator resolution for recorded controls.

Computes the most durable locator available for a control using a priority
chain: nearest stable id, nearest display name, structural path, and finally
a non-durable coordinate sentinel.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..dispatch import ImmediateDispatcher, OwnerDispatcher
from ..logging import get_logger
from ..tree.interfaces import TreeNode
from ..tree.walk import ancestors
from .paths import build_path
from .types import (
    DISPLAY_NAME_DIAGNOSTIC,
    STRUCTURAL_PATH_DIAGNOSTIC,
    UNRESOLVED_DIAGNOSTIC,
    Locator,
    LocatorKind,
    LocatorOptions,
)

logger = get_logger(__name__)

DISPLAY_NAME_WARNING = "WARNING: using display name fallback"
STRUCTURAL_PATH_WARNING = "CRITICAL: structural path locator - high risk of breakage"
UNRESOLVED_WARNING = "ERROR: no stable locator available"


@dataclass(frozen=True)
class Resolution:
    """A resolved locator and the node it actually identifies.

    ``node`` is the ancestor that supplied the stable id or display name,
    which may differ from the node the event came from.
    """

    locator: Locator
    node: TreeNode


class LocatorResolver:
    """Resolves stable locators for controls.

    Input events often originate from an inner templated element (the text
    block inside a button) rather than the control the user meant, so the
    identifier search walks up to the nearest identified ancestor.

    Example:
        >>> resolver = LocatorResolver(LocatorOptions())
        >>> resolver.resolve(label_inside_button)
        Locator(value='SaveButton', kind=<LocatorKind.STABLE_ID: 'stable_id'>, diagnostic=None)
    """

    def __init__(
        self,
        options: LocatorOptions | None = None,
        dispatcher: OwnerDispatcher | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            options: Resolution options (default: LocatorOptions())
            dispatcher: Owner context for tree reads (default: run inline)
        """
        self.options = options or LocatorOptions()
        self.dispatcher = dispatcher or ImmediateDispatcher()

    def resolve(self, node: TreeNode, pointer: tuple[float, float] | None = None) -> Locator:
        """Resolve a locator for ``node``.

        Tree reads run on the owner context; calls from other threads are
        marshalled there.

        Args:
            node: The control an event originated from
            pointer: Last known pointer position, used only by the sentinel

        Returns:
            The resolved locator
        """
        return self.resolve_target(node, pointer).locator

    def resolve_target(
        self, node: TreeNode, pointer: tuple[float, float] | None = None
    ) -> Resolution:
        """Resolve a locator and report which node it identifies."""
        if self.dispatcher.check_access():
            return self._resolve(node, pointer)
        return self.dispatcher.invoke(lambda: self._resolve(node, pointer))

    def _resolve(self, node: TreeNode, pointer: tuple[float, float] | None) -> Resolution:
        chain = list(ancestors(node))

        # Priority 1: nearest stable id
        for candidate in chain:
            stable_id = candidate.stable_id()
            if stable_id:
                if candidate != node:
                    logger.debug(
                        "stable_id_from_ancestor",
                        stable_id=stable_id,
                        source=node.type_tag(),
                        ancestor=candidate.type_tag(),
                    )
                else:
                    logger.debug("resolved_stable_id", stable_id=stable_id)
                return Resolution(Locator.stable_id(stable_id), candidate)

        # Priority 2: nearest display name
        if self.options.prefer_display_name_fallback:
            for candidate in chain:
                name = candidate.display_name()
                if name:
                    logger.warning("resolved_display_name_fallback", name=name)
                    locator = Locator(
                        value=name,
                        kind=LocatorKind.DISPLAY_NAME,
                        diagnostic=DISPLAY_NAME_DIAGNOSTIC,
                    )
                    return Resolution(locator, candidate)

        # Priority 3: structural path
        if self.options.allow_structural_path_fallback:
            path = build_path(node)
            logger.warning("resolved_structural_path_fallback", path=path)
            locator = Locator(
                value=path,
                kind=LocatorKind.STRUCTURAL_PATH,
                diagnostic=STRUCTURAL_PATH_DIAGNOSTIC,
            )
            return Resolution(locator, node)

        if pointer is not None:
            value = f"{node.type_tag()}@{pointer[0]:g},{pointer[1]:g}"
        else:
            value = f"{node.type_tag()}_NoId"
        logger.error("locator_unresolved", type_tag=node.type_tag())
        locator = Locator(
            value=value, kind=LocatorKind.COORDINATE, diagnostic=UNRESOLVED_DIAGNOSTIC
        )
        return Resolution(locator, node)

    def warning_for(self, locator: Locator) -> str | None:
        """Step warning for a locator.

        Fallback warnings depend on ``emit_fallback_warnings``; the
        unresolved warning is always emitted.
        """
        if locator.kind is LocatorKind.COORDINATE:
            return UNRESOLVED_WARNING
        if not self.options.emit_fallback_warnings:
            return None
        if locator.kind is LocatorKind.DISPLAY_NAME:
            return DISPLAY_NAME_WARNING
        if locator.kind is LocatorKind.STRUCTURAL_PATH:
            return STRUCTURAL_PATH_WARNING
        return None
