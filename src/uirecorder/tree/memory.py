"""In-memory tree implementation.

MemoryNode is a plain Python control tree. It backs headless hosts, the CLI
(tree snapshots loaded from JSON) and the test suite.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .interfaces import TreeNode


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounds in root coordinates."""

    x: float
    y: float
    width: float
    height: float

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px < self.x + self.width and self.y <= py < self.y + self.height


class MemoryNode(TreeNode):
    """A tree node held entirely in memory.

    Example:
        >>> window = MemoryNode("Window", root_boundary=True)
        >>> panel = window.add(MemoryNode("StackPanel"))
        >>> button = panel.add(MemoryNode("Button", stable_id="SaveButton"))
        >>> button.parent() is panel
        True
    """

    def __init__(
        self,
        type_tag: str,
        stable_id: str = "",
        display_name: str = "",
        *,
        text: str | None = None,
        checked: bool | None = None,
        checkable: bool = False,
        visible: bool = True,
        enabled: bool = True,
        bounds: Bounds | None = None,
        root_boundary: bool = False,
        children: Iterable[MemoryNode] = (),
    ) -> None:
        if not type_tag:
            raise ValueError("type_tag must not be empty")
        self._type_tag = type_tag
        self._stable_id = stable_id
        self._display_name = display_name
        self._text = text
        self._checked = checked
        self._checkable = checkable or checked is not None
        self._visible = visible
        self._enabled = enabled
        self._bounds = bounds
        self._root_boundary = root_boundary
        self._parent: MemoryNode | None = None
        self._children: list[MemoryNode] = []
        for child in children:
            self.add(child)

    def __repr__(self) -> str:
        parts = [self._type_tag]
        if self._stable_id:
            parts.append(f"id={self._stable_id!r}")
        if self._display_name:
            parts.append(f"name={self._display_name!r}")
        return f"MemoryNode({', '.join(parts)})"

    # Tree building

    def add(self, child: MemoryNode) -> MemoryNode:
        """Append a child and return it."""
        return self.insert(len(self._children), child)

    def insert(self, index: int, child: MemoryNode) -> MemoryNode:
        """Insert a child at ``index`` and return it."""
        if child._parent is not None:
            child._parent.remove(child)
        child._parent = self
        self._children.insert(index, child)
        return child

    def remove(self, child: MemoryNode) -> None:
        """Detach a child from this node."""
        self._children.remove(child)
        child._parent = None

    def set_text(self, text: str | None) -> None:
        self._text = text

    def set_checked(self, checked: bool | None) -> None:
        self._checked = checked
        self._checkable = True

    def set_visible(self, visible: bool) -> None:
        self._visible = visible

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    # TreeNode

    def stable_id(self) -> str:
        return self._stable_id

    def display_name(self) -> str:
        return self._display_name

    def type_tag(self) -> str:
        return self._type_tag

    def parent(self) -> MemoryNode | None:
        return self._parent

    def children(self) -> Sequence[MemoryNode]:
        return tuple(self._children)

    def bounds_known(self) -> bool:
        return self._bounds is not None

    def is_root_boundary(self) -> bool:
        return self._root_boundary or self._parent is None

    def text(self) -> str | None:
        return self._text

    def checked(self) -> bool | None:
        return self._checked

    def is_checkable(self) -> bool:
        return self._checkable

    def is_visible(self) -> bool:
        return self._visible

    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def bounds(self) -> Bounds | None:
        return self._bounds

    def hit_test(self, x: float, y: float) -> MemoryNode | None:
        """Find the deepest visible node whose bounds contain the point.

        Later siblings are drawn on top, so they are tested first. Nodes
        without bounds are transparent: their children are still tested.

        Args:
            x: Horizontal position in root coordinates
            y: Vertical position in root coordinates

        Returns:
            The hit node, or None when nothing contains the point
        """
        if not self._visible:
            return None
        for child in reversed(self._children):
            hit = child.hit_test(x, y)
            if hit is not None:
                return hit
        if self._bounds is not None and self._bounds.contains(x, y):
            return self
        return None

    # Snapshots

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MemoryNode:
        """Build a tree from a nested mapping.

        Recognized keys: ``type`` (required), ``id``, ``name``, ``text``,
        ``checked``, ``visible``, ``enabled``, ``bounds`` ([x, y, w, h]),
        ``boundary`` and ``children``.

        Raises:
            ValueError: If a node has no type
        """
        type_tag = data.get("type")
        if not type_tag or not isinstance(type_tag, str):
            raise ValueError(f"Tree node is missing a 'type': {dict(data)!r}")

        bounds = None
        if data.get("bounds") is not None:
            x, y, width, height = data["bounds"]
            bounds = Bounds(float(x), float(y), float(width), float(height))

        node = cls(
            type_tag,
            stable_id=data.get("id", "") or "",
            display_name=data.get("name", "") or "",
            text=data.get("text"),
            checked=data.get("checked"),
            checkable="checked" in data,
            visible=data.get("visible", True),
            enabled=data.get("enabled", True),
            bounds=bounds,
            root_boundary=bool(data.get("boundary", False)),
        )
        for child in data.get("children", []):
            node.add(cls.from_dict(child))
        return node

    def to_dict(self) -> dict[str, Any]:
        """Convert this subtree back to the mapping accepted by ``from_dict``."""
        data: dict[str, Any] = {"type": self._type_tag}
        if self._stable_id:
            data["id"] = self._stable_id
        if self._display_name:
            data["name"] = self._display_name
        if self._text is not None:
            data["text"] = self._text
        if self._checkable:
            data["checked"] = self._checked
        if not self._visible:
            data["visible"] = False
        if not self._enabled:
            data["enabled"] = False
        if self._bounds is not None:
            b = self._bounds
            data["bounds"] = [b.x, b.y, b.width, b.height]
        if self._root_boundary:
            data["boundary"] = True
        if self._children:
            data["children"] = [child.to_dict() for child in self._children]
        return data
