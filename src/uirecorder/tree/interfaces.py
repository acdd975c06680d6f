"""Tree access interface definition.

This module defines the interface the recorder uses to read a live UI
control tree (Avalonia visual tree, UIA element tree, an accessibility
snapshot, ...). The recorder never mutates a node.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence


class TreeNode(ABC):
    """Opaque handle to one control of a UI tree.

    Implementations wrap whatever the UI framework exposes. Only the methods
    below are used by locator resolution, validation and replay.

    Nodes are compared with ``==``. Adapters that hand out a new wrapper on
    every ``parent()`` or ``children()`` call must define ``__eq__`` and
    ``__hash__`` over the underlying element; the default identity comparison
    only suits trees that keep one object per control.

    Example:
        >>> node = window_adapter.focused()
        >>> node.type_tag(), node.stable_id()
        ('TextBox', 'UsernameInput')
    """

    @abstractmethod
    def stable_id(self) -> str:
        """Get the declared stable identifier (automation id).

        Returns:
            The identifier, or an empty string when none is declared
        """
        ...

    @abstractmethod
    def display_name(self) -> str:
        """Get the declared display name.

        Returns:
            The name, or an empty string when none is declared
        """
        ...

    @abstractmethod
    def type_tag(self) -> str:
        """Get the string distinguishing this kind of control (e.g. "Button")."""
        ...

    @abstractmethod
    def parent(self) -> TreeNode | None:
        """Get the parent node, or None above the top of the tree."""
        ...

    @abstractmethod
    def children(self) -> Sequence[TreeNode]:
        """Get the ordered list of child nodes."""
        ...

    def bounds_known(self) -> bool:
        """Check whether the node has been laid out with known bounds."""
        return False

    def is_root_boundary(self) -> bool:
        """Check whether upward traversal stops at this node (e.g. a window).

        The default treats a parentless node as the boundary.
        """
        return self.parent() is None

    # Value accessors used by assertion capture and replay assertions.

    def text(self) -> str | None:
        """Get the text content, or None for controls without text."""
        return None

    def checked(self) -> bool | None:
        """Get the checked state, or None for controls that cannot be checked."""
        return None

    def is_checkable(self) -> bool:
        return False

    def is_visible(self) -> bool:
        return True

    def is_enabled(self) -> bool:
        return True

    def hit_test(self, x: float, y: float) -> TreeNode | None:
        """Find the deepest node under a point in this node's coordinates.

        Trees without hit-testing support return None.
        """
        return None
