"""Traversal helpers over TreeNode trees."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from .interfaces import TreeNode


def ancestors(node: TreeNode) -> Iterator[TreeNode]:
    """Yield ``node`` and its ancestors, stopping at the root boundary.

    The boundary node itself is yielded last.
    """
    current: TreeNode | None = node
    while current is not None:
        yield current
        if current.is_root_boundary():
            return
        current = current.parent()


def iter_descendants(root: TreeNode, include_root: bool = True) -> Iterator[TreeNode]:
    """Yield the subtree in depth-first document order."""
    stack: list[TreeNode] = [root] if include_root else list(reversed(root.children()))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children()))


def find_first(
    root: TreeNode, predicate: Callable[[TreeNode], bool], include_root: bool = True
) -> TreeNode | None:
    """Return the first node in document order satisfying ``predicate``."""
    for node in iter_descendants(root, include_root=include_root):
        if predicate(node):
            return node
    return None


def find_all(
    root: TreeNode, predicate: Callable[[TreeNode], bool], include_root: bool = True
) -> list[TreeNode]:
    """Return every node in document order satisfying ``predicate``."""
    return [node for node in iter_descendants(root, include_root=include_root) if predicate(node)]


def describe_tree(root: TreeNode, indent: int = 0) -> str:
    """Render an indented dump of the tree for diagnostics."""
    lines: list[str] = []
    _describe(root, indent, lines)
    return "\n".join(lines)


def _describe(node: TreeNode, indent: int, lines: list[str]) -> None:
    info = ""
    if node.stable_id():
        info += f" (id: {node.stable_id()})"
    if node.display_name():
        info += f" (name: {node.display_name()})"
    lines.append(f"{'  ' * indent}{node.type_tag()}{info}")
    for child in node.children():
        _describe(child, indent + 1, lines)
