"""Access to live UI control trees.

The recorder reads trees through the TreeNode interface only; MemoryNode is
the in-memory implementation.
"""

from .interfaces import TreeNode
from .memory import Bounds, MemoryNode
from .walk import ancestors, describe_tree, find_all, find_first, iter_descendants

__all__ = [
    "TreeNode",
    "MemoryNode",
    "Bounds",
    "ancestors",
    "iter_descendants",
    "find_first",
    "find_all",
    "describe_tree",
]
