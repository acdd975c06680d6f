"""Locator system for uirecorder.

Computes stable locators for recorded controls and finds controls again from
those locators, tolerating structural drift between recording and replay.

Key Components:
    - LocatorResolver: Priority-chain locator computation
    - ReplayFinder: Fault-tolerant lookup of locator strings
    - Structural paths: Same-type-indexed ``Type[idx]/...`` paths
"""

from .finder import (
    DisplayNameStrategy,
    FinderStrategy,
    FindResult,
    ReplayFinder,
    StableIdStrategy,
    StructuralPathStrategy,
)
from .paths import (
    PathSegment,
    build_path,
    looks_like_path,
    parse_path,
    path_segments,
    same_type_index,
    structurally_equal,
)
from .resolver import LocatorResolver, Resolution
from .types import Locator, LocatorKind, LocatorOptions, StepQuality, quality_for

__all__ = [
    "Locator",
    "LocatorKind",
    "LocatorOptions",
    "StepQuality",
    "quality_for",
    "LocatorResolver",
    "Resolution",
    "ReplayFinder",
    "FindResult",
    "FinderStrategy",
    "StableIdStrategy",
    "DisplayNameStrategy",
    "StructuralPathStrategy",
    "PathSegment",
    "build_path",
    "parse_path",
    "path_segments",
    "looks_like_path",
    "same_type_index",
    "structurally_equal",
]
