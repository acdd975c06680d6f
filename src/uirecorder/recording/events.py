"""Raw interaction events fed to a recording session.

Host adapters translate framework input events (pointer pressed, text input,
key down, wheel) into these types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..tree.interfaces import TreeNode

Point = tuple[float, float]


class PointerButton(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    MIDDLE = "middle"


class Modifier(str, Enum):
    CTRL = "ctrl"
    SHIFT = "shift"
    ALT = "alt"
    META = "meta"


# Non-printable navigation/editing keys recorded as KEY_PRESS steps
SPECIAL_KEYS = frozenset(
    {
        "Enter",
        "Tab",
        "Escape",
        "Back",
        "Delete",
        "Left",
        "Right",
        "Up",
        "Down",
        "Home",
        "End",
        "PageUp",
        "PageDown",
    }
)


@dataclass(frozen=True)
class InteractionEvent:
    """Base class for interaction events.

    Attributes:
        source: The node the event originated from (may be an inner element)
    """

    source: TreeNode | None


@dataclass(frozen=True)
class PressEvent(InteractionEvent):
    button: PointerButton = PointerButton.LEFT
    click_count: int = 1
    position: Point | None = None


@dataclass(frozen=True)
class TextInputEvent(InteractionEvent):
    text: str = ""


@dataclass(frozen=True)
class KeyEvent(InteractionEvent):
    key: str = ""
    modifiers: frozenset[Modifier] = field(default_factory=frozenset)

    @property
    def is_special(self) -> bool:
        return self.key in SPECIAL_KEYS


@dataclass(frozen=True)
class ScrollEvent(InteractionEvent):
    delta_x: float = 0.0
    delta_y: float = 0.0
    position: Point | None = None


@dataclass(frozen=True)
class PointerMoveEvent(InteractionEvent):
    position: Point | None = None


@dataclass(frozen=True)
class FocusEvent(InteractionEvent):
    pass
