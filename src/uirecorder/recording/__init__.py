"""Recording of interaction events into steps."""

from .coalescer import DebounceTimer, TextCoalescer, ThreadingDebounceTimer
from .events import (
    SPECIAL_KEYS,
    FocusEvent,
    InteractionEvent,
    KeyEvent,
    Modifier,
    PointerButton,
    PointerMoveEvent,
    PressEvent,
    ScrollEvent,
    TextInputEvent,
)
from .extractors import AssertExtractors, Extraction, ExtractionRule
from .hotkeys import Gesture, HotkeyCommand, HotkeyMap
from .steps import VALIDATION_FAILED_PREFIX, Step, StepKind

# Session imports the renderer, which needs the step types above
from .session import RecorderState, RecordingSession
from .registry import SessionRegistry

__all__ = [
    # Steps
    "Step",
    "StepKind",
    "VALIDATION_FAILED_PREFIX",
    # Events
    "InteractionEvent",
    "PressEvent",
    "TextInputEvent",
    "KeyEvent",
    "ScrollEvent",
    "PointerMoveEvent",
    "FocusEvent",
    "PointerButton",
    "Modifier",
    "SPECIAL_KEYS",
    # Session
    "RecorderState",
    "RecordingSession",
    "SessionRegistry",
    "TextCoalescer",
    "DebounceTimer",
    "ThreadingDebounceTimer",
    "AssertExtractors",
    "Extraction",
    "ExtractionRule",
    "HotkeyCommand",
    "HotkeyMap",
    "Gesture",
]
