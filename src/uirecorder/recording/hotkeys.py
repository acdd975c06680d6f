"""Hotkey gestures for recorder commands."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..config.settings import RecorderSettings
from ..exceptions import ConfigurationError
from .events import KeyEvent, Modifier

_MODIFIER_NAMES = {
    "ctrl": Modifier.CTRL,
    "control": Modifier.CTRL,
    "shift": Modifier.SHIFT,
    "alt": Modifier.ALT,
    "meta": Modifier.META,
    "cmd": Modifier.META,
}


class HotkeyCommand(str, Enum):
    """Commands a recorder hotkey can trigger."""

    START_STOP = "start_stop"
    PAUSE_RESUME = "pause_resume"
    SAVE = "save"
    CAPTURE_ASSERT = "capture_assert"


@dataclass(frozen=True)
class Gesture:
    """A key plus the exact set of modifiers that must be held."""

    key: str
    modifiers: frozenset[Modifier]

    @classmethod
    def parse(cls, text: str) -> Gesture:
        """Parse a gesture such as ``"Ctrl+Shift+R"``.

        Raises:
            ConfigurationError: If the gesture has no key or an unknown modifier
        """
        parts = [part.strip() for part in text.split("+") if part.strip()]
        if not parts:
            raise ConfigurationError(f"Empty hotkey gesture: '{text}'")

        *modifier_names, key = parts
        modifiers = set()
        for name in modifier_names:
            modifier = _MODIFIER_NAMES.get(name.lower())
            if modifier is None:
                raise ConfigurationError(f"Unknown modifier '{name}' in hotkey '{text}'")
            modifiers.add(modifier)
        if key.lower() in _MODIFIER_NAMES:
            raise ConfigurationError(f"Hotkey '{text}' has no key")
        return cls(key=key, modifiers=frozenset(modifiers))

    def matches(self, event: KeyEvent) -> bool:
        return event.key.lower() == self.key.lower() and event.modifiers == self.modifiers

    def __str__(self) -> str:
        order = [Modifier.CTRL, Modifier.SHIFT, Modifier.ALT, Modifier.META]
        names = [m.value.capitalize() for m in order if m in self.modifiers]
        return "+".join([*names, self.key])


class HotkeyMap:
    """Maps key gestures to recorder commands."""

    def __init__(self, bindings: dict[HotkeyCommand, Gesture] | None = None) -> None:
        self.bindings = dict(bindings or {})

    @classmethod
    def from_settings(cls, settings: RecorderSettings) -> HotkeyMap:
        """Build the map from configured gestures. Empty gestures are unbound."""
        configured = {
            HotkeyCommand.START_STOP: settings.hotkey_start_stop,
            HotkeyCommand.PAUSE_RESUME: settings.hotkey_pause_resume,
            HotkeyCommand.SAVE: settings.hotkey_save,
            HotkeyCommand.CAPTURE_ASSERT: settings.hotkey_capture_assert,
        }
        return cls(
            {command: Gesture.parse(text) for command, text in configured.items() if text}
        )

    def match(self, event: KeyEvent) -> HotkeyCommand | None:
        for command, gesture in self.bindings.items():
            if gesture.matches(event):
                return command
        return None
