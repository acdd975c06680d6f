"""Tests for hotkey gestures."""

import pytest

from uirecorder.config import RecorderSettings
from uirecorder.exceptions import ConfigurationError
from uirecorder.recording.events import KeyEvent, Modifier
from uirecorder.recording.hotkeys import Gesture, HotkeyCommand, HotkeyMap

CTRL_SHIFT = frozenset({Modifier.CTRL, Modifier.SHIFT})


def key(name: str, modifiers=CTRL_SHIFT) -> KeyEvent:
    return KeyEvent(source=None, key=name, modifiers=frozenset(modifiers))


class TestGesture:
    """Tests for parsing and matching gestures."""

    def test_parse(self):
        gesture = Gesture.parse("Ctrl+Shift+R")

        assert gesture.key == "R"
        assert gesture.modifiers == CTRL_SHIFT

    def test_str_is_canonical(self):
        assert str(Gesture.parse("shift + control + p")) == "Ctrl+Shift+p"

    def test_matches_case_insensitive_key(self):
        assert Gesture.parse("Ctrl+Shift+R").matches(key("r"))

    def test_requires_exact_modifiers(self):
        gesture = Gesture.parse("Ctrl+Shift+R")

        assert not gesture.matches(key("R", {Modifier.CTRL}))
        assert not gesture.matches(key("R", {Modifier.CTRL, Modifier.SHIFT, Modifier.ALT}))

    @pytest.mark.parametrize("text", ["", "Ctrl+", "Hyper+R", "Ctrl+Shift"])
    def test_invalid(self, text):
        with pytest.raises(ConfigurationError):
            Gesture.parse(text)


class TestHotkeyMap:
    """Tests for mapping gestures to commands."""

    def test_defaults(self):
        hotkeys = HotkeyMap.from_settings(RecorderSettings(_env_file=None))

        assert hotkeys.match(key("R")) is HotkeyCommand.START_STOP
        assert hotkeys.match(key("P")) is HotkeyCommand.PAUSE_RESUME
        assert hotkeys.match(key("S")) is HotkeyCommand.SAVE
        assert hotkeys.match(key("A")) is HotkeyCommand.CAPTURE_ASSERT

    def test_plain_keys_do_not_match(self):
        hotkeys = HotkeyMap.from_settings(RecorderSettings(_env_file=None))
        assert hotkeys.match(key("R", ())) is None

    def test_empty_gesture_unbinds(self):
        settings = RecorderSettings(_env_file=None, hotkey_save="", hotkey_start_stop="F9")
        hotkeys = HotkeyMap.from_settings(settings)

        assert HotkeyCommand.SAVE not in hotkeys.bindings
        assert hotkeys.match(key("F9", ())) is HotkeyCommand.START_STOP
