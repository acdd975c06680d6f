"""Replay of recorded steps against a live tree."""

from .driver import BackendCall, InputBackend, RecordingBackend, ReplayDriver

__all__ = ["ReplayDriver", "InputBackend", "RecordingBackend", "BackendCall"]
