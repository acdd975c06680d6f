"""uirecorder Command Line Interface.

Provides CLI commands for:
- Checking how a locator string is interpreted
- Finding controls in tree snapshots the way replay does
- Rendering recorded steps into test modules

Usage:
    uirecorder --help
    uirecorder find window.json "StackPanel[0]/Button[1]"
    uirecorder render steps.json --framework pytest -o RecordedTests
"""

from .main import main

__all__ = ["main"]
