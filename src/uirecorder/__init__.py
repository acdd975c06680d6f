"""uirecorder: record, validate and replay stable UI locators.

Records user interactions against a live control tree as typed steps with
durable locators, validates each locator as it is recorded and renders the
steps into test modules that find equivalent controls at replay time.
"""

from .config import RecorderSettings, get_settings, reset_settings
from .dispatch import ImmediateDispatcher, OwnerDispatcher, QueueDispatcher
from .exceptions import (
    ConfigurationError,
    ControlNotFoundError,
    LocatorResolutionError,
    MalformedLocatorError,
    RecorderException,
    ReplayAssertionError,
    ReplayTimeoutError,
)
from .locators import (
    Locator,
    LocatorKind,
    LocatorOptions,
    LocatorResolver,
    ReplayFinder,
    StepQuality,
)
from .recording import (
    RecorderState,
    RecordingSession,
    SessionRegistry,
    Step,
    StepKind,
)
from .tree import MemoryNode, TreeNode
from .validation import StepValidator, ValidationResult
# Loaded after recording, whose session imports the renderer
from .codegen import RenderContext, StepRenderer
from .replay import InputBackend, RecordingBackend, ReplayDriver

__version__ = "0.1.0"

__all__ = [
    # Tree access
    "TreeNode",
    "MemoryNode",
    # Locators
    "Locator",
    "LocatorKind",
    "LocatorOptions",
    "LocatorResolver",
    "ReplayFinder",
    "StepQuality",
    # Recording
    "RecorderState",
    "RecordingSession",
    "SessionRegistry",
    "Step",
    "StepKind",
    "StepValidator",
    "ValidationResult",
    # Code generation and replay
    "RenderContext",
    "StepRenderer",
    "ReplayDriver",
    "InputBackend",
    "RecordingBackend",
    # Dispatching
    "OwnerDispatcher",
    "ImmediateDispatcher",
    "QueueDispatcher",
    # Configuration
    "RecorderSettings",
    "get_settings",
    "reset_settings",
    # Exceptions
    "RecorderException",
    "LocatorResolutionError",
    "MalformedLocatorError",
    "ControlNotFoundError",
    "ReplayAssertionError",
    "ReplayTimeoutError",
    "ConfigurationError",
]
