"""
Interaction Session

Turns a stream of interaction events from one window into an ordered list of
validated steps. A session owns the recorder state machine, the pending
typed text and the step list; everything runs on the owner context of its
dispatcher.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from enum import Enum
from pathlib import Path

from ..codegen.renderer import StepRenderer
from ..codegen.templates import RenderContext, suggest_file_name, template_for
from ..config.settings import AssertionTarget, RecorderSettings, get_settings
from ..dispatch import ImmediateDispatcher, OwnerDispatcher, QueueDispatcher
from ..exceptions import ConfigurationError
from ..locators.resolver import LocatorResolver, Resolution
from ..locators.types import Locator
from ..logging import StepLogger, get_logger
from ..tree.interfaces import TreeNode
from ..validation.validator import StepValidator
from .coalescer import DebounceTimer, TextCoalescer
from .events import (
    FocusEvent,
    InteractionEvent,
    KeyEvent,
    PointerButton,
    PointerMoveEvent,
    PressEvent,
    ScrollEvent,
    TextInputEvent,
)
from .extractors import AssertExtractors
from .hotkeys import HotkeyCommand, HotkeyMap
from .steps import Step, StepKind

logger = get_logger(__name__)


class RecorderState(str, Enum):
    """Recorder state. OFF is both initial and terminal."""

    OFF = "off"
    RECORDING = "recording"
    PAUSED = "paused"


def format_delta(value: float) -> str:
    """Format a scroll delta independently of locale (``1``, ``-0.5``)."""
    return f"{value:g}"


class RecordingSession:
    """Records interactions against one tree root.

    Invalid state transitions are silently ignored. Hotkey gestures are
    consumed before any event reaches the recorder, so they are never
    recorded themselves.

    Typed text is flushed by a timer thread onto ``dispatcher``; hosts drain it
    with ``session.dispatcher.run_pending()`` from their event loop.

    Example:
        ```python
        session = RecordingSession(window, settings)
        session.start()
        session.handle_event(PressEvent(source=login_button))
        session.handle_event(TextInputEvent(source=user_box, text="alice"))
        session.stop()
        print(session.export_code())
        ```
    """

    def __init__(
        self,
        root: TreeNode,
        settings: RecorderSettings | None = None,
        dispatcher: OwnerDispatcher | None = None,
        timer: DebounceTimer | None = None,
        extractors: AssertExtractors | None = None,
        renderer: StepRenderer | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the session.

        Args:
            root: Root of the tree to record against (usually the window)
            settings: Recorder settings (default: get_settings())
            dispatcher: Owner context (default: a QueueDispatcher bound to the
                calling thread, which the host drains with ``run_pending()``)
            timer: Debounce timer for typed text (default: threading timer)
            extractors: Assertion extraction table (default: built-in rules)
            renderer: Step renderer (default: template for settings.test_framework)
            clock: Time source for step and export timestamps
        """
        self.root = root
        self.settings = settings or get_settings()
        if dispatcher is None:
            dispatcher = QueueDispatcher()
        elif timer is None and isinstance(dispatcher, ImmediateDispatcher):
            # The default timer fires on its own thread; posting inline would
            # touch the tree and the step list from there
            raise ConfigurationError(
                "ImmediateDispatcher needs a timer that fires on the owner thread",
                key="dispatcher",
            )
        self.dispatcher = dispatcher
        self.resolver = LocatorResolver(self.settings.locator_options(), self.dispatcher)
        self.validator = StepValidator(root)
        self.extractors = extractors or AssertExtractors()
        self.renderer = renderer or StepRenderer(template_for(self.settings.test_framework))
        self.hotkeys = HotkeyMap.from_settings(self.settings)
        self._clock = clock
        self._coalescer = TextCoalescer(
            self._record_text,
            self.dispatcher,
            timer=timer,
            delay=self.settings.text_debounce_seconds,
        )
        self._step_logger = StepLogger(logger)

        self._state = RecorderState.OFF
        self._steps: list[Step] = []
        self._hovered: TreeNode | None = None
        self._pointer: tuple[float, float] | None = None
        self._focused: TreeNode | None = None
        self._disposed = False

    # State machine

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def is_recording(self) -> bool:
        return self._state is RecorderState.RECORDING

    def start(self) -> None:
        if self._state is RecorderState.OFF and not self._disposed:
            self._set_state(RecorderState.RECORDING)

    def stop(self) -> None:
        """Stop recording. Pending text is flushed; steps are kept for export."""
        if self._state is RecorderState.OFF:
            return
        self._coalescer.flush()
        self._set_state(RecorderState.OFF)

    def pause(self) -> None:
        if self._state is RecorderState.RECORDING:
            self._coalescer.flush()
            self._set_state(RecorderState.PAUSED)

    def resume(self) -> None:
        if self._state is RecorderState.PAUSED:
            self._set_state(RecorderState.RECORDING)

    def toggle_recording(self) -> None:
        if self._state is RecorderState.OFF:
            self.start()
        else:
            self.stop()

    def toggle_pause(self) -> None:
        if self._state is RecorderState.RECORDING:
            self.pause()
        elif self._state is RecorderState.PAUSED:
            self.resume()

    def clear(self) -> None:
        """Discard every recorded step and any pending text."""
        self._coalescer.discard()
        self._steps = []
        logger.info("steps_cleared")

    def _set_state(self, state: RecorderState) -> None:
        previous = self._state
        self._state = state
        self._step_logger.log_state_change(previous.value, state.value, steps=len(self._steps))

    # Events

    def handle_event(self, event: InteractionEvent) -> bool:
        """Feed one interaction event to the session.

        Args:
            event: The event, with ``source`` set to the originating node

        Returns:
            True when the event was consumed as a hotkey (the host should
            mark it handled), False otherwise
        """
        if self._disposed:
            return False

        if isinstance(event, KeyEvent):
            command = self.hotkeys.match(event)
            if command is not None:
                self.handle_command(command)
                return True

        # Pointer and focus tracking feed assertion capture in any state
        if isinstance(event, PointerMoveEvent):
            self._hovered = event.source
            if event.position is not None:
                self._pointer = event.position
            return False
        if isinstance(event, FocusEvent):
            self._focused = event.source
            return False

        if self._state is not RecorderState.RECORDING:
            return False

        if isinstance(event, PressEvent):
            self._on_press(event)
        elif isinstance(event, TextInputEvent):
            self._on_text_input(event)
        elif isinstance(event, KeyEvent):
            self._on_key(event)
        elif isinstance(event, ScrollEvent):
            self._on_scroll(event)
        else:
            logger.debug("event_ignored", event_type=type(event).__name__)
        return False

    def handle_command(self, command: HotkeyCommand) -> None:
        """Run a recorder command.

        Start/stop and pause/resume work in every state; save and assertion
        capture do nothing while the recorder is off.
        """
        logger.debug("recorder_command", command=command.value, state=self._state.value)
        if command is HotkeyCommand.START_STOP:
            self.toggle_recording()
        elif command is HotkeyCommand.PAUSE_RESUME:
            self.toggle_pause()
        elif self._state is RecorderState.OFF:
            return
        elif command is HotkeyCommand.SAVE:
            self.save_to_file()
        elif command is HotkeyCommand.CAPTURE_ASSERT:
            self.capture_assert()

    def _on_press(self, event: PressEvent) -> None:
        self._coalescer.flush()
        if event.source is None:
            logger.debug("press_without_source")
            return
        if event.position is not None:
            self._pointer = event.position

        if event.button is PointerButton.RIGHT:
            kind = StepKind.RIGHT_CLICK
        elif event.button is PointerButton.LEFT:
            kind = StepKind.DOUBLE_CLICK if event.click_count >= 2 else StepKind.CLICK
        else:
            logger.debug("press_ignored", button=event.button.value)
            return
        self._append(kind, self._resolve(event.source, event.position))

    def _on_text_input(self, event: TextInputEvent) -> None:
        if event.source is None or not event.text:
            return
        self._coalescer.feed(event.source, event.text)

    def _on_key(self, event: KeyEvent) -> None:
        # Printable keys arrive again as text input
        if not event.is_special:
            return
        self._coalescer.flush()
        step = Step(
            kind=StepKind.KEY_PRESS,
            locator=Locator.unscoped(),
            parameter=event.key,
            timestamp=self._clock(),
        )
        self._add_step(step)

    def _on_scroll(self, event: ScrollEvent) -> None:
        self._coalescer.flush()
        if event.source is None:
            return
        parameter = f"{format_delta(event.delta_x)}, {format_delta(event.delta_y)}"
        self._append(StepKind.SCROLL, self._resolve(event.source, event.position), parameter)

    def _record_text(self, target: TreeNode, text: str) -> None:
        self._append(StepKind.TYPE_TEXT, self._resolve(target, None), text)

    # Assertions

    def capture_assert(self) -> Step | None:
        """Record an assertion about the control the user is pointing at.

        Returns:
            The recorded step, or None when there was no target or no
            extraction rule matched it
        """
        if self._state is RecorderState.OFF:
            return None
        self._coalescer.flush()

        target = self._assertion_target()
        if target is None:
            logger.warning("assert_capture_no_target")
            return None

        match = self.extractors.extract(target)
        if match is None:
            logger.warning("assert_capture_no_extractor", type_tag=target.type_tag())
            return None

        rule, extraction = match
        resolution = self._resolve(target, self._pointer)
        step = self._append(extraction.kind, resolution, extraction.parameter)
        logger.info(
            "assertion_captured", kind=step.kind.value, locator=step.selector, rule=rule.name
        )
        return step

    def _assertion_target(self) -> TreeNode | None:
        for source in self.settings.assertion_target_priority:
            if source is AssertionTarget.HOVER:
                target = self._hovered
            elif source is AssertionTarget.POINTER_HIT_TEST:
                target = self._hit_test()
            else:
                target = self._focused
            if target is not None:
                logger.debug(
                    "assert_target_selected", source=source.value, type_tag=target.type_tag()
                )
                return target
        return None

    def _hit_test(self) -> TreeNode | None:
        if self._pointer is None:
            return None
        x, y = self._pointer
        return self.dispatcher.invoke(lambda: self.root.hit_test(x, y))

    # Steps

    def _resolve(self, node: TreeNode, pointer: tuple[float, float] | None) -> Resolution:
        return self.resolver.resolve_target(node, pointer)

    def _append(self, kind: StepKind, resolution: Resolution, parameter: str | None = None) -> Step:
        locator = resolution.locator
        step = Step(
            kind=kind,
            locator=locator,
            parameter=parameter,
            warning=self.resolver.warning_for(locator),
            timestamp=self._clock(),
        )

        if self.settings.validate_steps:
            result = self.validator.validate(step, resolution.node)
            if not result.ok:
                self._step_logger.log_validation_failure(kind.value, locator.value, result.reason)
                step = step.with_validation_failure(result.reason)

        return self._add_step(step)

    def _add_step(self, step: Step) -> Step:
        self._steps.append(step)
        self._step_logger.log_step(
            step.kind.value,
            step.selector,
            step.quality.value,
            parameter=step.parameter,
            warning=step.warning,
        )
        return step

    # Queries

    def current_steps(self) -> tuple[Step, ...]:
        """Snapshot of the flushed steps, in recording order."""
        return tuple(self._steps)

    def step_count(self) -> int:
        return len(self._steps)

    def pending_text(self) -> str:
        return self._coalescer.buffer

    # Export

    def render_context(self, timestamp: datetime | None = None) -> RenderContext:
        return RenderContext.for_scenario(
            self.settings.app_name,
            self.settings.scenario_name,
            timestamp or self._clock(),
            namespace=self.settings.namespace,
            include_timestamp=self.settings.include_timestamp,
        )

    def export_code(self, timestamp: datetime | None = None) -> str:
        """Flush pending text and render the recorded steps."""
        self._coalescer.flush()
        return self.renderer.render(self.current_steps(), self.render_context(timestamp))

    def suggested_file_name(self, timestamp: datetime | None = None) -> str:
        return suggest_file_name(
            self.settings.app_name, self.settings.scenario_name, timestamp or self._clock()
        )

    def save_to_file(self, directory: Path | None = None) -> Path:
        """Export the recorded steps to a new file.

        Args:
            directory: Target directory (default: settings.output_directory);
                created when missing

        Returns:
            Path of the written file
        """
        timestamp = self._clock()
        code = self.export_code(timestamp)
        output_dir = Path(directory) if directory is not None else self.settings.output_directory
        output_dir.mkdir(parents=True, exist_ok=True)

        path = output_dir / self.suggested_file_name(timestamp)
        path.write_text(code, encoding="utf-8")
        logger.info("test_saved", path=str(path), steps=len(self._steps))
        return path

    def dispose(self) -> None:
        """Detach from the tree. Pending text is dropped."""
        if self._disposed:
            return
        self._coalescer.discard()
        if self._state is not RecorderState.OFF:
            self._set_state(RecorderState.OFF)
        self._disposed = True
        self._hovered = self._focused = None
        logger.info("session_disposed", steps=len(self._steps))
