"""Execution trap for user-supplied and reloaded code.

Every call into application code goes through ``ExecutionTrap.protect``.
A failure never unwinds past it: the caller gets an ``Outcome`` carrying
either the value or the ``Fault``, the report is written to the diagnostic
stream and the fault state machine is moved to ``FAULTED``.
"""

import logging
import traceback
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Generic, TypeVar

from livecode.config import LivecodeConfig
from livecode.console import Diagnostics
from livecode.events import EventBus, EventType
from livecode.fault.state import FaultStateMachine

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Frames from this package (the trap itself, chunk execution, event
# dispatch) are stripped from reports.
_PACKAGE_DIR = Path(__file__).resolve().parent.parent


class Phase(str, Enum):
    """Where a trapped call was made."""

    LOAD = "load"
    EVENT = "event"
    QUIT = "quit"
    ACQUIRE = "acquire"
    EXECUTE = "execute"
    ASSET = "asset"
    RESET = "reset"
    LIVE_RELOAD = "livereload"
    UPDATE = "update"
    DRAW = "draw"


@dataclass
class Fault:
    """A trapped failure."""

    phase: Phase
    error: Exception
    report: str
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class Outcome(Generic[T]):
    """Result of a protected call."""

    value: T | None = None
    fault: Fault | None = None

    @property
    def ok(self) -> bool:
        return self.fault is None

    def __bool__(self) -> bool:
        return self.ok


def _is_internal(filename: str) -> bool:
    try:
        return Path(filename).resolve().is_relative_to(_PACKAGE_DIR)
    except (OSError, ValueError):
        return False


def format_report(error: BaseException) -> str:
    """Build a human-readable report for a trapped exception.

    The first line is ``Error: <type>: <message>``, followed by the
    application frames of the traceback. Frames belonging to this package
    are left out. For syntax errors the offending source line and caret are
    appended.
    """
    lines = [f"Error: {type(error).__name__}: {error}"]

    frames = [
        frame
        for frame in traceback.extract_tb(error.__traceback__)
        if not _is_internal(frame.filename)
    ]
    if frames:
        lines.append("Traceback (most recent call last):")
        lines.extend(
            entry.rstrip("\n") for entry in traceback.StackSummary.from_list(frames).format()
        )

    if isinstance(error, SyntaxError):
        # Drop the final "SyntaxError: ..." line, already in the header
        detail = traceback.format_exception_only(type(error), error)[:-1]
        lines.extend(entry.rstrip("\n") for entry in detail)

    return "\n".join(lines)


class ExecutionTrap:
    """Protected-call boundary feeding the fault state machine."""

    def __init__(
        self,
        config: LivecodeConfig,
        diagnostics: Diagnostics,
        state: FaultStateMachine,
        event_bus: EventBus | None = None,
    ):
        self.config = config
        self.diagnostics = diagnostics
        self.state = state
        self.event_bus = event_bus

    def _apply_error_callback(self, report: str) -> str:
        callback = self.config.error_callback
        if callback is None:
            return report
        try:
            return str(callback(report))
        except Exception:
            logger.exception("error_callback failed, using unprocessed report")
            return report

    def handle(self, error: Exception, phase: Phase) -> Fault:
        """Report a failure and move the state machine to FAULTED."""
        report = self._apply_error_callback(format_report(error))
        fault = Fault(phase=phase, error=error, report=report)

        self.diagnostics.write(report)
        self.state.enter_fault(fault)
        logger.debug(f"Trapped {type(error).__name__} during {phase.value}")

        if self.event_bus is not None:
            self.event_bus.emit(
                EventType.FAULT_RAISED,
                {"phase": phase.value, "error": type(error).__name__, "report": report},
            )
        return fault

    def protect(self, action: Callable[..., T], phase: Phase, *args: Any) -> Outcome[T]:
        """Run ``action(*args)``, containing any exception it raises.

        Args:
            action: The callable to run.
            phase: Recorded on the fault if the call fails.
            *args: Forwarded to ``action``.

        Returns:
            Outcome with the return value, or with the fault on failure.
        """
        try:
            value = action(*args)
        except Exception as e:
            return Outcome(fault=self.handle(e, phase))
        return Outcome(value=value)
