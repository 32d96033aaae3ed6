"""Fault state machine.

Two states, ``CLEAR`` and ``FAULTED``. Any trapped failure moves to
``FAULTED``; only ``clear_if_faulted()`` (called when a code reload is
attempted or on manual reset) moves back. While faulted the orchestrator
skips the update phase and draws the fault placeholder instead of the
application's draw hook.

When the fault is shown on screen, the presentation state is snapshotted
on entry (transform stack pushed, state reset, font swapped for a fallback)
and restored exactly on exit, so drawing the report does not leak into the
application's frames once it resumes.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from livecode.config import LivecodeConfig
from livecode.host.interface import Graphics

if TYPE_CHECKING:
    from livecode.fault.trap import Fault

logger = logging.getLogger(__name__)

ERROR_FONT_SIZE = 14
ERROR_MARGIN = 20


class FaultStatus(str, Enum):
    """Fault state machine states."""

    CLEAR = "clear"
    FAULTED = "faulted"


@dataclass
class PresentationSnapshot:
    """Presentation state saved while a fault is displayed."""

    font: Any
    pixel_scale: float = 1.0


class FaultStateMachine:
    """Process-wide fault flag, message and presentation snapshot."""

    def __init__(self, config: LivecodeConfig, graphics: Graphics | None = None):
        self.config = config
        self.graphics = graphics
        self.status = FaultStatus.CLEAR
        self.message = ""
        self.current_fault: "Fault | None" = None
        self._snapshot: PresentationSnapshot | None = None

    @property
    def faulted(self) -> bool:
        return self.status is FaultStatus.FAULTED

    @property
    def snapshot(self) -> PresentationSnapshot | None:
        return self._snapshot

    def _graphics_active(self) -> bool:
        return self.graphics is not None and self.graphics.is_active()

    def _store_presentation(self) -> None:
        graphics = self.graphics
        if graphics is None:
            return
        scale = graphics.get_pixel_scale()
        graphics.push()
        graphics.reset()
        graphics.origin()
        font = graphics.get_font()
        graphics.new_font(math.floor(ERROR_FONT_SIZE * scale))
        self._snapshot = PresentationSnapshot(font=font, pixel_scale=scale)

    def _restore_presentation(self) -> None:
        graphics = self.graphics
        snapshot = self._snapshot
        self._snapshot = None
        if graphics is None or snapshot is None:
            return
        graphics.pop()
        graphics.set_font(snapshot.font)

    def enter_fault(self, fault: "Fault") -> None:
        """Enter (or stay in) the faulted state with a new report.

        A second fault while already faulted replaces the message but keeps
        the original snapshot, so a single clear restores the pre-fault state.
        """
        self.status = FaultStatus.FAULTED
        self.message = fault.report
        self.current_fault = fault
        if (
            self.config.show_error_on_screen
            and self._snapshot is None
            and self._graphics_active()
        ):
            self._store_presentation()
            logger.debug("Presentation state saved for fault display")

    def clear_if_faulted(self) -> bool:
        """Leave the faulted state, restoring presentation if it was saved.

        Returns:
            True if a fault was active.
        """
        was_faulted = self.faulted
        if self._snapshot is not None:
            self._restore_presentation()
            logger.debug("Presentation state restored")
        self.status = FaultStatus.CLEAR
        self.message = ""
        self.current_fault = None
        return was_faulted

    def draw_fault(self) -> None:
        """Render the stored report over a cleared surface."""
        graphics = self.graphics
        if graphics is None:
            return
        scale = self._snapshot.pixel_scale if self._snapshot else graphics.get_pixel_scale()
        pos = ERROR_MARGIN * scale
        graphics.clear()
        graphics.print(self.message, pos, pos)
