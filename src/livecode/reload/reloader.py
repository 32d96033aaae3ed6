"""Code unit reloading.

Reloading a unit means acquiring (re-reading and compiling) it through the
tracked load path and executing its top-level statements again in the shared
namespace, so the functions it defines replace the previous ones.
"""

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from livecode.config import LivecodeConfig
from livecode.console import Diagnostics
from livecode.events import EventBus, EventType
from livecode.fault.state import FaultStateMachine
from livecode.fault.trap import ExecutionTrap, Phase
from livecode.host.interface import Chunk

logger = logging.getLogger(__name__)


class ReloadStatus(Enum):
    """Status of a reload operation."""

    SUCCESS = "success"
    FAILED_ACQUIRE = "failed_acquire"
    FAILED_EXECUTE = "failed_execute"


@dataclass
class ReloadResult:
    """Result of reloading one code unit."""

    name: str
    status: ReloadStatus
    error_message: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def ok(self) -> bool:
        return self.status is ReloadStatus.SUCCESS


class CodeReloader:
    """Re-acquires and re-executes changed code units.

    Flow per unit:
    1. Print the reload notice (if ``log_reloads``)
    2. Clear any active fault
    3. Acquire the unit through the trap; stop here on failure
    4. Execute the unit through the trap
    """

    def __init__(
        self,
        load: Callable[[str], Chunk],
        trap: ExecutionTrap,
        state: FaultStateMachine,
        config: LivecodeConfig,
        diagnostics: Diagnostics,
        event_bus: EventBus | None = None,
        history_size: int = 50,
    ):
        """Initialize the reloader.

        Args:
            load: Tracked load entry point returning an executable chunk.
            trap: Protected-call boundary.
            state: Fault state machine, cleared before every attempt.
            config: Live configuration.
            diagnostics: Diagnostic stream for reload notices.
            event_bus: Optional notification bus.
            history_size: Number of results kept for ``get_reload_history``.
        """
        self.load = load
        self.trap = trap
        self.state = state
        self.config = config
        self.diagnostics = diagnostics
        self.event_bus = event_bus
        self._reload_history: deque[ReloadResult] = deque(maxlen=history_size)

    def _record(self, result: ReloadResult) -> ReloadResult:
        self._reload_history.append(result)
        if self.event_bus is not None:
            event_type = EventType.UNIT_RELOADED if result.ok else EventType.UNIT_FAILED
            self.event_bus.emit(
                event_type,
                {"name": result.name, "status": result.status.value, "error": result.error_message},
            )
        return result

    def reload(self, name: str) -> ReloadResult:
        """Reload a single code unit.

        Args:
            name: Resource name of the changed unit.

        Returns:
            ReloadResult describing the outcome.
        """
        if self.config.log_reloads:
            self.diagnostics.write(f"updated file {name}")

        if self.state.clear_if_faulted() and self.event_bus is not None:
            self.event_bus.emit(EventType.FAULT_CLEARED, {"reason": "reload", "name": name})

        acquired = self.trap.protect(self.load, Phase.ACQUIRE, name)
        if not acquired.ok:
            logger.warning(f"Failed to acquire {name}, reload aborted")
            error = acquired.fault.error if acquired.fault else None
            return self._record(
                ReloadResult(name=name, status=ReloadStatus.FAILED_ACQUIRE, error_message=str(error))
            )

        executed = self.trap.protect(acquired.value, Phase.EXECUTE)
        if not executed.ok:
            logger.warning(f"Failed to execute {name}")
            return self._record(
                ReloadResult(
                    name=name,
                    status=ReloadStatus.FAILED_EXECUTE,
                    error_message=str(executed.fault.error) if executed.fault else None,
                )
            )

        logger.info(f"Reloaded code unit: {name}")
        return self._record(ReloadResult(name=name, status=ReloadStatus.SUCCESS))

    def reload_all(self, names: list[str]) -> list[ReloadResult]:
        """Reload each unit in order; a failure does not stop the others.

        Every attempt clears the active fault first, so the batch leaves the
        session faulted only when its last unit failed.
        """
        return [self.reload(name) for name in names]

    def get_reload_history(self, limit: int = 10) -> list[ReloadResult]:
        """Get recent reload history.

        Args:
            limit: Maximum number of results to return.

        Returns:
            List of recent ReloadResults.
        """
        return list(self._reload_history)[-limit:]
