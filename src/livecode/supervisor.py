"""Live-reload supervisor.

The supervisor owns all reload and fault state for one runtime: watched
code units, tracked assets, pending asset fires and the fault state
machine. It is built once at startup and handed to the frame orchestrator.

Typical use from the application's entry unit::

    supervisor = livecode.install(runtime, entry="main.py")
    supervisor.track_file("player.png", reload_player_image, delay_ms=200)
    runtime.load("player.py")()   # tracked from now on
    runtime.run()
"""

import logging
import sys
import time
from collections.abc import Callable
from typing import Any, TextIO

from livecode.config import LivecodeConfig
from livecode.console import Diagnostics
from livecode.events import EventBus, EventType
from livecode.fault.state import FaultStateMachine
from livecode.fault.trap import ExecutionTrap, Phase
from livecode.host.interface import Chunk
from livecode.host.runtime import Runtime
from livecode.orchestrator.frame import FrameOrchestrator, TickReport
from livecode.reload.reloader import CodeReloader
from livecode.reload.scheduler import ReloadScheduler
from livecode.reload.watcher import ChangeTracker, TrackedAsset

logger = logging.getLogger(__name__)


class Supervisor:
    """Owns change tracking, reload scheduling and fault containment."""

    def __init__(
        self,
        runtime: Runtime,
        config: LivecodeConfig | None = None,
        entry: str | None = "main.py",
        stream: TextIO | None = None,
        event_bus: EventBus | None = None,
    ):
        """Initialize the supervisor.

        Args:
            runtime: Host collaborators and hook namespace.
            config: Live configuration (defaults if omitted).
            entry: Entry code unit, watched from the start. None to skip.
            stream: Diagnostic stream (stdout if omitted).
            event_bus: Bus for supervisor notifications.
        """
        self.runtime = runtime
        self.config = config or LivecodeConfig()
        self.event_bus = event_bus or EventBus()
        self.diagnostics = Diagnostics(self.config, stream)

        self.state = FaultStateMachine(self.config, runtime.graphics)
        self.trap = ExecutionTrap(self.config, self.diagnostics, self.state, self.event_bus)
        self.tracker = ChangeTracker(runtime.filesystem)
        self.scheduler = ReloadScheduler(self.trap, self.event_bus)
        self.reloader = CodeReloader(
            self.load,
            self.trap,
            self.state,
            self.config,
            self.diagnostics,
            self.event_bus,
        )
        self.orchestrator = FrameOrchestrator(self)

        self.entry = entry
        self._untracked_load: Callable[[str], Chunk] = runtime.load
        self._installed = False
        self._line_buffered: tuple[Any, bool] | None = None

        # The entry unit is loaded by the host before the supervisor exists,
        # so its baseline is taken here instead of through load().
        if entry is not None:
            self.tracker.observe(entry)

    @property
    def installed(self) -> bool:
        return self._installed

    @property
    def faulted(self) -> bool:
        return self.state.faulted

    def install(self) -> "Supervisor":
        """Replace the runtime's load and run entry points."""
        if self._installed:
            return self
        self._untracked_load = self.runtime.load
        self.runtime.load = self.load  # type: ignore[method-assign]
        self.runtime.run = self.run
        if self.config.autoflush_output:
            self._line_buffer_stdout()
        self._installed = True
        logger.info(f"livecode installed (entry: {self.entry})")
        return self

    def uninstall(self) -> None:
        """Restore the runtime's original entry points."""
        if not self._installed:
            return
        self.runtime.load = self._untracked_load  # type: ignore[method-assign]
        self.runtime.run = None
        if self._line_buffered is not None:
            stream, line_buffering = self._line_buffered
            stream.reconfigure(line_buffering=line_buffering)
            self._line_buffered = None
        self._installed = False

    def _line_buffer_stdout(self) -> None:
        """Make the host's own prints appear line by line."""
        stdout = sys.stdout
        if not hasattr(stdout, "reconfigure"):
            logger.debug("stdout cannot be reconfigured, leaving buffering as is")
            return
        self._line_buffered = (stdout, stdout.line_buffering)
        stdout.reconfigure(line_buffering=True)

    def load(self, name: str) -> Chunk:
        """Tracked load: watch ``name``, then acquire it."""
        self.tracker.observe(name)
        return self._untracked_load(name)

    def track_file(
        self,
        name: str,
        callback: Callable[[], Any] | None = None,
        delay_ms: float | None = None,
    ) -> TrackedAsset | None:
        """Register, replace or remove a tracked asset.

        Args:
            name: Resource name of the asset.
            callback: Called when the asset changes. None removes the asset
                and any pending fire for it.
            delay_ms: Settle delay in milliseconds; the callback fires this
                long after the most recent change. 0 or None fires immediately.

        Returns:
            The tracked asset, or None when it was removed.

        Raises:
            TypeError: If ``callback`` is not callable.
            ValueError: If ``delay_ms`` is negative.
        """
        if callback is None:
            removed = self.tracker.untrack(name)
            if removed is not None:
                self.scheduler.cancel(removed.callback)
                logger.debug(f"Stopped tracking asset {name}")
            return None

        if not callable(callback):
            raise TypeError(f"callback for {name} must be callable")
        if delay_ms is not None and delay_ms < 0:
            raise ValueError(f"delay for {name} must be non-negative, got {delay_ms}")

        delay = delay_ms / 1000 if delay_ms else None
        return self.tracker.track(name, callback, delay)

    def now(self) -> float:
        """Current time used for pending asset fires."""
        timer = self.runtime.timer
        return timer.get_time() if timer is not None else time.monotonic()

    def reset(self) -> bool:
        """Clear any fault and run the load hook.

        Returns:
            True if the load hook ran without failing.
        """
        if self.state.clear_if_faulted():
            self.event_bus.emit(EventType.FAULT_CLEARED, {"reason": "reset"})

        load = self.runtime.hook("load")
        if load is None:
            return True
        self.event_bus.emit(EventType.HOOK_RESET, {"reason": "manual"})
        return self.trap.protect(load, Phase.RESET).ok

    def tick(self) -> TickReport:
        """Run a single frame of the main loop."""
        return self.orchestrator.tick()

    def run(self, *args: Any) -> Any:
        """Run the main loop until quit; ``args`` go to the load hook."""
        return self.orchestrator.run(*args)


def install(
    runtime: Runtime,
    entry: str | None = "main.py",
    config: LivecodeConfig | None = None,
    stream: TextIO | None = None,
) -> Supervisor:
    """Create a supervisor for ``runtime`` and install it."""
    return Supervisor(runtime, config=config, entry=entry, stream=stream).install()
