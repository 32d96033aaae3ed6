"""livecode - live-reload supervisor for frame-based applications.

Replaces the host's main loop, reloads code units and assets when their
files change, and contains errors from any phase so a broken edit can be
fixed and resumed without restarting.

Hosts wire it up at startup::

    livecode.setup_logging()          # optional: show the library's own logs
    supervisor = livecode.install(runtime, entry="main.py")
    runtime.run()
"""

__version__ = "0.1.0"

from livecode.config import LivecodeConfig
from livecode.console import setup_logging
from livecode.events import EventBus, EventType, SupervisorEvent
from livecode.fault import ExecutionTrap, Fault, FaultStateMachine, FaultStatus, Outcome, Phase
from livecode.host import (
    Chunk,
    Event,
    EventSource,
    FileSystem,
    Graphics,
    LocalFileSystem,
    MonotonicTimer,
    QueueEventSource,
    Runtime,
    Timer,
)
from livecode.orchestrator import FrameOrchestrator, TickReport
from livecode.reload import ChangeTracker, CodeReloader, ReloadResult, ReloadScheduler, ReloadStatus
from livecode.supervisor import Supervisor, install

__all__ = [
    "ChangeTracker",
    "Chunk",
    "CodeReloader",
    "Event",
    "EventBus",
    "EventSource",
    "EventType",
    "ExecutionTrap",
    "Fault",
    "FaultStateMachine",
    "FaultStatus",
    "FileSystem",
    "FrameOrchestrator",
    "Graphics",
    "LivecodeConfig",
    "LocalFileSystem",
    "MonotonicTimer",
    "Outcome",
    "Phase",
    "QueueEventSource",
    "ReloadResult",
    "ReloadScheduler",
    "ReloadStatus",
    "Runtime",
    "Supervisor",
    "SupervisorEvent",
    "TickReport",
    "Timer",
    "__version__",
    "install",
    "setup_logging",
]
