"""Host runtime interfaces and stdlib-backed implementations."""

from livecode.host.interface import Chunk, Event, EventSource, FileSystem, Graphics, Timer
from livecode.host.local import LocalFileSystem, MonotonicTimer, QueueEventSource
from livecode.host.runtime import Runtime

__all__ = [
    "Chunk",
    "Event",
    "EventSource",
    "FileSystem",
    "Graphics",
    "LocalFileSystem",
    "MonotonicTimer",
    "QueueEventSource",
    "Runtime",
    "Timer",
]
