"""Stdlib-backed host collaborators.

Suitable for headless hosts and for frameworks that deliver events through
callbacks (push them into a ``QueueEventSource``).
"""

import time
from collections import deque
from collections.abc import Iterator
from pathlib import Path
from types import CodeType

from livecode.host.interface import Event, EventSource, FileSystem, Timer


class LocalFileSystem(FileSystem):
    """Resources are paths relative to a root directory."""

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root) if root is not None else Path.cwd()

    def resolve(self, name: str) -> Path:
        """Map a resource name to a path under the root."""
        path = Path(name)
        return path if path.is_absolute() else self.root / path

    def exists(self, name: str) -> bool:
        return self.resolve(name).is_file()

    def last_modified(self, name: str) -> float:
        return self.resolve(name).stat().st_mtime

    def compile(self, name: str) -> CodeType:
        """Compile against the real path so tracebacks can show source lines."""
        path = self.resolve(name)
        source = path.read_text(encoding="utf-8")
        return compile(source, str(path), "exec")


class MonotonicTimer(Timer):
    """Frame clock based on ``time.perf_counter``."""

    def __init__(self) -> None:
        self._last_step = time.perf_counter()
        self._delta = 0.0

    def step(self) -> None:
        now = time.perf_counter()
        self._delta = now - self._last_step
        self._last_step = now

    def get_delta(self) -> float:
        return self._delta

    def get_time(self) -> float:
        return time.perf_counter()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class QueueEventSource(EventSource):
    """Event source fed by the host.

    Events pushed between ticks are delivered on the next ``poll`` after a
    ``pump``; events pushed while polling wait for the following tick.
    """

    def __init__(self) -> None:
        self._incoming: deque[Event] = deque()
        self._ready: deque[Event] = deque()

    def push(self, name: str, *args: object) -> None:
        """Queue an event for the next tick."""
        self._incoming.append(Event(name=name, args=args))

    def pump(self) -> None:
        self._ready.extend(self._incoming)
        self._incoming.clear()

    def poll(self) -> Iterator[Event]:
        while self._ready:
            yield self._ready.popleft()

    def __len__(self) -> int:
        return len(self._incoming) + len(self._ready)
