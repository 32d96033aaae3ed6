"""Pytest configuration and fixtures.

In-memory stand-ins for the host collaborators, so reload and fault
behavior can be driven tick by tick with controlled timestamps and time.
"""

import io
from collections.abc import Iterator
from dataclasses import dataclass, field
from types import CodeType
from typing import Any

import pytest

from livecode import LivecodeConfig, QueueEventSource, Runtime, Supervisor
from livecode.host.interface import FileSystem, Graphics, Timer


class FakeFileSystem(FileSystem):
    """Resources held in a dict of name -> (mtime, source)."""

    def __init__(self) -> None:
        self.files: dict[str, tuple[float, str]] = {}
        self.compiled: list[str] = []

    def write(self, name: str, source: str = "", mtime: float = 100.0) -> None:
        self.files[name] = (mtime, source)

    def touch(self, name: str, mtime: float) -> None:
        _, source = self.files[name]
        self.files[name] = (mtime, source)

    def remove(self, name: str) -> None:
        del self.files[name]

    def exists(self, name: str) -> bool:
        return name in self.files

    def last_modified(self, name: str) -> float:
        return self.files[name][0]

    def compile(self, name: str) -> CodeType:
        if name not in self.files:
            raise FileNotFoundError(name)
        self.compiled.append(name)
        return compile(self.files[name][1], name, "exec")


class FakeTimer(Timer):
    """Manually driven clock; ``sleep`` only records."""

    def __init__(self, dt: float = 0.016) -> None:
        self.time = 0.0
        self.dt = dt
        self.steps = 0
        self.sleeps: list[float] = []

    def step(self) -> None:
        self.steps += 1

    def get_delta(self) -> float:
        return self.dt

    def get_time(self) -> float:
        return self.time

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)


@dataclass(frozen=True)
class FakeFont:
    name: str
    size: int = 12


@dataclass
class FakeGraphics(Graphics):
    """Records calls and keeps a transform stack and drawing state."""

    active: bool = True
    scale: float = 1.0
    transform: tuple[Any, ...] = ()
    font: FakeFont = field(default_factory=lambda: FakeFont("app"))
    state: dict[str, Any] = field(default_factory=lambda: {"color": "white", "scissor": None})
    stack: list[tuple[tuple[Any, ...], dict[str, Any]]] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)
    printed: list[tuple[str, float, float]] = field(default_factory=list)
    presents: int = 0

    def is_active(self) -> bool:
        return self.active

    def clear(self) -> None:
        self.calls.append("clear")

    def origin(self) -> None:
        self.calls.append("origin")
        self.transform = ()

    def translate(self, x: float, y: float) -> None:
        self.transform = (*self.transform, ("translate", x, y))

    def push(self) -> None:
        self.calls.append("push")
        self.stack.append((self.transform, dict(self.state)))

    def pop(self) -> None:
        self.calls.append("pop")
        self.transform, self.state = self.stack.pop()

    def reset(self) -> None:
        self.calls.append("reset")
        self.state = {"color": "white", "scissor": None}

    def get_font(self) -> FakeFont:
        return self.font

    def set_font(self, font: FakeFont) -> None:
        self.calls.append("set_font")
        self.font = font

    def new_font(self, size: int) -> FakeFont:
        self.calls.append("new_font")
        self.font = FakeFont("fallback", size)
        return self.font

    def print(self, text: str, x: float, y: float) -> None:
        self.calls.append("print")
        self.printed.append((text, x, y))

    def present(self) -> None:
        self.calls.append("present")
        self.presents += 1

    def get_pixel_scale(self) -> float:
        return self.scale


@pytest.fixture
def filesystem() -> FakeFileSystem:
    fs = FakeFileSystem()
    fs.write("main.py", "", mtime=100.0)
    return fs


@pytest.fixture
def graphics() -> FakeGraphics:
    return FakeGraphics()


@pytest.fixture
def timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def events() -> QueueEventSource:
    return QueueEventSource()


@pytest.fixture
def runtime(filesystem, graphics, timer, events) -> Runtime:
    return Runtime(filesystem, graphics=graphics, events=events, timer=timer)


@pytest.fixture
def output() -> io.StringIO:
    """Captured diagnostic stream."""
    return io.StringIO()


@pytest.fixture
def config() -> LivecodeConfig:
    return LivecodeConfig()


@pytest.fixture
def supervisor(runtime, config, output) -> Iterator[Supervisor]:
    supervisor = Supervisor(runtime, config=config, entry="main.py", stream=output).install()
    yield supervisor
    supervisor.uninstall()
