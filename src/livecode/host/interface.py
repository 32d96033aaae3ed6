"""Host runtime interface abstraction.

The supervisor consumes, but does not implement, the host's file system,
clock, event and presentation subsystems. Hosts adapt their framework to
these classes; ``livecode.host.local`` provides stdlib-backed versions of the
ones that do not need a window.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from types import CodeType
from typing import Any


@dataclass(frozen=True)
class Event:
    """A host input/window event.

    ``quit`` and ``keypressed`` (first argument: key identifier) are
    interpreted by the supervisor; every other name is forwarded to the
    runtime's handler table untouched.
    """

    name: str
    args: tuple[Any, ...] = ()


@dataclass
class Chunk:
    """An acquired code unit, ready to execute.

    Calling the chunk runs its top-level statements in ``namespace``, which
    is normally the runtime's shared hook namespace, so redefinitions of
    ``update``/``draw``/... replace the previous ones.
    """

    name: str
    code: CodeType
    namespace: dict[str, Any] = field(default_factory=dict)

    def __call__(self) -> dict[str, Any]:
        exec(self.code, self.namespace)
        return self.namespace


class FileSystem(ABC):
    """Timestamp queries and code acquisition for named resources."""

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check whether the named resource currently exists."""

    @abstractmethod
    def last_modified(self, name: str) -> float:
        """Return the modification time of an existing resource."""

    @abstractmethod
    def compile(self, name: str) -> CodeType:
        """Read and compile the named resource.

        Raises:
            SyntaxError: If the source cannot be parsed.
            OSError: If the resource cannot be read.
        """


class Timer(ABC):
    """Monotonic clock with a per-tick delta."""

    @abstractmethod
    def step(self) -> None:
        """Advance to the next frame, measuring the delta since the last step."""

    @abstractmethod
    def get_delta(self) -> float:
        """Seconds between the two most recent steps."""

    @abstractmethod
    def get_time(self) -> float:
        """Current monotonic time in seconds."""

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Yield to the host scheduler."""


class EventSource(ABC):
    """Source of host input and window events."""

    @abstractmethod
    def pump(self) -> None:
        """Collect pending events from the host."""

    @abstractmethod
    def poll(self) -> Iterable[Event]:
        """Yield the collected events, consuming them."""


class Graphics(ABC):
    """Presentation primitives used for frame setup and fault display."""

    @abstractmethod
    def is_active(self) -> bool:
        """Whether a display surface is currently available."""

    @abstractmethod
    def clear(self) -> None:
        """Clear the surface to the background color."""

    @abstractmethod
    def origin(self) -> None:
        """Reset the current transform to identity."""

    @abstractmethod
    def push(self) -> None:
        """Save transform and drawing state on the stack."""

    @abstractmethod
    def pop(self) -> None:
        """Restore the most recently pushed transform and drawing state."""

    @abstractmethod
    def reset(self) -> None:
        """Reset drawing state (colors, clip, render target) to defaults."""

    @abstractmethod
    def get_font(self) -> Any:
        """Return the active font."""

    @abstractmethod
    def set_font(self, font: Any) -> None:
        """Make ``font`` the active font."""

    @abstractmethod
    def new_font(self, size: int) -> Any:
        """Create a default font of ``size`` and make it active."""

    @abstractmethod
    def print(self, text: str, x: float, y: float) -> None:
        """Draw text at a position."""

    @abstractmethod
    def present(self) -> None:
        """Show the finished frame."""

    def get_pixel_scale(self) -> float:
        """Display scale factor (1.0 unless the host reports high-DPI)."""
        return 1.0
