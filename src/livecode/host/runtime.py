"""Host runtime bundle.

A ``Runtime`` groups the host collaborators with the shared namespace in
which the application's code units run. Hooks (``load``, ``update``,
``draw``, ``livereload``, ``quit``) are looked up by name each time they are
needed, so a reloaded unit that redefines one takes effect on the next call.
References the application captured itself (e.g. ``self.on_hit = update``)
keep pointing at the old function; the ``livereload`` hook is where hosts
rebind them.
"""

import logging
from collections.abc import Callable
from typing import Any

from livecode.host.interface import Chunk, Event, EventSource, FileSystem, Graphics, Timer

logger = logging.getLogger(__name__)


class Runtime:
    """Host collaborators plus the application's hook namespace."""

    def __init__(
        self,
        filesystem: FileSystem,
        graphics: Graphics | None = None,
        events: EventSource | None = None,
        timer: Timer | None = None,
        namespace: dict[str, Any] | None = None,
        handlers: dict[str, Callable[..., Any]] | None = None,
        teardown: Callable[[], None] | None = None,
    ):
        """Initialize the runtime.

        Args:
            filesystem: Timestamp and code acquisition provider (required).
            graphics: Presentation primitives; frames are not drawn without it.
            events: Input/window event source; no events are processed without it.
            timer: Frame clock; the per-tick delta is 0 without it.
            namespace: Shared namespace for code units and hooks.
            handlers: Event name to handler overrides. Events without an
                entry are forwarded to the hook of the same name, if any.
            teardown: Called once when the main loop exits on quit.
        """
        self.filesystem = filesystem
        self.graphics = graphics
        self.events = events
        self.timer = timer
        self.namespace: dict[str, Any] = namespace if namespace is not None else {}
        self.handlers: dict[str, Callable[..., Any]] = dict(handlers or {})
        self.teardown = teardown
        self.run: Callable[..., Any] | None = None

    def hook(self, name: str) -> Callable[..., Any] | None:
        """Return the callable currently bound to ``name``, if any."""
        value = self.namespace.get(name)
        return value if callable(value) else None

    def dispatch(self, event: Event) -> None:
        """Forward an event to its handler.

        Unknown events are ignored. Exceptions propagate to the caller.
        """
        handler = self.handlers.get(event.name) or self.hook(event.name)
        if handler is None:
            logger.debug(f"No handler for event {event.name}")
            return
        handler(*event.args)

    def load(self, name: str) -> Chunk:
        """Acquire a code unit bound to the shared namespace.

        Replaced by the supervisor's tracked version on installation.
        """
        return Chunk(name=name, code=self.filesystem.compile(name), namespace=self.namespace)

    def graphics_active(self) -> bool:
        """Whether frames can be drawn this tick."""
        return self.graphics is not None and self.graphics.is_active()
