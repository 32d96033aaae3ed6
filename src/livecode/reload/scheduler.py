"""Asset callback scheduling.

Editors often touch a file before they finish writing it. Assets registered
with a settle delay therefore fire ``delay`` seconds after the most recent
change instead of immediately. Each callback has at most one pending fire;
a change arriving before it is due moves the due time (last write wins).
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from livecode.events import EventBus, EventType
from livecode.fault.trap import ExecutionTrap, Phase
from livecode.reload.watcher import TrackedAsset

logger = logging.getLogger(__name__)


@dataclass
class PendingFire:
    """A delayed asset callback waiting for its due time."""

    name: str
    callback: Callable[[], Any]
    due: float


class ReloadScheduler:
    """Fires asset callbacks immediately or after their settle delay."""

    def __init__(self, trap: ExecutionTrap, event_bus: EventBus | None = None):
        self.trap = trap
        self.event_bus = event_bus
        self._pending: dict[Callable[[], Any], PendingFire] = {}

    @property
    def pending(self) -> Mapping[Callable[[], Any], PendingFire]:
        return MappingProxyType(self._pending)

    def _emit(self, event_type: EventType, data: dict[str, Any]) -> None:
        if self.event_bus is not None:
            self.event_bus.emit(event_type, data)

    def _fire(self, name: str, callback: Callable[[], Any]) -> bool:
        outcome = self.trap.protect(callback, Phase.ASSET)
        if outcome.ok:
            logger.debug(f"Asset callback for {name} completed")
            self._emit(EventType.ASSET_FIRED, {"name": name})
        return outcome.ok

    def handle_changed_asset(self, asset: TrackedAsset, now: float) -> bool:
        """React to a changed asset.

        Args:
            asset: The asset whose timestamp advanced.
            now: Current clock time in seconds.

        Returns:
            True if the callback ran successfully this tick.
        """
        if asset.delay:
            due = now + asset.delay
            self._pending[asset.callback] = PendingFire(name=asset.name, callback=asset.callback, due=due)
            logger.debug(f"Asset {asset.name} scheduled at {due:.3f}")
            self._emit(EventType.ASSET_SCHEDULED, {"name": asset.name, "due": due})
            return False

        return self._fire(asset.name, asset.callback)

    def fire_due(self, now: float) -> int:
        """Fire every pending callback whose due time has passed.

        Returns:
            Number of callbacks that ran successfully.
        """
        succeeded = 0
        for callback, pending in list(self._pending.items()):
            if now < pending.due:
                continue
            del self._pending[callback]
            if self._fire(pending.name, callback):
                succeeded += 1
        return succeeded

    def cancel(self, callback: Callable[[], Any]) -> bool:
        """Drop the pending fire for ``callback``, if any."""
        return self._pending.pop(callback, None) is not None
