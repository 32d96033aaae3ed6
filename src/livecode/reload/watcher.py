"""Change tracking for code units and tracked assets.

Uses modification times only: a resource has changed when its current
timestamp is strictly greater than the last one seen. Missing resources
are skipped until they reappear.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from livecode.host.interface import FileSystem

logger = logging.getLogger(__name__)


@dataclass
class WatchedUnit:
    """A code unit acquired through the tracked load path."""

    name: str
    last_seen: float | None = None  # None until the resource has been seen


@dataclass
class TrackedAsset:
    """A non-code resource with a reactive callback."""

    name: str
    callback: Callable[[], Any]
    last_seen: float = 0.0
    delay: float | None = None  # settle delay in seconds


class ChangeTracker:
    """Keeps last-seen timestamps and reports what changed since the last poll."""

    def __init__(self, filesystem: FileSystem):
        self.filesystem = filesystem
        self._units: dict[str, WatchedUnit] = {}
        self._assets: dict[str, TrackedAsset] = {}

    @property
    def units(self) -> Mapping[str, WatchedUnit]:
        return MappingProxyType(self._units)

    @property
    def assets(self) -> Mapping[str, TrackedAsset]:
        return MappingProxyType(self._assets)

    def _current(self, name: str) -> float | None:
        if not self.filesystem.exists(name):
            return None
        return self.filesystem.last_modified(name)

    def observe(self, name: str) -> WatchedUnit:
        """Record or refresh a code unit's baseline without reporting a change.

        Args:
            name: Resource name of the unit.

        Returns:
            The watched unit.
        """
        unit = self._units.get(name)
        if unit is None:
            unit = WatchedUnit(name=name)
            self._units[name] = unit
            logger.debug(f"Watching code unit {name}")
        unit.last_seen = self._current(name)
        return unit

    def poll_units(self) -> list[str]:
        """Detect code units modified since the last poll.

        Returns:
            Names of changed units, in registration order.
        """
        changed: list[str] = []

        for name, unit in self._units.items():
            current = self._current(name)
            if current is None:
                continue  # Deleted or not created yet

            if unit.last_seen is None:
                # First sight establishes the baseline
                unit.last_seen = current
                continue

            if current > unit.last_seen:
                unit.last_seen = current
                changed.append(name)

        return changed

    def track(self, name: str, callback: Callable[[], Any], delay: float | None = None) -> TrackedAsset:
        """Register or replace a tracked asset.

        The baseline is the asset's current timestamp, or 0 if it does not
        exist yet, so a file created later counts as a change.
        """
        asset = TrackedAsset(
            name=name,
            callback=callback,
            last_seen=self._current(name) or 0.0,
            delay=delay,
        )
        self._assets[name] = asset
        logger.debug(f"Tracking asset {name} (delay={delay})")
        return asset

    def untrack(self, name: str) -> TrackedAsset | None:
        """Stop tracking an asset, returning it if it was tracked."""
        return self._assets.pop(name, None)

    def poll_assets(self) -> list[TrackedAsset]:
        """Detect tracked assets modified since the last poll."""
        changed: list[TrackedAsset] = []

        for name, asset in list(self._assets.items()):
            current = self._current(name)
            if current is None:
                continue

            if current > asset.last_seen:
                asset.last_seen = current
                changed.append(asset)

        return changed
