"""Supervisor notifications for hosts and tooling."""

from livecode.events.bus import EventBus
from livecode.events.types import EventType, SupervisorEvent

__all__ = ["EventBus", "EventType", "SupervisorEvent"]
