"""Supervisor notification types."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Things the supervisor reports to subscribers."""

    # Code unit events
    UNIT_RELOADED = "unit.reloaded"
    UNIT_FAILED = "unit.failed"

    # Asset events
    ASSET_SCHEDULED = "asset.scheduled"
    ASSET_FIRED = "asset.fired"

    # Fault events
    FAULT_RAISED = "fault.raised"
    FAULT_CLEARED = "fault.cleared"

    # Hook events
    HOOK_RESET = "hook.reset"
    HOOK_LIVERELOAD = "hook.livereload"


class SupervisorEvent(BaseModel):
    """A notification published on the supervisor's event bus."""

    id: str = Field(default_factory=lambda: uuid4().hex[:12])
    type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    data: dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "type": self.type.value,
            "timestamp": self.timestamp.isoformat(),
            "data": self.data,
        }
