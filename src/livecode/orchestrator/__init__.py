"""Frame loop orchestration."""

from livecode.orchestrator.frame import FRAME_SLEEP, FrameOrchestrator, TickReport

__all__ = ["FRAME_SLEEP", "FrameOrchestrator", "TickReport"]
