"""Fault containment: protected calls and the fault state machine."""

from livecode.fault.state import FaultStateMachine, FaultStatus, PresentationSnapshot
from livecode.fault.trap import ExecutionTrap, Fault, Outcome, Phase, format_report

__all__ = [
    "ExecutionTrap",
    "Fault",
    "FaultStateMachine",
    "FaultStatus",
    "Outcome",
    "Phase",
    "PresentationSnapshot",
    "format_report",
]
