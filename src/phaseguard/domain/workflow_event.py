"""Workflow execution trace models."""

from dataclasses import dataclass
from enum import Enum


class WorkflowEventType(str, Enum):
    """Types of workflow execution events."""

    SESSION_START = "SESSION_START"
    PHASE_ENTER = "PHASE_ENTER"
    PHASE_PASS = "PHASE_PASS"
    PHASE_FAIL = "PHASE_FAIL"
    ESCALATE = "ESCALATE"
    RESUME = "RESUME"
    SAFETY_DENIED = "SAFETY_DENIED"
    SESSION_END = "SESSION_END"


@dataclass(frozen=True)
class WorkflowEvent:
    """Single workflow state transition.

    Captures one observable change of a session for debugging and audit.
    """

    event_id: str
    event_type: WorkflowEventType
    session_id: str
    phase: str | None = None
    verdict: str | None = None  # "PASS", "FAIL", "FATAL", "DENIED"
    attempt: int | None = None
    trigger: str | None = None  # Escalation trigger or resume action
    summary: str = ""
    created_at: str = ""  # ISO 8601
