"""
Application layer for PhaseGuard.

Contains the session store and the services that enforce workflow rules.
"""

from phaseguard.application.escalation import EscalationPolicy, ResumeOutcome
from phaseguard.application.event_emitter import WorkflowEventEmitter
from phaseguard.application.guidance import (
    DirectiveGuidance,
    PhaseGuidance,
    SuggestiveGuidance,
    strategy_for,
)
from phaseguard.application.recorder import ArtifactRecorder, RecordResult
from phaseguard.application.safety import SafetyGate
from phaseguard.application.session_store import SessionStore
from phaseguard.application.validation import ValidationEngine
from phaseguard.application.workflow import (
    SessionStatus,
    SubmissionResult,
    SubmissionStatus,
    WorkflowOrchestrator,
)

__all__ = [
    "ArtifactRecorder",
    "DirectiveGuidance",
    "EscalationPolicy",
    "PhaseGuidance",
    "RecordResult",
    "ResumeOutcome",
    "SafetyGate",
    "SessionStatus",
    "SessionStore",
    "SubmissionResult",
    "SubmissionStatus",
    "SuggestiveGuidance",
    "ValidationEngine",
    "WorkflowEventEmitter",
    "WorkflowOrchestrator",
    "strategy_for",
]
