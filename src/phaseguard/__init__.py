"""
PhaseGuard: phase-gated workflow orchestration for coding agents.

Drives an agent through an ordered sequence of phases (audit, question,
plan, write, test, lint, iterate, present). Phase completion is gated by
validation, file modifications are gated by a read-before-write rule, and
stalled phases escalate to a human who decides how to resume.

Example:
    from phaseguard import WorkflowOrchestrator
    from phaseguard.infrastructure import InMemoryArtifactWriter, InMemoryWorkflowEventStore

    orchestrator = WorkflowOrchestrator(InMemoryArtifactWriter(), InMemoryWorkflowEventStore())
    orchestrator.start("Refactor the payment module")
    guidance = orchestrator.guidance("audit_inventory")
"""

__version__ = "0.1.0"

from phaseguard.application.escalation import EscalationPolicy, ResumeOutcome
from phaseguard.application.workflow import (
    SessionStatus,
    SubmissionResult,
    SubmissionStatus,
    WorkflowOrchestrator,
)
from phaseguard.domain.exceptions import (
    ConfigurationError,
    EscalationRequired,
    NoActiveSession,
    PhaseGuardError,
    SafetyViolation,
    ValidationFailure,
)
from phaseguard.domain.models import (
    GuidanceMode,
    OutputArtifact,
    ResumeAction,
    ResumeDecision,
    Session,
    ValidationReport,
    WorkflowConfiguration,
    WorkflowType,
)
from phaseguard.domain.phases import Phase
from phaseguard.domain.presets import PRESETS, configuration_for, detect_workflow_type

__all__ = [
    "__version__",
    # Application
    "WorkflowOrchestrator",
    "SubmissionResult",
    "SubmissionStatus",
    "SessionStatus",
    "EscalationPolicy",
    "ResumeOutcome",
    # Domain
    "Phase",
    "Session",
    "WorkflowConfiguration",
    "WorkflowType",
    "GuidanceMode",
    "OutputArtifact",
    "ValidationReport",
    "ResumeAction",
    "ResumeDecision",
    "PRESETS",
    "configuration_for",
    "detect_workflow_type",
    # Exceptions
    "PhaseGuardError",
    "NoActiveSession",
    "SafetyViolation",
    "ValidationFailure",
    "EscalationRequired",
    "ConfigurationError",
]
