"""
Domain layer for PhaseGuard.

Contains the phase model, session data model and pure workflow rules,
with no external dependencies.
"""

from phaseguard.domain.exceptions import (
    ConfigurationError,
    EscalationRequired,
    NoActiveSession,
    PhaseGuardError,
    SafetyViolation,
    ValidationFailure,
)
from phaseguard.domain.interfaces import (
    ActionClassifierInterface,
    ArtifactWriterInterface,
    GuardInterface,
    WorkflowEventStoreInterface,
)
from phaseguard.domain.models import (
    ActionCheck,
    ActionKind,
    ArtifactFormat,
    EscalationConfig,
    EscalationContext,
    EscalationOption,
    EscalationTrigger,
    FileHistory,
    GuardResult,
    GuidanceMode,
    OutputArtifact,
    OutputPreferences,
    PhaseOutput,
    ResumeAction,
    ResumeDecision,
    SavedArtifact,
    Session,
    UserCheckpointConfig,
    ValidationCriteria,
    ValidationReport,
    ValidationState,
    WorkflowConfiguration,
    WorkflowMetrics,
    WorkflowType,
)
from phaseguard.domain.phases import PHASE_INFO, Phase, PhaseInfo

__all__ = [
    # Phases
    "Phase",
    "PhaseInfo",
    "PHASE_INFO",
    # Models
    "ActionCheck",
    "ActionKind",
    "ArtifactFormat",
    "EscalationConfig",
    "EscalationContext",
    "EscalationOption",
    "EscalationTrigger",
    "FileHistory",
    "GuardResult",
    "GuidanceMode",
    "OutputArtifact",
    "OutputPreferences",
    "PhaseOutput",
    "ResumeAction",
    "ResumeDecision",
    "SavedArtifact",
    "Session",
    "UserCheckpointConfig",
    "ValidationCriteria",
    "ValidationReport",
    "ValidationState",
    "WorkflowConfiguration",
    "WorkflowMetrics",
    "WorkflowType",
    # Interfaces
    "ActionClassifierInterface",
    "ArtifactWriterInterface",
    "GuardInterface",
    "WorkflowEventStoreInterface",
    # Exceptions
    "PhaseGuardError",
    "ConfigurationError",
    "EscalationRequired",
    "NoActiveSession",
    "SafetyViolation",
    "ValidationFailure",
]
