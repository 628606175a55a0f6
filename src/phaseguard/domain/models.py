"""
Domain models for PhaseGuard.

Value objects are frozen dataclasses. The Session is the single mutable
aggregate; it is only ever mutated through application.session_store.SessionStore.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from phaseguard.domain.exceptions import ConfigurationError
from phaseguard.domain.phases import Phase


def utcnow() -> datetime:
    return datetime.now(UTC)


def _frozen_mapping(data: Mapping[Any, Any] | None = None) -> Mapping[Any, Any]:
    return MappingProxyType(dict(data or {}))


# =============================================================================
# ENUMERATIONS
# =============================================================================


class WorkflowType(str, Enum):
    """Preset families of workflows."""

    REFACTOR = "refactor"
    FEATURE = "feature"
    TEST = "test"
    TDD = "tdd"
    CUSTOM = "custom"


class GuidanceMode(str, Enum):
    """How guidance is phrased to the agent. Fixed at configuration time."""

    SUGGESTIVE = "suggestive"  # Advice; the agent may adapt
    DIRECTIVE = "directive"  # Requirements with blocking criteria


class ArtifactFormat(str, Enum):
    """Supported output artifact formats."""

    MARKDOWN = "markdown"
    JSON = "json"
    TEXT = "text"

    @property
    def extension(self) -> str:
        return {"markdown": "md", "json": "json", "text": "txt"}[self.value]


class ActionKind(str, Enum):
    """Classification of an agent action for the safety gate."""

    READ = "read"
    MODIFY = "modify"
    OTHER = "other"


class EscalationTrigger(str, Enum):
    """Why automatic progress stopped."""

    ITERATION_LIMIT = "iteration_limit"
    VALIDATION_FAILURE = "validation_failure"
    USER_CHECKPOINT = "user_checkpoint"


class ResumeAction(str, Enum):
    """Decisions a human can take to resume an escalated session."""

    CONTINUE = "continue"  # Grant more iterations
    SKIP_PHASE = "skip_phase"  # Move on without completing the phase
    MODIFY_REQUIREMENTS = "modify_requirements"  # Waive named requirements
    RESET = "reset"  # Restart the phase budget
    ABORT = "abort"  # End the session


# =============================================================================
# ARTIFACTS AND OUTPUTS
# =============================================================================


@dataclass(frozen=True)
class OutputArtifact:
    """Evidence submitted by the agent to satisfy a phase."""

    path: str  # Identifier or suggested path
    format: ArtifactFormat
    content: str
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OutputArtifact":
        """Build from a tool payload entry."""
        raw_format = str(data.get("format", ArtifactFormat.MARKDOWN.value)).lower()
        try:
            fmt = ArtifactFormat(raw_format)
        except ValueError:
            raise ConfigurationError(
                f"Unsupported artifact format '{raw_format}'",
                resolution="Use one of: markdown, json, text",
            ) from None
        return cls(
            path=str(data.get("path", "")),
            format=fmt,
            content=str(data.get("content", "")),
            description=str(data.get("description", "")),
        )


@dataclass(frozen=True)
class SavedArtifact:
    """An artifact persisted by the recorder."""

    source: str  # OutputArtifact.path as submitted
    path: str  # Where it was written
    format: ArtifactFormat
    description: str
    saved_at: datetime


@dataclass(frozen=True)
class FailedArtifact:
    """An artifact the writer could not persist."""

    source: str
    error: str


@dataclass(frozen=True)
class FileHistory:
    """Read/write history of one file path within a session."""

    has_been_read: bool = False
    has_been_modified: bool = False
    first_read_at: datetime | None = None
    last_modified_at: datetime | None = None


@dataclass(frozen=True)
class PhaseOutput:
    """Last recorded output of a phase."""

    phase: Phase
    completed_at: datetime
    duration_seconds: float  # Since session start
    output: Mapping[str, Any]
    artifacts: tuple[SavedArtifact, ...] = ()


# =============================================================================
# VALIDATION
# =============================================================================


@dataclass(frozen=True)
class GuardResult:
    """Immutable guard validation outcome."""

    passed: bool
    feedback: str = ""
    fatal: bool = False  # Malformed input rather than weak content


@dataclass(frozen=True)
class ValidationCriteria:
    """Completion requirements of a phase. Derived, never stored."""

    phase: Phase
    minimum_requirements: Mapping[str, int | bool]
    expected_files: tuple[str, ...]
    blocking_messages: tuple[str, ...]
    completion_criteria: tuple[str, ...] = ()


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of validating one phase submission."""

    phase: Phase
    is_complete: bool
    passed: tuple[str, ...]
    failed: tuple[str, ...]
    blocking_messages: tuple[str, ...] = ()
    next_steps: tuple[str, ...] = ()
    failed_requirements: tuple[str, ...] = ()  # Requirement keys / file ids
    fatal: bool = False


@dataclass(frozen=True)
class ValidationState:
    """Per-phase validation bookkeeping kept on the session."""

    is_complete: bool
    passed: tuple[str, ...]
    failed: tuple[str, ...]
    attempts: int
    last_validated_at: datetime
    failed_requirements: tuple[str, ...] = ()


# =============================================================================
# ESCALATION
# =============================================================================


@dataclass(frozen=True)
class EscalationOption:
    """One machine-actionable choice offered to the human."""

    action: ResumeAction
    label: str


@dataclass(frozen=True)
class EscalationContext:
    """Everything a human needs to decide how an escalated phase resumes."""

    trigger: EscalationTrigger
    failed_phase: Phase
    attempt_count: int
    options: tuple[EscalationOption, ...]
    last_error: str | None = None
    context: Mapping[str, Any] = field(default_factory=_frozen_mapping)
    raised_at: datetime = field(default_factory=utcnow)

    @property
    def blocking(self) -> bool:
        """User checkpoints are advisory; budget escalations block."""
        return self.trigger is not EscalationTrigger.USER_CHECKPOINT


@dataclass(frozen=True)
class ResumeDecision:
    """A human decision that resumes an escalated session."""

    action: ResumeAction
    additional_iterations: int | None = None
    waived_requirements: tuple[str, ...] = ()
    note: str = ""


# =============================================================================
# SAFETY
# =============================================================================


@dataclass(frozen=True)
class ActionCheck:
    """Safety gate verdict for one action on one path."""

    allowed: bool
    action: str
    path: str
    kind: ActionKind
    reason: str = ""
    resolution: str | None = None


# =============================================================================
# CONFIGURATION
# =============================================================================

DEFAULT_OUTPUT_DIRECTORY = "structured-workflow"
DEFAULT_MAX_VALIDATION_ATTEMPTS = 3


@dataclass(frozen=True)
class OutputPreferences:
    """Where and how artifacts are written."""

    output_directory: str = DEFAULT_OUTPUT_DIRECTORY
    formats: tuple[ArtifactFormat, ...] = (ArtifactFormat.MARKDOWN,)
    create_task_subdirectory: bool = True
    include_date: bool = True
    create_phase_artifacts: bool = True  # Require one numbered file per phase
    real_time_updates: bool = True


@dataclass(frozen=True)
class UserCheckpointConfig:
    """Points at which a human is asked to look before the agent continues."""

    before_major_changes: bool = True
    after_failed_iterations: bool = True
    before_final_presentation: bool = False
    custom_checkpoints: tuple[Phase, ...] = ()


@dataclass(frozen=True)
class EscalationConfig:
    """Which conditions may stop automatic progress."""

    enable_user_input: bool = True
    escalate_on_iteration_limit: bool = True
    escalate_on_errors: bool = True
    max_validation_attempts: int = DEFAULT_MAX_VALIDATION_ATTEMPTS


DEFAULT_SELECTED_PHASES: tuple[Phase, ...] = (
    Phase.AUDIT_INVENTORY,
    Phase.WRITE_OR_REFACTOR,
    Phase.TEST,
    Phase.LINT,
    Phase.PRESENT,
)

DEFAULT_ITERATION_LIMITS: Mapping[Phase, int] = MappingProxyType(
    {Phase.TEST: 5, Phase.LINT: 10, Phase.ITERATE: 15}
)


@dataclass(frozen=True)
class WorkflowConfiguration:
    """
    Immutable per-session configuration.

    Invariants (checked on construction):
        - selected_phases is non-empty and has no duplicates
        - every iteration limit is a positive integer
    """

    selected_phases: tuple[Phase, ...] = DEFAULT_SELECTED_PHASES
    iteration_limits: Mapping[Phase, int] = field(default_factory=lambda: DEFAULT_ITERATION_LIMITS)
    output_preferences: OutputPreferences = field(default_factory=OutputPreferences)
    user_checkpoints: UserCheckpointConfig = field(default_factory=UserCheckpointConfig)
    escalation_triggers: EscalationConfig = field(default_factory=EscalationConfig)
    guidance_mode: GuidanceMode = GuidanceMode.SUGGESTIVE

    def __post_init__(self) -> None:
        phases = tuple(Phase.parse(p) for p in self.selected_phases)
        if not phases:
            raise ConfigurationError(
                "selected_phases must contain at least one phase",
                resolution="Select the phases the workflow should run",
            )
        duplicates = sorted({p.value for p in phases if phases.count(p) > 1})
        if duplicates:
            raise ConfigurationError(
                f"selected_phases contains duplicates: {', '.join(duplicates)}",
                resolution="List each phase at most once",
            )

        limits: dict[Phase, int] = {}
        for raw_phase, limit in dict(self.iteration_limits).items():
            phase = Phase.parse(raw_phase)
            if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
                raise ConfigurationError(
                    f"Iteration limit for {phase.value} must be a positive integer, "
                    f"got {limit!r}"
                )
            limits[phase] = limit

        if self.escalation_triggers.max_validation_attempts < 1:
            raise ConfigurationError("max_validation_attempts must be at least 1")

        object.__setattr__(self, "selected_phases", phases)
        object.__setattr__(self, "iteration_limits", MappingProxyType(limits))

    def limit_for(self, phase: Phase) -> int | None:
        """Configured iteration cap for a phase, or None if uncapped."""
        return self.iteration_limits.get(phase)


# =============================================================================
# SESSION (mutable aggregate)
# =============================================================================


@dataclass
class WorkflowMetrics:
    """Counters reported by workflow_status."""

    files_analyzed: int = 0
    files_modified: int = 0
    lint_issues_found: int = 0
    lint_issues_fixed: int = 0
    phases_completed: int = 0


@dataclass
class Session:
    """
    The single mutable record of an in-progress task.

    Never mutate directly: go through SessionStore so invariants
    (append-only completed phases, monotonic counters) hold in one place.
    """

    session_id: str
    task_description: str
    workflow_config: WorkflowConfiguration
    workflow_type: WorkflowType | None = None
    started_at: datetime = field(default_factory=utcnow)
    current_phase: Phase = Phase.PLANNING
    completed_phases: list[Phase] = field(default_factory=list)
    phase_outputs: dict[Phase, PhaseOutput] = field(default_factory=dict)
    file_history: dict[str, FileHistory] = field(default_factory=dict)
    iteration_counts: dict[Phase, int] = field(default_factory=dict)
    validation_states: dict[Phase, ValidationState] = field(default_factory=dict)
    metrics: WorkflowMetrics = field(default_factory=WorkflowMetrics)
    pending_escalation: EscalationContext | None = None
    skipped_phases: list[Phase] = field(default_factory=list)
    extra_iterations: dict[Phase, int] = field(default_factory=dict)
    waived_requirements: dict[Phase, frozenset[str]] = field(default_factory=dict)
    task_directory: str | None = None

    def effective_limit(self, phase: Phase) -> int | None:
        """Configured limit plus iterations granted by human decisions."""
        base = self.workflow_config.limit_for(phase)
        if base is None:
            return None
        return base + self.extra_iterations.get(phase, 0)

    def elapsed_seconds(self, now: datetime | None = None) -> float:
        return ((now or utcnow()) - self.started_at).total_seconds()
