"""
WorkflowOrchestrator: the single entry point for one connection's session.

Wires the session store, safety gate, validation engine, escalation policy,
recorder and event trace together. Infrastructure adapters (artifact writer,
event store) are injected by the caller.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from phaseguard.application.escalation import EscalationPolicy, ResumeOutcome
from phaseguard.application.event_emitter import WorkflowEventEmitter
from phaseguard.application.guidance import PhaseGuidance, strategy_for
from phaseguard.application.recorder import ArtifactRecorder, RecordResult
from phaseguard.application.safety import SafetyGate
from phaseguard.application.session_store import SessionStore
from phaseguard.application.validation import ValidationEngine
from phaseguard.domain.exceptions import ConfigurationError, EscalationRequired
from phaseguard.domain.interfaces import (
    ActionClassifierInterface,
    ArtifactWriterInterface,
    WorkflowEventStoreInterface,
)
from phaseguard.domain.models import (
    ActionCheck,
    EscalationContext,
    OutputArtifact,
    ResumeDecision,
    Session,
    ValidationReport,
    ValidationState,
    WorkflowConfiguration,
    WorkflowMetrics,
    WorkflowType,
)
from phaseguard.domain.phases import Phase
from phaseguard.domain.transitions import WorkflowProgress, next_phase, progress
from phaseguard.domain.workflow_event import WorkflowEvent

logger = logging.getLogger(__name__)


class SubmissionStatus(str, Enum):
    """Outcome of a phase-completion submission."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    ESCALATED = "escalated"


@dataclass(frozen=True)
class SubmissionResult:
    """Response to submit()."""

    status: SubmissionStatus
    phase: Phase
    attempt: int
    report: ValidationReport
    record: RecordResult | None = None
    escalation: EscalationContext | None = None


@dataclass(frozen=True)
class SessionStatus:
    """Read-only snapshot of the live session."""

    session_id: str
    task_description: str
    workflow_type: WorkflowType | None
    current_phase: Phase
    next_phase: Phase | None
    progress: WorkflowProgress
    iteration_counts: Mapping[Phase, int]
    iteration_limits: Mapping[Phase, int | None]
    validation_states: Mapping[Phase, ValidationState]
    metrics: WorkflowMetrics
    pending_escalation: EscalationContext | None
    elapsed_seconds: float
    task_directory: str | None


class WorkflowOrchestrator:
    """
    Drives one session through its phases.

    Completion is gated by validation; guidance is advisory and may be
    requested for any phase in any order.
    """

    def __init__(
        self,
        writer: ArtifactWriterInterface,
        event_store: WorkflowEventStoreInterface,
        classifier: ActionClassifierInterface | None = None,
        validation_engine: ValidationEngine | None = None,
        today: Callable[[], date] | None = None,
    ):
        """
        Args:
            writer: Persistence adapter for accepted artifacts
            event_store: Destination of the workflow event trace
            classifier: Read/modify classifier for the safety gate
            validation_engine: Engine with custom guards, if any
            today: Date source for artifact names
        """
        self._store = SessionStore()
        self._emitter = WorkflowEventEmitter(event_store)
        self._safety = SafetyGate(self._store, classifier, self._emitter)
        self._validation = validation_engine or ValidationEngine()
        self._policy = EscalationPolicy(self._store)
        self._recorder = ArtifactRecorder(self._store, writer, today)

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def session(self) -> Session | None:
        return self._store.get_session()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start(
        self,
        task_description: str,
        config: WorkflowConfiguration | None = None,
        workflow_type: WorkflowType | None = None,
    ) -> Session:
        """
        Start a session, replacing any live one.

        Raises:
            ConfigurationError: If the output directory is unusable; no
                session is left behind in that case
        """
        previous = self._store.get_session()
        if previous is not None:
            self._emitter.session_end(previous.session_id, "replaced")
        session = self._store.start_session(task_description, config, workflow_type)
        try:
            self._recorder.prepare()
        except ConfigurationError:
            self._store.end_session()
            raise
        self._emitter.session_start(session.session_id, task_description)
        return session

    def end(self, reason: str = "ended") -> Session | None:
        """End the live session, if any. Safe to call repeatedly."""
        session = self._store.end_session()
        if session is not None:
            self._emitter.session_end(session.session_id, reason)
        return session

    # ------------------------------------------------------------------
    # Phase work
    # ------------------------------------------------------------------

    def guidance(self, phase: Phase | str) -> PhaseGuidance:
        """
        Move the session to ``phase`` and render its guidance.

        While a blocking escalation is pending the session stays where it is
        and the escalation is returned in place of a checkpoint.
        USER_INPUT_REQUIRED never moves the session either.

        Raises:
            NoActiveSession: If no session is live
        """
        session = self._store.require_session()
        phase = Phase.parse(phase)
        pending = session.pending_escalation
        blocked = pending is not None and pending.blocking
        if not blocked and phase is not Phase.USER_INPUT_REQUIRED and session.current_phase is not phase:
            self._store.advance_phase(phase)
            self._emitter.phase_enter(session.session_id, phase)
        checkpoint = pending if blocked else self._policy.checkpoint_for(phase)
        strategy = strategy_for(session.workflow_config.guidance_mode)
        return strategy.render(session, phase, checkpoint)

    def check_action(self, action: str, path: str) -> ActionCheck:
        """Run the read-before-write check, recording the action if allowed."""
        return self._safety.check(action, path)

    def submit(
        self,
        phase: Phase | str,
        output: Mapping[str, Any],
        artifacts: Iterable[OutputArtifact],
        created_files: Iterable[str] = (),
    ) -> SubmissionResult:
        """
        Validate a phase-completion submission and record it if accepted.

        Every call counts as one attempt for the phase. A rejected attempt
        may escalate; an escalated session refuses submissions until resume().

        Raises:
            NoActiveSession: If no session is live
            EscalationRequired: If an escalation is pending
        """
        session = self._store.require_session()
        phase = Phase.parse(phase)
        pending = session.pending_escalation
        if pending is not None and pending.blocking:
            raise EscalationRequired(pending)

        artifacts = tuple(artifacts)
        report = self._validation.validate(
            phase,
            output,
            artifacts,
            created_files=tuple(created_files),
            config=session.workflow_config,
            waived=self._store.waived(phase),
        )
        attempt, _ = self._policy.record_attempt(report)

        if report.is_complete:
            # Only consecutive failures count towards validation escalation
            self._store.reset_validation_attempts(phase)
            record = self._recorder.record(phase, output, artifacts)
            self._emitter.phase_pass(session.session_id, phase, attempt)
            logger.info(
                "Session %s: %s accepted on attempt %d (%d saved, %d failed)",
                session.session_id,
                phase.value,
                attempt,
                len(record.saved),
                len(record.failed),
            )
            return SubmissionResult(
                SubmissionStatus.ACCEPTED, phase, attempt, report, record=record
            )

        feedback = "; ".join(report.failed)
        self._emitter.phase_fail(session.session_id, phase, attempt, feedback, report.fatal)
        logger.info(
            "Session %s: %s rejected on attempt %d: %s",
            session.session_id,
            phase.value,
            attempt,
            feedback,
        )
        escalation = self._policy.should_escalate(phase, last_error=feedback)
        if escalation is not None:
            self._store.set_pending_escalation(escalation)
            self._emitter.escalate(session.session_id, escalation)
            return SubmissionResult(
                SubmissionStatus.ESCALATED, phase, attempt, report, escalation=escalation
            )
        return SubmissionResult(SubmissionStatus.REJECTED, phase, attempt, report)

    def resume(self, decision: ResumeDecision) -> ResumeOutcome:
        """
        Apply a human decision to the pending escalation (or current phase).

        ``abort`` ends the session.
        """
        session = self._store.require_session()
        outcome = self._policy.resume(decision)
        self._emitter.resume(session.session_id, outcome.phase, outcome.action, decision.note)
        logger.info(
            "Session %s resumed %s with %s", session.session_id, outcome.phase.value, outcome.action.value
        )
        if outcome.session_ended:
            self.end("aborted")
        return outcome

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def status(self) -> SessionStatus:
        session = self._store.require_session()
        config = session.workflow_config
        return SessionStatus(
            session_id=session.session_id,
            task_description=session.task_description,
            workflow_type=session.workflow_type,
            current_phase=session.current_phase,
            next_phase=next_phase(session),
            progress=progress(session),
            iteration_counts=dict(session.iteration_counts),
            iteration_limits={p: session.effective_limit(p) for p in config.selected_phases},
            validation_states=dict(session.validation_states),
            metrics=session.metrics,
            pending_escalation=session.pending_escalation,
            elapsed_seconds=session.elapsed_seconds(),
            task_directory=session.task_directory,
        )

    def events(self) -> list[WorkflowEvent]:
        """Event trace of the live session."""
        session = self._store.require_session()
        return self._emitter.store.get_events(session.session_id)
