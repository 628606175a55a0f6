"""
SessionStore: owns the single live Session and every mutation of it.

One store per connection. All methods except start_session/get_session
raise NoActiveSession when no session is live.
"""

import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import replace
from types import MappingProxyType
from typing import Any

from phaseguard.domain.criteria import lookup
from phaseguard.domain.exceptions import NoActiveSession
from phaseguard.domain.models import (
    EscalationContext,
    FileHistory,
    PhaseOutput,
    SavedArtifact,
    Session,
    ValidationReport,
    ValidationState,
    WorkflowConfiguration,
    WorkflowType,
    utcnow,
)
from phaseguard.domain.phases import Phase

logger = logging.getLogger(__name__)


def _issue_count(output: Mapping[str, Any], key: str) -> int:
    value = lookup(output, key)
    if isinstance(value, list | tuple):
        return len(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


class SessionStore:
    """Holds at most one Session and guards its invariants."""

    def __init__(self) -> None:
        self._session: Session | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_session(
        self,
        task_description: str,
        config: WorkflowConfiguration | None = None,
        workflow_type: WorkflowType | None = None,
    ) -> Session:
        """
        Create a new session, replacing any existing one.

        Args:
            task_description: What the agent is asked to do
            config: Per-session configuration (defaults when omitted)
            workflow_type: Preset family the configuration came from, if any
        """
        if self._session is not None:
            logger.info(
                "Replacing session %s with a new session", self._session.session_id
            )
        self._session = Session(
            session_id=str(uuid.uuid4()),
            task_description=task_description,
            workflow_config=config or WorkflowConfiguration(),
            workflow_type=workflow_type,
        )
        logger.info(
            "Started session %s (%s phases)",
            self._session.session_id,
            len(self._session.workflow_config.selected_phases),
        )
        return self._session

    def get_session(self) -> Session | None:
        return self._session

    def require_session(self) -> Session:
        if self._session is None:
            raise NoActiveSession()
        return self._session

    def end_session(self) -> Session | None:
        """Drop the live session. Returns the ended session, if there was one."""
        session, self._session = self._session, None
        if session is not None:
            logger.info("Ended session %s", session.session_id)
        return session

    # ------------------------------------------------------------------
    # File history
    # ------------------------------------------------------------------

    def record_file_read(self, path: str) -> FileHistory:
        session = self.require_session()
        history = session.file_history.get(path, FileHistory())
        if not history.has_been_read:
            history = replace(history, has_been_read=True, first_read_at=utcnow())
            session.file_history[path] = history
            session.metrics.files_analyzed = sum(
                1 for h in session.file_history.values() if h.has_been_read
            )
        return history

    def record_file_modified(self, path: str) -> FileHistory:
        session = self.require_session()
        history = session.file_history.get(path, FileHistory())
        history = replace(history, has_been_modified=True, last_modified_at=utcnow())
        session.file_history[path] = history
        session.metrics.files_modified = sum(
            1 for h in session.file_history.values() if h.has_been_modified
        )
        return history

    def file_history(self, path: str) -> FileHistory:
        return self.require_session().file_history.get(path, FileHistory())

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def advance_phase(self, phase: Phase) -> Session:
        """
        Move the current phase.

        The previous phase is appended to completed phases if it differs from
        the new one, is not already there and was not skipped.
        """
        session = self.require_session()
        previous = session.current_phase
        if previous is not phase:
            if previous not in session.skipped_phases:
                self._mark_completed(session, previous)
            session.current_phase = phase
            logger.debug("Session %s: %s -> %s", session.session_id, previous.value, phase.value)
        return session

    def record_phase_output(
        self,
        phase: Phase,
        output: Mapping[str, Any],
        artifacts: Iterable[SavedArtifact] = (),
    ) -> PhaseOutput:
        """Upsert the phase output and mark the phase completed.

        Recording output for a skipped phase turns it into a completed one.
        """
        session = self.require_session()
        record = PhaseOutput(
            phase=phase,
            completed_at=utcnow(),
            duration_seconds=session.elapsed_seconds(),
            output=MappingProxyType(dict(output)),
            artifacts=tuple(artifacts),
        )
        session.phase_outputs[phase] = record
        if phase in session.skipped_phases:
            session.skipped_phases.remove(phase)
        self._mark_completed(session, phase)
        self._update_lint_metrics(session)
        return record

    def skip_phase(self, phase: Phase) -> None:
        session = self.require_session()
        if phase not in session.skipped_phases and phase not in session.completed_phases:
            session.skipped_phases.append(phase)

    def _mark_completed(self, session: Session, phase: Phase) -> None:
        if phase not in session.completed_phases:
            session.completed_phases.append(phase)
        # Only selected phases count towards progress; PLANNING never does.
        selected = session.workflow_config.selected_phases
        session.metrics.phases_completed = sum(
            1 for p in session.completed_phases if p in selected
        )

    def _update_lint_metrics(self, session: Session) -> None:
        # Recomputed from the latest outputs, so resubmissions replace counts.
        lint = session.phase_outputs.get(Phase.LINT)
        iterate = session.phase_outputs.get(Phase.ITERATE)
        session.metrics.lint_issues_found = _issue_count(lint.output, "errors") if lint else 0
        session.metrics.lint_issues_fixed = (
            _issue_count(iterate.output, "fixes_applied") if iterate else 0
        )

    # ------------------------------------------------------------------
    # Iterations and validation
    # ------------------------------------------------------------------

    def increment_iteration(self, phase: Phase) -> int:
        session = self.require_session()
        count = session.iteration_counts.get(phase, 0) + 1
        session.iteration_counts[phase] = count
        return count

    def iteration_count(self, phase: Phase) -> int:
        return self.require_session().iteration_counts.get(phase, 0)

    def record_validation(self, report: ValidationReport) -> ValidationState:
        """Store a validation outcome, counting it as one more attempt."""
        session = self.require_session()
        previous = session.validation_states.get(report.phase)
        state = ValidationState(
            is_complete=report.is_complete,
            passed=report.passed,
            failed=report.failed,
            attempts=(previous.attempts if previous else 0) + 1,
            last_validated_at=utcnow(),
            failed_requirements=report.failed_requirements,
        )
        session.validation_states[report.phase] = state
        return state

    def validation_state(self, phase: Phase) -> ValidationState | None:
        return self.require_session().validation_states.get(phase)

    def reset_validation_attempts(self, phase: Phase) -> None:
        session = self.require_session()
        state = session.validation_states.get(phase)
        if state is not None:
            session.validation_states[phase] = replace(state, attempts=0)

    # ------------------------------------------------------------------
    # Escalation bookkeeping
    # ------------------------------------------------------------------

    def set_pending_escalation(self, context: EscalationContext) -> None:
        self.require_session().pending_escalation = context

    def clear_pending_escalation(self) -> EscalationContext | None:
        session = self.require_session()
        context, session.pending_escalation = session.pending_escalation, None
        return context

    def grant_iterations(self, phase: Phase, count: int) -> int:
        """Raise a phase's effective iteration limit. Returns total granted so far."""
        if count < 0:
            raise ValueError("Granted iterations must not be negative")
        session = self.require_session()
        total = session.extra_iterations.get(phase, 0) + count
        session.extra_iterations[phase] = total
        return total

    def waive_requirements(self, phase: Phase, names: Iterable[str]) -> frozenset[str]:
        session = self.require_session()
        waived = session.waived_requirements.get(phase, frozenset()) | frozenset(names)
        session.waived_requirements[phase] = waived
        return waived

    def waived(self, phase: Phase) -> frozenset[str]:
        return self.require_session().waived_requirements.get(phase, frozenset())

    # ------------------------------------------------------------------
    # Output location
    # ------------------------------------------------------------------

    def set_task_directory(self, location: str) -> None:
        self.require_session().task_directory = location
