"""Workflow event emission service."""

import uuid
from datetime import UTC, datetime

from phaseguard.domain.interfaces import WorkflowEventStoreInterface
from phaseguard.domain.models import EscalationContext, ResumeAction
from phaseguard.domain.phases import Phase
from phaseguard.domain.workflow_event import WorkflowEvent, WorkflowEventType


class WorkflowEventEmitter:
    """Emits workflow events to a store.

    Provides convenience methods for emitting common workflow events
    during a session, handling ID generation and timestamps.
    """

    def __init__(self, event_store: WorkflowEventStoreInterface) -> None:
        self._store = event_store

    @property
    def store(self) -> WorkflowEventStoreInterface:
        return self._store

    def _emit(
        self,
        event_type: WorkflowEventType,
        session_id: str,
        phase: Phase | None = None,
        **fields: object,
    ) -> str:
        event = WorkflowEvent(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            session_id=session_id,
            phase=phase.value if phase is not None else None,
            created_at=self._now(),
            **fields,  # type: ignore[arg-type]
        )
        return self._store.store_event(event)

    def _now(self) -> str:
        return datetime.now(UTC).isoformat()

    def session_start(self, session_id: str, task: str) -> None:
        """Emit SESSION_START when a session is created."""
        self._emit(WorkflowEventType.SESSION_START, session_id, summary=task[:500])

    def phase_enter(self, session_id: str, phase: Phase) -> None:
        """Emit PHASE_ENTER when guidance moves the session into a phase."""
        self._emit(WorkflowEventType.PHASE_ENTER, session_id, phase)

    def phase_pass(self, session_id: str, phase: Phase, attempt: int) -> None:
        """Emit PHASE_PASS when a submission is accepted."""
        self._emit(
            WorkflowEventType.PHASE_PASS, session_id, phase, verdict="PASS", attempt=attempt
        )

    def phase_fail(
        self, session_id: str, phase: Phase, attempt: int, feedback: str, fatal: bool = False
    ) -> None:
        """Emit PHASE_FAIL when a submission is rejected."""
        self._emit(
            WorkflowEventType.PHASE_FAIL,
            session_id,
            phase,
            verdict="FATAL" if fatal else "FAIL",
            attempt=attempt,
            summary=feedback[:500],
        )

    def escalate(self, session_id: str, context: EscalationContext) -> None:
        """Emit ESCALATE when automatic progress stops."""
        self._emit(
            WorkflowEventType.ESCALATE,
            session_id,
            context.failed_phase,
            attempt=context.attempt_count,
            trigger=context.trigger.value,
            summary=(context.last_error or "")[:500],
        )

    def resume(self, session_id: str, phase: Phase, action: ResumeAction, note: str = "") -> None:
        """Emit RESUME when a human decision is applied."""
        self._emit(
            WorkflowEventType.RESUME, session_id, phase, trigger=action.value, summary=note[:500]
        )

    def safety_denied(self, session_id: str, path: str, action: str) -> None:
        """Emit SAFETY_DENIED when a write-before-read is refused."""
        self._emit(
            WorkflowEventType.SAFETY_DENIED,
            session_id,
            verdict="DENIED",
            summary=f"{action} {path}"[:500],
        )

    def session_end(self, session_id: str, reason: str) -> None:
        """Emit SESSION_END when a session is closed."""
        self._emit(WorkflowEventType.SESSION_END, session_id, summary=reason)
