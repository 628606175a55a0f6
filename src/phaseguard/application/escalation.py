"""
Iteration and escalation policy.

Counts attempts per phase, decides when automatic retrying must stop, and
applies the human decision that resumes a session.

Trigger rules, evaluated after a failing attempt only:
    iteration_limit     attempts made before this one already reached the
                        effective limit (configured + granted), so a limit
                        of N escalates on the (N+1)-th failing attempt
    validation_failure  validation attempts reached max_validation_attempts
When both hold, iteration_limit wins.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType

from phaseguard.application.session_store import SessionStore
from phaseguard.domain.models import (
    EscalationContext,
    EscalationOption,
    EscalationTrigger,
    ResumeAction,
    ResumeDecision,
    ValidationReport,
    ValidationState,
)
from phaseguard.domain.phases import Phase
from phaseguard.domain.transitions import phase_after

logger = logging.getLogger(__name__)

ESCALATION_OPTIONS: dict[EscalationTrigger, tuple[EscalationOption, ...]] = {
    EscalationTrigger.ITERATION_LIMIT: (
        EscalationOption(ResumeAction.CONTINUE, "Grant more iterations and keep trying"),
        EscalationOption(ResumeAction.MODIFY_REQUIREMENTS, "Relax the failing requirements"),
        EscalationOption(ResumeAction.SKIP_PHASE, "Skip this phase and move on"),
        EscalationOption(ResumeAction.RESET, "Restart this phase with a fresh budget"),
        EscalationOption(ResumeAction.ABORT, "Stop the workflow"),
    ),
    EscalationTrigger.VALIDATION_FAILURE: (
        EscalationOption(ResumeAction.MODIFY_REQUIREMENTS, "Relax the failing requirements"),
        EscalationOption(ResumeAction.CONTINUE, "Keep trying with clarified instructions"),
        EscalationOption(ResumeAction.SKIP_PHASE, "Skip this phase and move on"),
        EscalationOption(ResumeAction.ABORT, "Stop the workflow"),
    ),
    EscalationTrigger.USER_CHECKPOINT: (
        EscalationOption(ResumeAction.CONTINUE, "Approve and proceed"),
        EscalationOption(ResumeAction.SKIP_PHASE, "Skip this phase"),
        EscalationOption(ResumeAction.ABORT, "Stop the workflow"),
    ),
}


@dataclass(frozen=True)
class ResumeOutcome:
    """What a resume decision changed."""

    action: ResumeAction
    phase: Phase
    granted_iterations: int = 0
    waived: tuple[str, ...] = ()
    next_phase: Phase | None = None
    session_ended: bool = False


class EscalationPolicy:
    """Iteration accounting and escalation decisions over a SessionStore."""

    def __init__(self, store: SessionStore):
        self._store = store

    def record_attempt(self, report: ValidationReport) -> tuple[int, ValidationState]:
        """Count one validation attempt for the report's phase."""
        count = self._store.increment_iteration(report.phase)
        state = self._store.record_validation(report)
        return count, state

    def should_escalate(
        self, phase: Phase, last_error: str | None = None
    ) -> EscalationContext | None:
        """Return an escalation context if automatic retrying must stop."""
        session = self._store.require_session()
        triggers = session.workflow_config.escalation_triggers
        if not triggers.enable_user_input:
            return None

        count = session.iteration_counts.get(phase, 0)
        limit = session.effective_limit(phase)
        state = session.validation_states.get(phase)
        attempts = state.attempts if state else 0

        trigger: EscalationTrigger | None = None
        if triggers.escalate_on_iteration_limit and limit is not None and count - 1 >= limit:
            trigger = EscalationTrigger.ITERATION_LIMIT
        elif triggers.escalate_on_errors and attempts >= triggers.max_validation_attempts:
            trigger = EscalationTrigger.VALIDATION_FAILURE
        if trigger is None:
            return None

        logger.info(
            "Escalating %s in session %s: %s after %d attempt(s)",
            phase.value,
            session.session_id,
            trigger.value,
            count,
        )
        return EscalationContext(
            trigger=trigger,
            failed_phase=phase,
            attempt_count=count,
            options=ESCALATION_OPTIONS[trigger],
            last_error=last_error,
            context=MappingProxyType(
                {
                    "iteration_limit": session.workflow_config.limit_for(phase),
                    "effective_limit": limit,
                    "validation_attempts": attempts,
                    "max_validation_attempts": triggers.max_validation_attempts,
                    "failed_requirements": list(state.failed_requirements) if state else [],
                }
            ),
        )

    def checkpoint_for(self, phase: Phase) -> EscalationContext | None:
        """
        Advisory user checkpoint before entering ``phase``, if one is configured.

        Checkpoints never block; they tell the agent to ask the human first.
        """
        session = self._store.require_session()
        checkpoints = session.workflow_config.user_checkpoints
        reasons: list[str] = []
        if checkpoints.before_major_changes and phase is Phase.WRITE_OR_REFACTOR:
            reasons.append("Confirm the plan before making changes")
        if checkpoints.before_final_presentation and phase is Phase.PRESENT:
            reasons.append("Review the results before the final presentation")
        if phase in checkpoints.custom_checkpoints:
            reasons.append(f"Custom checkpoint configured for {phase.value}")
        base_limit = session.workflow_config.limit_for(phase)
        count = session.iteration_counts.get(phase, 0)
        if checkpoints.after_failed_iterations and base_limit is not None and count >= base_limit:
            reasons.append(f"{phase.value} already used {count} of {base_limit} iterations")
        if not reasons:
            return None
        return EscalationContext(
            trigger=EscalationTrigger.USER_CHECKPOINT,
            failed_phase=phase,
            attempt_count=count,
            options=ESCALATION_OPTIONS[EscalationTrigger.USER_CHECKPOINT],
            last_error=None,
            context=MappingProxyType({"reasons": reasons}),
        )

    def resume(self, decision: ResumeDecision) -> ResumeOutcome:
        """
        Apply a human decision to the escalated (or current) phase.

        Iteration counts never decrease; budgets only ever grow. ``abort`` is
        reported back and the caller ends the session.
        """
        session = self._store.require_session()
        pending = self._store.clear_pending_escalation()
        phase = pending.failed_phase if pending else session.current_phase
        count = session.iteration_counts.get(phase, 0)
        action = decision.action

        if action is ResumeAction.ABORT:
            return ResumeOutcome(action, phase, session_ended=True)

        if action is ResumeAction.CONTINUE:
            granted = decision.additional_iterations
            if granted is None:
                granted = max(count, 1)
            self._store.grant_iterations(phase, granted)
            self._store.reset_validation_attempts(phase)
            return ResumeOutcome(action, phase, granted_iterations=granted)

        if action is ResumeAction.RESET:
            granted = max(count - session.extra_iterations.get(phase, 0), 0)
            self._store.grant_iterations(phase, granted)
            self._store.reset_validation_attempts(phase)
            return ResumeOutcome(action, phase, granted_iterations=granted)

        if action is ResumeAction.MODIFY_REQUIREMENTS:
            names = decision.waived_requirements
            if not names:
                state = session.validation_states.get(phase)
                names = state.failed_requirements if state else ()
            self._store.waive_requirements(phase, names)
            self._store.reset_validation_attempts(phase)
            granted = 0
            if pending is not None and pending.trigger is EscalationTrigger.ITERATION_LIMIT:
                # One more try against the relaxed criteria.
                granted = 1
                self._store.grant_iterations(phase, granted)
            return ResumeOutcome(
                action, phase, granted_iterations=granted, waived=tuple(names)
            )

        # SKIP_PHASE
        self._store.skip_phase(phase)
        following = phase_after(session.workflow_config, phase)
        if following is not None:
            self._store.advance_phase(following)
        return ResumeOutcome(action, phase, next_phase=following)
