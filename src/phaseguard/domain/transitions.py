"""
Phase transition rules.

Transitions are advisory: these functions only compute where a session is and
where it should go next. Completion is gated by validation, not here.
"""

from dataclasses import dataclass

from phaseguard.domain.models import Session, WorkflowConfiguration
from phaseguard.domain.phases import Phase


def phase_after(config: WorkflowConfiguration, phase: Phase) -> Phase | None:
    """The phase following ``phase`` in the configured order, or None."""
    phases = config.selected_phases
    if phase not in phases:
        return None
    index = phases.index(phase)
    return phases[index + 1] if index + 1 < len(phases) else None


def next_phase(session: Session) -> Phase | None:
    """
    Suggest the phase after the session's current one.

    From PLANNING (which is not part of the selection) the first selected
    phase is suggested. Returns None when the current phase is last or is
    otherwise not in the selection.
    """
    config = session.workflow_config
    if session.current_phase is Phase.PLANNING and Phase.PLANNING not in config.selected_phases:
        return config.selected_phases[0]
    return phase_after(config, session.current_phase)


def missing_prerequisites(session: Session, phase: Phase) -> tuple[Phase, ...]:
    """Selected phases before ``phase`` that are neither completed nor skipped."""
    phases = session.workflow_config.selected_phases
    if phase not in phases:
        return ()
    done = set(session.completed_phases) | set(session.skipped_phases)
    return tuple(p for p in phases[: phases.index(phase)] if p not in done)


@dataclass(frozen=True)
class WorkflowProgress:
    """Snapshot of how far a session is through its selected phases."""

    current_phase: Phase
    completed: tuple[Phase, ...]
    skipped: tuple[Phase, ...]
    remaining: tuple[Phase, ...]
    total: int

    @property
    def percent(self) -> int:
        if self.total == 0:
            return 100
        return round(100 * (len(self.completed) + len(self.skipped)) / self.total)

    @property
    def is_finished(self) -> bool:
        return not self.remaining


def progress(session: Session) -> WorkflowProgress:
    selected = session.workflow_config.selected_phases
    completed = tuple(p for p in session.completed_phases if p in selected)
    skipped = tuple(p for p in session.skipped_phases if p in selected and p not in completed)
    remaining = tuple(p for p in selected if p not in completed and p not in skipped)
    return WorkflowProgress(
        current_phase=session.current_phase,
        completed=completed,
        skipped=skipped,
        remaining=remaining,
        total=len(selected),
    )
