"""
Guidance strategies.

SUGGESTIVE guidance describes what a phase is for and what it should
produce. DIRECTIVE guidance additionally states the validation criteria that
will block completion and the numbered file the phase must produce.
"""

from dataclasses import dataclass, replace

from phaseguard.domain.criteria import criteria_for
from phaseguard.domain.models import (
    EscalationContext,
    GuidanceMode,
    Session,
    ValidationCriteria,
)
from phaseguard.domain.naming import phase_file_stem
from phaseguard.domain.phases import PHASE_INFO, WORKABLE_PHASES, Phase
from phaseguard.domain.transitions import missing_prerequisites, phase_after

PHASE_INSTRUCTIONS: dict[Phase, tuple[str, ...]] = {
    Phase.PLANNING: ("Review the selected phases", "Request guidance for the first phase"),
    Phase.AUDIT_INVENTORY: (
        "Read every file relevant to the task",
        "Record dependencies and risks",
        "List each change the task requires",
    ),
    Phase.COMPARE_ANALYZE: (
        "Describe at least two approaches",
        "Compare them on effort, risk and impact",
        "Recommend one",
    ),
    Phase.QUESTION_DETERMINE: (
        "Answer open questions or record assumptions",
        "Write the implementation steps",
        "Define success criteria",
    ),
    Phase.WRITE_OR_REFACTOR: (
        "Read each file before modifying it",
        "Apply the planned changes",
        "Note any deviation from the plan",
    ),
    Phase.TEST: ("Run the relevant tests", "Record results including failures"),
    Phase.LINT: ("Run linters and type checkers", "Record errors and warnings"),
    Phase.ITERATE: ("Fix recorded failures", "Re-run verification"),
    Phase.PRESENT: ("Summarize the changes", "Report results and recommendations"),
    Phase.USER_INPUT_REQUIRED: (
        "Present the escalation options to the user",
        "Resume with the chosen action",
    ),
}


@dataclass(frozen=True)
class PhaseGuidance:
    """Rendered guidance for one phase."""

    phase: Phase
    mode: GuidanceMode
    description: str
    objective: str
    instructions: tuple[str, ...]
    expected_output: tuple[str, ...]
    estimated_minutes: int
    next_phase: Phase | None
    prerequisite_warnings: tuple[str, ...] = ()
    validation_criteria: ValidationCriteria | None = None
    required_output_file: str | None = None
    user_checkpoint: EscalationContext | None = None


class SuggestiveGuidance:
    """Advisory guidance; the agent may adapt it."""

    mode = GuidanceMode.SUGGESTIVE

    def render(
        self,
        session: Session,
        phase: Phase,
        checkpoint: EscalationContext | None = None,
    ) -> PhaseGuidance:
        info = PHASE_INFO[phase]
        warnings = tuple(
            f"{p.value} has not been completed yet" for p in missing_prerequisites(session, phase)
        )
        return PhaseGuidance(
            phase=phase,
            mode=self.mode,
            description=info.description,
            objective=info.objective,
            instructions=PHASE_INSTRUCTIONS.get(phase, ()),
            expected_output=info.expected_output,
            estimated_minutes=info.estimated_minutes,
            next_phase=phase_after(session.workflow_config, phase),
            prerequisite_warnings=warnings,
            user_checkpoint=checkpoint,
        )


class DirectiveGuidance(SuggestiveGuidance):
    """Guidance that states the blocking criteria of the phase."""

    mode = GuidanceMode.DIRECTIVE

    def render(
        self,
        session: Session,
        phase: Phase,
        checkpoint: EscalationContext | None = None,
    ) -> PhaseGuidance:
        guidance = super().render(session, phase, checkpoint)
        config = session.workflow_config
        criteria = criteria_for(phase, config)
        required_file = None
        if config.output_preferences.create_phase_artifacts and phase in WORKABLE_PHASES:
            required_file = phase_file_stem(phase)
        return replace(
            guidance,
            mode=self.mode,
            validation_criteria=criteria,
            required_output_file=required_file,
        )


GUIDANCE_STRATEGIES: dict[GuidanceMode, SuggestiveGuidance] = {
    GuidanceMode.SUGGESTIVE: SuggestiveGuidance(),
    GuidanceMode.DIRECTIVE: DirectiveGuidance(),
}


def strategy_for(mode: GuidanceMode) -> SuggestiveGuidance:
    return GUIDANCE_STRATEGIES[mode]
