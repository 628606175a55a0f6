"""Tests for the suggestive and directive guidance strategies."""

from phaseguard.application.guidance import (
    DirectiveGuidance,
    SuggestiveGuidance,
    strategy_for,
)
from phaseguard.domain.models import GuidanceMode, OutputPreferences, Session, WorkflowConfiguration
from phaseguard.domain.phases import Phase

PHASES = (Phase.AUDIT_INVENTORY, Phase.TEST, Phase.PRESENT)


def _session(**config_kwargs) -> Session:
    return Session("s", "task", WorkflowConfiguration(selected_phases=PHASES, **config_kwargs))


def test_strategy_is_selected_by_mode() -> None:
    assert isinstance(strategy_for(GuidanceMode.DIRECTIVE), DirectiveGuidance)
    assert type(strategy_for(GuidanceMode.SUGGESTIVE)) is SuggestiveGuidance


def test_suggestive_guidance_has_no_criteria() -> None:
    guidance = SuggestiveGuidance().render(_session(), Phase.AUDIT_INVENTORY)

    assert guidance.mode is GuidanceMode.SUGGESTIVE
    assert guidance.instructions
    assert guidance.next_phase is Phase.TEST
    assert guidance.validation_criteria is None
    assert guidance.required_output_file is None


def test_directive_guidance_states_criteria_and_file() -> None:
    guidance = DirectiveGuidance().render(_session(), Phase.TEST)

    assert guidance.mode is GuidanceMode.DIRECTIVE
    assert guidance.validation_criteria is not None
    assert dict(guidance.validation_criteria.minimum_requirements) == {
        "tests_run": 1,
        "test_results_documented": True,
    }
    assert guidance.required_output_file == "05-test"


def test_directive_guidance_without_phase_artifacts() -> None:
    session = _session(output_preferences=OutputPreferences(create_phase_artifacts=False))

    guidance = DirectiveGuidance().render(session, Phase.TEST)

    assert guidance.required_output_file is None
    assert guidance.validation_criteria.expected_files == ()


def test_prerequisite_warnings_are_advisory() -> None:
    guidance = SuggestiveGuidance().render(_session(), Phase.PRESENT)

    assert guidance.prerequisite_warnings == (
        "AUDIT_INVENTORY has not been completed yet",
        "TEST has not been completed yet",
    )
    assert guidance.next_phase is None
