"""Tests for workflow presets and workflow type detection."""

import pytest

from phaseguard.domain.models import GuidanceMode, WorkflowType
from phaseguard.domain.phases import Phase
from phaseguard.domain.presets import (
    PRESETS,
    configuration_for,
    detect_workflow_type,
    get_preset,
)


class TestPresets:
    def test_every_workflow_type_has_a_preset(self) -> None:
        assert set(PRESETS) == set(WorkflowType)

    def test_refactor_runs_all_workable_phases(self) -> None:
        preset = get_preset(WorkflowType.REFACTOR)

        assert len(preset.phases) == 8
        assert preset.phases[0] is Phase.AUDIT_INVENTORY
        assert preset.phases[-1] is Phase.PRESENT

    def test_feature_has_no_iterate_phase(self) -> None:
        assert Phase.ITERATE not in get_preset("feature").phases

    def test_tdd_tests_before_writing(self) -> None:
        phases = get_preset(WorkflowType.TDD).phases

        assert phases.index(Phase.TEST) < phases.index(Phase.WRITE_OR_REFACTOR)

    def test_preset_limits(self) -> None:
        limits = get_preset(WorkflowType.TEST).iteration_limits

        assert limits[Phase.TEST] == 5
        assert limits[Phase.LINT] == 3
        assert limits[Phase.ITERATE] == 8

    def test_unknown_preset_raises(self) -> None:
        with pytest.raises(ValueError):
            get_preset("deploy")


class TestConfigurationFor:
    def test_seeds_phases_and_limits(self) -> None:
        config = configuration_for(WorkflowType.TDD)

        assert config.selected_phases == get_preset(WorkflowType.TDD).phases
        assert config.limit_for(Phase.TEST) == 10
        assert config.guidance_mode is GuidanceMode.DIRECTIVE

    def test_overrides_replace_fields(self) -> None:
        config = configuration_for(
            "refactor",
            GuidanceMode.SUGGESTIVE,
            selected_phases=(Phase.AUDIT_INVENTORY, Phase.PRESENT),
        )

        assert config.selected_phases == (Phase.AUDIT_INVENTORY, Phase.PRESENT)
        assert config.guidance_mode is GuidanceMode.SUGGESTIVE
        assert config.limit_for(Phase.LINT) == 5


class TestDetectWorkflowType:
    @pytest.mark.parametrize(
        "task,expected",
        [
            ("Refactor the billing module", WorkflowType.REFACTOR),
            ("Use TDD to build the parser", WorkflowType.TDD),
            ("Improve test coverage for utils", WorkflowType.TEST),
            ("Add a CSV export feature", WorkflowType.FEATURE),
        ],
    )
    def test_detects_family(self, task: str, expected: WorkflowType) -> None:
        assert detect_workflow_type(task) is expected

    def test_tdd_wins_over_test(self) -> None:
        assert detect_workflow_type("test-driven rewrite with tests") is WorkflowType.TDD

    def test_matches_whole_words_only(self) -> None:
        # "contest" contains "test" but is not the word "test"
        assert detect_workflow_type("Summarize the contest rules") is None

    def test_no_match_returns_none(self) -> None:
        assert detect_workflow_type("Explain the architecture") is None
