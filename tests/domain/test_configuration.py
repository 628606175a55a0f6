"""Tests for domain models: configuration invariants, artifacts, sessions."""

import dataclasses
from datetime import timedelta
from types import MappingProxyType

import pytest

from phaseguard.domain.exceptions import ConfigurationError
from phaseguard.domain.models import (
    DEFAULT_SELECTED_PHASES,
    ArtifactFormat,
    EscalationConfig,
    EscalationContext,
    EscalationTrigger,
    OutputArtifact,
    Session,
    WorkflowConfiguration,
    utcnow,
)
from phaseguard.domain.phases import Phase


class TestWorkflowConfiguration:
    def test_defaults(self) -> None:
        config = WorkflowConfiguration()

        assert config.selected_phases == DEFAULT_SELECTED_PHASES
        assert config.limit_for(Phase.TEST) == 5
        assert config.limit_for(Phase.LINT) == 10
        assert config.limit_for(Phase.ITERATE) == 15
        assert config.limit_for(Phase.AUDIT_INVENTORY) is None
        assert config.output_preferences.output_directory == "structured-workflow"

    def test_no_field_defaults_to_a_shared_mapping(self) -> None:
        # Mapping proxies are unhashable before Python 3.12 and rejected as defaults
        for field in dataclasses.fields(WorkflowConfiguration):
            assert not isinstance(field.default, MappingProxyType), field.name

    def test_default_limits_are_shared_read_only(self) -> None:
        first, second = WorkflowConfiguration(), WorkflowConfiguration()

        assert first.iteration_limits == second.iteration_limits
        assert isinstance(first.iteration_limits, MappingProxyType)

    def test_phase_names_are_parsed(self) -> None:
        config = WorkflowConfiguration(
            selected_phases=("audit", "present"), iteration_limits={"lint": 2}
        )

        assert config.selected_phases == (Phase.AUDIT_INVENTORY, Phase.PRESENT)
        assert config.limit_for(Phase.LINT) == 2

    def test_limits_are_read_only(self) -> None:
        config = WorkflowConfiguration()

        assert isinstance(config.iteration_limits, MappingProxyType)

    def test_empty_selection_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="at least one phase"):
            WorkflowConfiguration(selected_phases=())

    def test_duplicate_phases_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="duplicates: TEST"):
            WorkflowConfiguration(selected_phases=(Phase.TEST, Phase.LINT, Phase.TEST))

    @pytest.mark.parametrize("limit", [0, -1, True, 2.5])
    def test_invalid_limits_rejected(self, limit: object) -> None:
        with pytest.raises(ConfigurationError, match="positive integer"):
            WorkflowConfiguration(iteration_limits={Phase.TEST: limit})

    def test_invalid_max_validation_attempts_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            WorkflowConfiguration(escalation_triggers=EscalationConfig(max_validation_attempts=0))


class TestOutputArtifact:
    def test_from_dict(self) -> None:
        artifact = OutputArtifact.from_dict(
            {"path": "a.json", "format": "JSON", "content": "{}", "description": "d"}
        )

        assert artifact.format is ArtifactFormat.JSON
        assert artifact.description == "d"

    def test_format_defaults_to_markdown(self) -> None:
        assert OutputArtifact.from_dict({"content": "x"}).format is ArtifactFormat.MARKDOWN

    def test_unknown_format_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Unsupported artifact format 'yaml'"):
            OutputArtifact.from_dict({"path": "a", "format": "yaml", "content": "x"})

    def test_extensions(self) -> None:
        assert ArtifactFormat.MARKDOWN.extension == "md"
        assert ArtifactFormat.TEXT.extension == "txt"


class TestEscalationContext:
    def test_budget_escalations_block(self) -> None:
        context = EscalationContext(EscalationTrigger.ITERATION_LIMIT, Phase.LINT, 3, ())

        assert context.blocking

    def test_user_checkpoints_are_advisory(self) -> None:
        context = EscalationContext(EscalationTrigger.USER_CHECKPOINT, Phase.LINT, 0, ())

        assert not context.blocking


class TestSession:
    def test_effective_limit_adds_granted_iterations(self) -> None:
        session = Session("s", "task", WorkflowConfiguration(), extra_iterations={Phase.TEST: 2})

        assert session.effective_limit(Phase.TEST) == 7
        assert session.effective_limit(Phase.PRESENT) is None

    def test_elapsed_seconds(self) -> None:
        session = Session("s", "task", WorkflowConfiguration())

        elapsed = session.elapsed_seconds(session.started_at + timedelta(seconds=90))

        assert elapsed == 90

    def test_starts_in_planning(self) -> None:
        session = Session("s", "task", WorkflowConfiguration())

        assert session.current_phase is Phase.PLANNING
        assert session.started_at <= utcnow()
