"""Tests for settings and workflow configuration loading."""

import json
from pathlib import Path

import jsonschema
import pytest

from phaseguard.domain.exceptions import ConfigurationError
from phaseguard.domain.models import (
    ArtifactFormat,
    GuidanceMode,
    OutputPreferences,
    WorkflowType,
)
from phaseguard.domain.phases import Phase
from phaseguard.infrastructure.config import (
    ServerSettings,
    load_workflow_config,
    output_preferences_from_dict,
    workflow_config_from_dict,
)
from phaseguard.schemas import (
    get_workflow_config_schema,
    validate_phase_submission,
    validate_resume_decision,
)


class TestServerSettings:
    def test_from_env(self) -> None:
        settings = ServerSettings.from_env(
            {
                "PHASEGUARD_OUTPUT_DIR": "artifacts",
                "PHASEGUARD_BASE_DIR": "/work",
                "PHASEGUARD_LOG_LEVEL": "debug",
                "PHASEGUARD_CONFIG": "workflow.json",
            }
        )

        assert settings.output_directory == "artifacts"
        assert settings.base_directory == "/work"
        assert settings.log_level == "DEBUG"
        assert settings.config_file == "workflow.json"

    def test_defaults(self) -> None:
        settings = ServerSettings.from_env({})

        assert settings.output_directory == "structured-workflow"
        assert settings.log_level == "INFO"
        assert settings.config_file is None

    def test_unknown_log_level(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown log level"):
            ServerSettings(log_level="chatty")


class TestWorkflowConfigFromDict:
    def test_empty_mapping_gives_defaults(self) -> None:
        config, workflow_type = workflow_config_from_dict({})

        assert workflow_type is None
        assert config.selected_phases[0] is Phase.AUDIT_INVENTORY
        assert config.guidance_mode is GuidanceMode.DIRECTIVE

    def test_full_mapping(self) -> None:
        config, _ = workflow_config_from_dict(
            {
                "selectedPhases": ["audit_inventory", "write_or_refactor", "lint", "present"],
                "iterationLimits": {"LINT": 2},
                "outputPreferences": {
                    "outputDirectory": "out",
                    "formats": ["markdown", "json"],
                    "includeDate": False,
                },
                "userCheckpoints": {
                    "beforeMajorChanges": False,
                    "customCheckpoints": ["present"],
                },
                "escalationTriggers": {"maxValidationAttempts": 5},
                "guidanceMode": "suggestive",
            }
        )

        assert config.selected_phases == (
            Phase.AUDIT_INVENTORY,
            Phase.WRITE_OR_REFACTOR,
            Phase.LINT,
            Phase.PRESENT,
        )
        assert config.limit_for(Phase.LINT) == 2
        assert config.limit_for(Phase.TEST) == 5
        assert config.output_preferences.output_directory == "out"
        assert config.output_preferences.formats == (ArtifactFormat.MARKDOWN, ArtifactFormat.JSON)
        assert config.output_preferences.include_date is False
        assert config.user_checkpoints.before_major_changes is False
        assert config.user_checkpoints.custom_checkpoints == (Phase.PRESENT,)
        assert config.escalation_triggers.max_validation_attempts == 5
        assert config.guidance_mode is GuidanceMode.SUGGESTIVE

    def test_preset_seeds_phases_and_limits(self) -> None:
        config, workflow_type = workflow_config_from_dict(
            {"preset": "tdd", "iterationLimits": {"test": 3}}
        )

        assert workflow_type is WorkflowType.TDD
        assert config.selected_phases[1] is Phase.QUESTION_DETERMINE
        assert config.limit_for(Phase.TEST) == 3
        assert config.limit_for(Phase.ITERATE) == 15

    def test_default_output_directory(self) -> None:
        config, _ = workflow_config_from_dict({}, default_output_directory="artifacts")

        assert config.output_preferences.output_directory == "artifacts"

    def test_schema_violation(self) -> None:
        with pytest.raises(ConfigurationError, match="iterationLimits/LINT"):
            workflow_config_from_dict({"iterationLimits": {"LINT": 0}})

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid workflow configuration"):
            workflow_config_from_dict({"phases": ["TEST"]})

    def test_unknown_phase(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown phase 'DEPLOY'"):
            workflow_config_from_dict({"selectedPhases": ["DEPLOY"]})

    def test_duplicate_aliases(self) -> None:
        with pytest.raises(ConfigurationError, match="duplicates"):
            workflow_config_from_dict({"selectedPhases": ["audit", "AUDIT_INVENTORY"]})


def test_output_preferences_overlay() -> None:
    base = OutputPreferences(output_directory="out")

    prefs = output_preferences_from_dict({"createTaskSubdirectory": False}, base)

    assert prefs.output_directory == "out"
    assert prefs.create_task_subdirectory is False


class TestLoadWorkflowConfig:
    def test_loads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "workflow.json"
        path.write_text(json.dumps({"preset": "refactor"}), encoding="utf-8")

        config, workflow_type = load_workflow_config(path)

        assert workflow_type is WorkflowType.REFACTOR
        assert len(config.selected_phases) == 8

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_workflow_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "workflow.json"
        path.write_text("{", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_workflow_config(path)

    def test_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "workflow.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="JSON object"):
            load_workflow_config(path)


class TestSchemas:
    def test_workflow_schema_is_valid(self) -> None:
        jsonschema.Draft202012Validator.check_schema(get_workflow_config_schema())

    def test_submission_requires_artifacts(self) -> None:
        with pytest.raises(jsonschema.ValidationError):
            validate_phase_submission({"phase": "TEST", "output": {}})

    def test_resume_decision_actions(self) -> None:
        validate_resume_decision({"action": "skip_phase"})
        with pytest.raises(jsonschema.ValidationError):
            validate_resume_decision({"action": "retry"})
