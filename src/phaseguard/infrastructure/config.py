"""
Configuration loading.

ServerSettings come from the environment; workflow configurations come from
JSON files or tool payloads (camelCase keys), validated against the schemas
shipped in phaseguard.schemas before conversion.
"""

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import jsonschema

from phaseguard.domain.exceptions import ConfigurationError
from phaseguard.domain.models import (
    DEFAULT_OUTPUT_DIRECTORY,
    ArtifactFormat,
    GuidanceMode,
    OutputPreferences,
    WorkflowConfiguration,
    WorkflowType,
)
from phaseguard.domain.phases import Phase
from phaseguard.domain.presets import get_preset
from phaseguard.schemas import validate_workflow_config

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_OUTPUT_DIR = "PHASEGUARD_OUTPUT_DIR"
ENV_BASE_DIR = "PHASEGUARD_BASE_DIR"
ENV_LOG_LEVEL = "PHASEGUARD_LOG_LEVEL"
ENV_CONFIG_FILE = "PHASEGUARD_CONFIG"


@dataclass(frozen=True)
class ServerSettings:
    """Process-wide settings of the tool server."""

    output_directory: str = DEFAULT_OUTPUT_DIRECTORY
    base_directory: str = "."
    log_level: str = "INFO"
    config_file: str | None = None

    def __post_init__(self) -> None:
        level = self.log_level.upper()
        if level not in LOG_LEVELS:
            raise ConfigurationError(
                f"Unknown log level '{self.log_level}'",
                resolution=f"Use one of: {', '.join(LOG_LEVELS)}",
            )
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServerSettings":
        """Build settings from PHASEGUARD_* environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            output_directory=env.get(ENV_OUTPUT_DIR) or DEFAULT_OUTPUT_DIRECTORY,
            base_directory=env.get(ENV_BASE_DIR) or os.getcwd(),
            log_level=env.get(ENV_LOG_LEVEL) or "INFO",
            config_file=env.get(ENV_CONFIG_FILE) or None,
        )


def _parse_phase(value: str) -> Phase:
    try:
        return Phase.parse(value)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


_OUTPUT_KEYS = {
    "outputDirectory": "output_directory",
    "createTaskSubdirectory": "create_task_subdirectory",
    "includeDate": "include_date",
    "createPhaseArtifacts": "create_phase_artifacts",
    "realTimeUpdates": "real_time_updates",
}
_CHECKPOINT_KEYS = {
    "beforeMajorChanges": "before_major_changes",
    "afterFailedIterations": "after_failed_iterations",
    "beforeFinalPresentation": "before_final_presentation",
}
_ESCALATION_KEYS = {
    "enableUserInput": "enable_user_input",
    "escalateOnIterationLimit": "escalate_on_iteration_limit",
    "escalateOnErrors": "escalate_on_errors",
    "maxValidationAttempts": "max_validation_attempts",
}


def _renamed(data: Mapping[str, Any], keys: Mapping[str, str]) -> dict[str, Any]:
    return {keys[k]: v for k, v in data.items() if k in keys}


def output_preferences_from_dict(
    data: Mapping[str, Any], base: OutputPreferences
) -> OutputPreferences:
    """Overlay camelCase output preferences onto ``base``."""
    output = replace(base, **_renamed(data, _OUTPUT_KEYS))
    if "formats" in data:
        output = replace(output, formats=tuple(ArtifactFormat(f) for f in data["formats"]))
    return output


def workflow_config_from_dict(
    data: Mapping[str, Any],
    guidance_mode: GuidanceMode = GuidanceMode.DIRECTIVE,
    default_output_directory: str | None = None,
) -> tuple[WorkflowConfiguration, WorkflowType | None]:
    """
    Convert a camelCase configuration mapping into a WorkflowConfiguration.

    Keys that are absent keep the value of the named preset, or of the
    defaults when no preset is named.

    Returns:
        (configuration, workflow type of the preset used, if any)

    Raises:
        ConfigurationError: If the mapping fails the schema or an invariant
    """
    try:
        validate_workflow_config(dict(data))
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigurationError(
            f"Invalid workflow configuration at {location}: {e.message}",
            resolution="Check the configuration against workflow_config.schema.json",
        ) from e

    mode = GuidanceMode(data["guidanceMode"]) if "guidanceMode" in data else guidance_mode
    workflow_type = WorkflowType(data["preset"]) if "preset" in data else None
    if workflow_type is not None:
        base = get_preset(workflow_type).to_configuration(mode)
    else:
        base = WorkflowConfiguration(guidance_mode=mode)
    if default_output_directory:
        base = replace(
            base,
            output_preferences=replace(
                base.output_preferences, output_directory=default_output_directory
            ),
        )

    phases = base.selected_phases
    if "selectedPhases" in data:
        phases = tuple(_parse_phase(p) for p in data["selectedPhases"])

    limits = dict(base.iteration_limits)
    for name, limit in data.get("iterationLimits", {}).items():
        limits[_parse_phase(name)] = limit

    output = output_preferences_from_dict(
        data.get("outputPreferences", {}), base.output_preferences
    )

    checkpoint_data = data.get("userCheckpoints", {})
    checkpoints = replace(base.user_checkpoints, **_renamed(checkpoint_data, _CHECKPOINT_KEYS))
    if "customCheckpoints" in checkpoint_data:
        checkpoints = replace(
            checkpoints,
            custom_checkpoints=tuple(_parse_phase(p) for p in checkpoint_data["customCheckpoints"]),
        )

    escalation = replace(
        base.escalation_triggers,
        **_renamed(data.get("escalationTriggers", {}), _ESCALATION_KEYS),
    )

    config = WorkflowConfiguration(
        selected_phases=phases,
        iteration_limits=limits,
        output_preferences=output,
        user_checkpoints=checkpoints,
        escalation_triggers=escalation,
        guidance_mode=mode,
    )
    return config, workflow_type


def load_workflow_config(
    path: str | Path,
    default_output_directory: str | None = None,
) -> tuple[WorkflowConfiguration, WorkflowType | None]:
    """
    Load and validate a workflow configuration JSON file.

    Raises:
        ConfigurationError: If the file is missing, not JSON, or invalid
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Configuration file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")
    logger.info("Loaded workflow configuration from %s", path)
    return workflow_config_from_dict(data, default_output_directory=default_output_directory)
