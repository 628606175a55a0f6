"""PhaseGuard JSON Schema definitions and validation utilities.

This module provides JSON Schema definitions for PhaseGuard configuration
files and tool payloads.

Schemas:
    - workflow_config.schema.json: Workflow configuration (phases, limits, checkpoints)
    - phase_submission.schema.json: Phase-completion submission (phase_output tool)
    - resume_decision.schema.json: Human decision resuming an escalation

Usage:
    from phaseguard.schemas import validate_workflow_config

    # Validate a workflow configuration
    with open("workflow.json") as f:
        data = json.load(f)
    validate_workflow_config(data)  # Raises jsonschema.ValidationError if invalid
"""

import json
from functools import cache
from importlib.resources import files
from typing import Any

import jsonschema


@cache
def _load_schema(name: str) -> dict[str, Any]:
    """Load a JSON schema from the schemas package.

    Args:
        name: Schema filename (e.g., 'workflow_config.schema.json')

    Returns:
        Parsed JSON schema as a dictionary
    """
    schema_text = files("phaseguard.schemas").joinpath(name).read_text(encoding="utf-8")
    result: dict[str, Any] = json.loads(schema_text)
    return result


def get_workflow_config_schema() -> dict[str, Any]:
    """Get the workflow configuration schema."""
    return _load_schema("workflow_config.schema.json")


def get_phase_submission_schema() -> dict[str, Any]:
    """Get the phase submission schema."""
    return _load_schema("phase_submission.schema.json")


def get_resume_decision_schema() -> dict[str, Any]:
    """Get the resume decision schema."""
    return _load_schema("resume_decision.schema.json")


def validate_workflow_config(data: dict[str, Any]) -> None:
    """Validate a workflow configuration against the schema.

    Args:
        data: Workflow configuration dictionary (camelCase keys)

    Raises:
        jsonschema.ValidationError: If validation fails
    """
    jsonschema.validate(data, get_workflow_config_schema())


def validate_phase_submission(data: dict[str, Any]) -> None:
    """Validate a phase submission payload.

    Raises:
        jsonschema.ValidationError: If validation fails
    """
    jsonschema.validate(data, get_phase_submission_schema())


def validate_resume_decision(data: dict[str, Any]) -> None:
    """Validate a resume decision payload.

    Raises:
        jsonschema.ValidationError: If validation fails
    """
    jsonschema.validate(data, get_resume_decision_schema())


__all__ = [
    "get_workflow_config_schema",
    "get_phase_submission_schema",
    "get_resume_decision_schema",
    "validate_workflow_config",
    "validate_phase_submission",
    "validate_resume_decision",
]
