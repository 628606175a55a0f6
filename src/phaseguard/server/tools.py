"""
ToolRouter: the tool-invocation boundary.

Every tool call goes through dispatch(), which validates parameters against
the tool's JSON schema, calls the orchestrator, and normalizes every error
into a structured ``{error, message, resolution?}`` object. dispatch()
never raises.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

import jsonschema

from phaseguard.application.workflow import SubmissionStatus, WorkflowOrchestrator
from phaseguard.domain.exceptions import (
    ConfigurationError,
    EscalationRequired,
    PhaseGuardError,
    SafetyViolation,
    ValidationFailure,
)
from phaseguard.domain.models import (
    GuidanceMode,
    OutputArtifact,
    OutputPreferences,
    ResumeAction,
    ResumeDecision,
    WorkflowConfiguration,
    WorkflowType,
)
from phaseguard.domain.phases import PHASE_INFO, WORKABLE_PHASES, Phase
from phaseguard.domain.presets import detect_workflow_type, get_preset
from phaseguard.domain.transitions import phase_after
from phaseguard.infrastructure.config import (
    ServerSettings,
    output_preferences_from_dict,
    workflow_config_from_dict,
)
from phaseguard.schemas import (
    get_phase_submission_schema,
    get_resume_decision_schema,
    get_workflow_config_schema,
)
from phaseguard.server import serializers

logger = logging.getLogger(__name__)

Handler = Callable[[dict[str, Any]], dict[str, Any]]

_EMPTY_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}

_PRESET_TOOLS: dict[str, WorkflowType] = {
    "refactor_workflow": WorkflowType.REFACTOR,
    "create_feature_workflow": WorkflowType.FEATURE,
    "test_workflow": WorkflowType.TEST,
    "tdd_workflow": WorkflowType.TDD,
}


@dataclass(frozen=True)
class ToolSpec:
    """A tool as advertised to clients."""

    name: str
    description: str
    handler: Handler
    input_schema: dict[str, Any] = field(default_factory=lambda: dict(_EMPTY_SCHEMA))
    category: str = "workflow"


def _task_schema(key: str) -> dict[str, Any]:
    return {
        "type": "object",
        "required": [key],
        "properties": {
            key: {"type": "string", "minLength": 1, "description": "What the agent must do"},
            "context": {"type": "object", "description": "Optional extra context"},
            "outputPreferences": get_workflow_config_schema()["properties"]["outputPreferences"],
        },
        "additionalProperties": False,
    }


def _custom_workflow_schema() -> dict[str, Any]:
    config_schema = get_workflow_config_schema()
    return {
        "type": "object",
        "required": ["taskDescription"],
        "properties": {
            "taskDescription": {"type": "string", "minLength": 1},
            **config_schema["properties"],
        },
        "additionalProperties": False,
    }


class ToolRouter:
    """Maps tool names to orchestrator operations for one connection."""

    def __init__(
        self,
        orchestrator: WorkflowOrchestrator,
        settings: ServerSettings | None = None,
        default_config: WorkflowConfiguration | None = None,
    ):
        """
        Args:
            orchestrator: Owner of this connection's session
            settings: Server settings (output directory defaults)
            default_config: Configuration used by plan_workflow, if not the defaults
        """
        self._orchestrator = orchestrator
        self._settings = settings or ServerSettings()
        self._default_config = default_config
        self._tools: dict[str, ToolSpec] = {spec.name: spec for spec in self._build_specs()}

    @property
    def orchestrator(self) -> WorkflowOrchestrator:
        return self._orchestrator

    def tool_specs(self) -> list[ToolSpec]:
        return list(self._tools.values())

    def dispatch(self, name: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Invoke a tool. Always returns a JSON-compatible dict."""
        spec = self._tools.get(name)
        if spec is None:
            return {
                "error": "UNKNOWN_TOOL",
                "message": f"Unknown tool '{name}'",
                "resolution": "Call discover_workflow_tools to list the available tools",
            }
        arguments = dict(params or {})
        try:
            jsonschema.validate(arguments, spec.input_schema)
            return spec.handler(arguments)
        except jsonschema.ValidationError as e:
            location = "/".join(str(p) for p in e.absolute_path) or "<root>"
            return {
                "error": "INVALID_PARAMS",
                "message": f"Invalid parameters for {name} at {location}: {e.message}",
                "resolution": "Check the tool's input schema",
            }
        except PhaseGuardError as e:
            logger.info("%s failed: %s (%s)", name, e.message, e.code)
            return serializers.error_to_dict(e)
        except ValueError as e:
            return {"error": "INVALID_PARAMS", "message": str(e)}
        except Exception as e:
            logger.exception("Unexpected error in tool %s", name)
            return {"error": "INTERNAL_ERROR", "message": f"{type(e).__name__}: {e}"}

    def close(self) -> None:
        """End the session when the connection goes away."""
        self._orchestrator.end("connection closed")

    # ------------------------------------------------------------------
    # Tool table
    # ------------------------------------------------------------------

    def _build_specs(self) -> list[ToolSpec]:
        specs = [
            ToolSpec(
                "plan_workflow",
                "Start a workflow session with the default phases and suggestive guidance",
                self._plan_workflow,
                _task_schema("task"),
                category="session",
            ),
            ToolSpec(
                "build_custom_workflow",
                "Start a workflow session with custom phases, limits and checkpoints",
                self._build_custom_workflow,
                _custom_workflow_schema(),
                category="session",
            ),
        ]
        for tool_name, workflow_type in _PRESET_TOOLS.items():
            preset = get_preset(workflow_type)
            specs.append(
                ToolSpec(
                    tool_name,
                    f"Start a {workflow_type.value} workflow: {preset.description}",
                    self._preset_handler(workflow_type),
                    _task_schema("task"),
                    category="session",
                )
            )
        for phase in (*WORKABLE_PHASES, Phase.USER_INPUT_REQUIRED):
            info = PHASE_INFO[phase]
            specs.append(
                ToolSpec(
                    info.guidance_tool,
                    f"Guidance for {phase.value}: {info.description}",
                    self._guidance_handler(phase),
                    category="guidance",
                )
            )
        specs.extend(
            [
                ToolSpec(
                    "validate_action",
                    "Check an action on a file against the read-before-write rule",
                    self._validate_action,
                    {
                        "type": "object",
                        "required": ["action", "filePath"],
                        "properties": {
                            "action": {"type": "string", "minLength": 1},
                            "filePath": {"type": "string", "minLength": 1},
                        },
                        "additionalProperties": False,
                    },
                    category="validation",
                ),
                ToolSpec(
                    "phase_output",
                    "Submit a phase's results and artifacts for validation and recording",
                    self._phase_output,
                    get_phase_submission_schema(),
                    category="validation",
                ),
                ToolSpec(
                    "workflow_status",
                    "Report the session's phase, progress, iterations and metrics",
                    self._workflow_status,
                    category="session",
                ),
                ToolSpec(
                    "resume_workflow",
                    "Apply a human decision to resume an escalated workflow",
                    self._resume_workflow,
                    get_resume_decision_schema(),
                    category="session",
                ),
                ToolSpec(
                    "end_workflow",
                    "End the current workflow session",
                    self._end_workflow,
                    {
                        "type": "object",
                        "properties": {"reason": {"type": "string"}},
                        "additionalProperties": False,
                    },
                    category="session",
                ),
                ToolSpec(
                    "discover_workflow_tools",
                    "List the available workflow tools by category",
                    self._discover_workflow_tools,
                    category="discovery",
                ),
            ]
        )
        return specs

    # ------------------------------------------------------------------
    # Session tools
    # ------------------------------------------------------------------

    def _plan_workflow(self, params: dict[str, Any]) -> dict[str, Any]:
        config = self._default_config or WorkflowConfiguration(
            output_preferences=OutputPreferences(output_directory=self._settings.output_directory),
            guidance_mode=GuidanceMode.SUGGESTIVE,
        )
        if "outputPreferences" in params:
            config = replace(
                config,
                output_preferences=output_preferences_from_dict(
                    params["outputPreferences"], config.output_preferences
                ),
            )
        session = self._orchestrator.start(params["task"], config)
        suggestion = detect_workflow_type(params["task"])
        result = serializers.session_started_to_dict(session)
        result["suggestedWorkflow"] = suggestion.value if suggestion else None
        return result

    def _build_custom_workflow(self, params: dict[str, Any]) -> dict[str, Any]:
        data = {k: v for k, v in params.items() if k != "taskDescription"}
        config, workflow_type = workflow_config_from_dict(
            data,
            guidance_mode=GuidanceMode.DIRECTIVE,
            default_output_directory=self._settings.output_directory,
        )
        session = self._orchestrator.start(
            params["taskDescription"], config, workflow_type or WorkflowType.CUSTOM
        )
        return serializers.session_started_to_dict(session)

    def _preset_handler(self, workflow_type: WorkflowType) -> Handler:
        def handler(params: dict[str, Any]) -> dict[str, Any]:
            data: dict[str, Any] = {"preset": workflow_type.value}
            if "outputPreferences" in params:
                data["outputPreferences"] = params["outputPreferences"]
            config, _ = workflow_config_from_dict(
                data,
                guidance_mode=GuidanceMode.DIRECTIVE,
                default_output_directory=self._settings.output_directory,
            )
            session = self._orchestrator.start(params["task"], config, workflow_type)
            return serializers.session_started_to_dict(session)

        return handler

    def _workflow_status(self, params: dict[str, Any]) -> dict[str, Any]:
        return serializers.status_to_dict(self._orchestrator.status())

    def _resume_workflow(self, params: dict[str, Any]) -> dict[str, Any]:
        decision = ResumeDecision(
            action=ResumeAction(params["action"]),
            additional_iterations=params.get("additionalIterations"),
            waived_requirements=tuple(params.get("waivedRequirements", ())),
            note=params.get("note", ""),
        )
        outcome = self._orchestrator.resume(decision)
        return serializers.resume_outcome_to_dict(outcome)

    def _end_workflow(self, params: dict[str, Any]) -> dict[str, Any]:
        session = self._orchestrator.end(params.get("reason", "ended by agent"))
        return {
            "ended": session is not None,
            "sessionId": session.session_id if session else None,
        }

    def _discover_workflow_tools(self, params: dict[str, Any]) -> dict[str, Any]:
        categories: dict[str, list[dict[str, str]]] = {}
        for spec in self._tools.values():
            categories.setdefault(spec.category, []).append(
                {"name": spec.name, "description": spec.description}
            )
        session = self._orchestrator.session
        return {
            "tools": categories,
            "totalTools": len(self._tools),
            "activeSession": session.session_id if session else None,
        }

    # ------------------------------------------------------------------
    # Phase tools
    # ------------------------------------------------------------------

    def _guidance_handler(self, phase: Phase) -> Handler:
        def handler(params: dict[str, Any]) -> dict[str, Any]:
            return serializers.guidance_to_dict(self._orchestrator.guidance(phase))

        return handler

    def _validate_action(self, params: dict[str, Any]) -> dict[str, Any]:
        check = self._orchestrator.check_action(params["action"], params["filePath"])
        error = None if check.allowed else SafetyViolation(check.path, check.action)
        return serializers.action_check_to_dict(check, error)

    def _phase_output(self, params: dict[str, Any]) -> dict[str, Any]:
        artifacts = [OutputArtifact.from_dict(a) for a in params["outputArtifacts"]]
        result = self._orchestrator.submit(
            params["phase"],
            params["output"],
            artifacts,
            created_files=params.get("createdFiles", ()),
        )
        if result.status is SubmissionStatus.ACCEPTED:
            session = self._orchestrator.store.require_session()
            following = phase_after(session.workflow_config, result.phase)
            return serializers.submission_to_dict(result, next_phase=following)

        error: PhaseGuardError
        if result.status is SubmissionStatus.ESCALATED and result.escalation is not None:
            error = EscalationRequired(result.escalation)
        elif result.report.fatal:
            error = ConfigurationError(
                "; ".join(result.report.failed),
                resolution="Fix the malformed artifact and resubmit",
            )
        else:
            error = ValidationFailure(result.report)
        return serializers.submission_to_dict(result, error)

