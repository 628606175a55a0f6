"""
JSON serialization of domain and application objects for tool responses.

Tool payloads use camelCase keys; everything returned here is plain
JSON-compatible data.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from phaseguard.application.escalation import ResumeOutcome
from phaseguard.application.guidance import PhaseGuidance
from phaseguard.application.recorder import RecordResult
from phaseguard.application.workflow import SessionStatus, SubmissionResult
from phaseguard.domain.exceptions import PhaseGuardError
from phaseguard.domain.models import (
    ActionCheck,
    EscalationContext,
    Session,
    ValidationCriteria,
    ValidationReport,
    ValidationState,
    WorkflowConfiguration,
)
from phaseguard.domain.phases import PHASE_INFO, Phase, estimate_minutes


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _phase_map(data: Mapping[Phase, Any]) -> dict[str, Any]:
    return {phase.value: value for phase, value in data.items()}


def guidance_tool_name(phase: Phase | None) -> str | None:
    return PHASE_INFO[phase].guidance_tool if phase is not None else None


def error_to_dict(error: PhaseGuardError) -> dict[str, Any]:
    """Structured error object: ``{error, message, resolution?}``."""
    data: dict[str, Any] = {"error": error.code, "message": error.message}
    if error.resolution:
        data["resolution"] = error.resolution
    return data


def config_to_dict(config: WorkflowConfiguration) -> dict[str, Any]:
    prefs = config.output_preferences
    checkpoints = config.user_checkpoints
    triggers = config.escalation_triggers
    return {
        "selectedPhases": [p.value for p in config.selected_phases],
        "iterationLimits": _phase_map(config.iteration_limits),
        "outputPreferences": {
            "outputDirectory": prefs.output_directory,
            "formats": [f.value for f in prefs.formats],
            "createTaskSubdirectory": prefs.create_task_subdirectory,
            "includeDate": prefs.include_date,
            "createPhaseArtifacts": prefs.create_phase_artifacts,
            "realTimeUpdates": prefs.real_time_updates,
        },
        "userCheckpoints": {
            "beforeMajorChanges": checkpoints.before_major_changes,
            "afterFailedIterations": checkpoints.after_failed_iterations,
            "beforeFinalPresentation": checkpoints.before_final_presentation,
            "customCheckpoints": [p.value for p in checkpoints.custom_checkpoints],
        },
        "escalationTriggers": {
            "enableUserInput": triggers.enable_user_input,
            "escalateOnIterationLimit": triggers.escalate_on_iteration_limit,
            "escalateOnErrors": triggers.escalate_on_errors,
            "maxValidationAttempts": triggers.max_validation_attempts,
        },
        "guidanceMode": config.guidance_mode.value,
    }


def session_started_to_dict(session: Session) -> dict[str, Any]:
    """Response of the workflow-starting tools."""
    config = session.workflow_config
    first = config.selected_phases[0]
    return {
        "sessionId": session.session_id,
        "task": session.task_description,
        "workflowType": session.workflow_type.value if session.workflow_type else None,
        "startedAt": _iso(session.started_at),
        "configuration": config_to_dict(config),
        "phases": [
            {
                "phase": p.value,
                "description": PHASE_INFO[p].description,
                "guidanceTool": PHASE_INFO[p].guidance_tool,
                "iterationLimit": config.limit_for(p),
            }
            for p in config.selected_phases
        ],
        "estimatedMinutes": estimate_minutes(config.selected_phases),
        "outputDirectory": session.task_directory,
        "nextPhase": first.value,
        "nextGuidanceTool": guidance_tool_name(first),
    }


def criteria_to_dict(criteria: ValidationCriteria) -> dict[str, Any]:
    return {
        "phase": criteria.phase.value,
        "minimumRequirements": dict(criteria.minimum_requirements),
        "expectedFiles": list(criteria.expected_files),
        "blockingMessages": list(criteria.blocking_messages),
        "completionCriteria": list(criteria.completion_criteria),
    }


def escalation_to_dict(context: EscalationContext) -> dict[str, Any]:
    return {
        "trigger": context.trigger.value,
        "failedPhase": context.failed_phase.value,
        "attemptCount": context.attempt_count,
        "blocking": context.blocking,
        "lastError": context.last_error,
        "options": [
            {"action": option.action.value, "label": option.label}
            for option in context.options
        ],
        "context": dict(context.context),
        "raisedAt": _iso(context.raised_at),
    }


def guidance_to_dict(guidance: PhaseGuidance) -> dict[str, Any]:
    data: dict[str, Any] = {
        "phase": guidance.phase.value,
        "mode": guidance.mode.value,
        "description": guidance.description,
        "objective": guidance.objective,
        "instructions": list(guidance.instructions),
        "expectedOutput": list(guidance.expected_output),
        "estimatedMinutes": guidance.estimated_minutes,
        "nextPhase": guidance.next_phase.value if guidance.next_phase else None,
        "nextGuidanceTool": guidance_tool_name(guidance.next_phase),
        "prerequisiteWarnings": list(guidance.prerequisite_warnings),
    }
    if guidance.validation_criteria is not None:
        data["validationCriteria"] = criteria_to_dict(guidance.validation_criteria)
    if guidance.required_output_file is not None:
        data["requiredOutputFile"] = guidance.required_output_file
    if guidance.user_checkpoint is not None:
        data["userCheckpoint"] = escalation_to_dict(guidance.user_checkpoint)
    return data


def report_to_dict(report: ValidationReport) -> dict[str, Any]:
    return {
        "phase": report.phase.value,
        "isComplete": report.is_complete,
        "passed": list(report.passed),
        "failed": list(report.failed),
        "blockingMessages": list(report.blocking_messages),
        "nextSteps": list(report.next_steps),
        "fatal": report.fatal,
    }


def record_to_dict(record: RecordResult) -> dict[str, Any]:
    return {
        "artifactsSaved": len(record.saved),
        "artifactsFailed": len(record.failed),
        "artifacts": [
            {
                "source": a.source,
                "path": a.path,
                "format": a.format.value,
                "description": a.description,
                "savedAt": _iso(a.saved_at),
            }
            for a in record.saved
        ],
        "failedArtifacts": [{"source": f.source, "error": f.error} for f in record.failed],
        "completedAt": _iso(record.phase_output.completed_at),
        "durationSeconds": round(record.phase_output.duration_seconds, 3),
    }


def submission_to_dict(
    result: SubmissionResult,
    error: PhaseGuardError | None = None,
    next_phase: Phase | None = None,
) -> dict[str, Any]:
    """
    Response of phase_output.

    Accepted submissions report what was saved; rejected and escalated ones
    carry the structured ``error`` of the given exception.
    """
    data: dict[str, Any] = {}
    if error is not None:
        data.update(error_to_dict(error))
    data.update(
        {
            "recorded": result.record is not None,
            "status": result.status.value,
            "phase": result.phase.value,
            "attemptCount": result.attempt,
        }
    )
    if result.record is not None:
        data.update(record_to_dict(result.record))
        data["nextPhase"] = next_phase.value if next_phase else None
        data["nextGuidanceTool"] = guidance_tool_name(next_phase)
    else:
        data["validationErrors"] = list(result.report.failed)
        data["blockingMessages"] = list(result.report.blocking_messages)
        data["nextSteps"] = list(result.report.next_steps)
    if result.escalation is not None:
        data["escalation"] = escalation_to_dict(result.escalation)
        data["nextGuidanceTool"] = guidance_tool_name(Phase.USER_INPUT_REQUIRED)
    return data


def action_check_to_dict(check: ActionCheck, error: PhaseGuardError | None = None) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if error is not None:
        data.update(error_to_dict(error))
    data.update(
        {
            "allowed": check.allowed,
            "action": check.action,
            "filePath": check.path,
            "kind": check.kind.value,
            "reason": check.reason,
        }
    )
    if check.resolution:
        data["resolution"] = check.resolution
    return data


def _validation_state_to_dict(state: ValidationState) -> dict[str, Any]:
    return {
        "isComplete": state.is_complete,
        "passed": list(state.passed),
        "failed": list(state.failed),
        "attempts": state.attempts,
        "lastValidatedAt": _iso(state.last_validated_at),
    }


def status_to_dict(status: SessionStatus) -> dict[str, Any]:
    progress = status.progress
    return {
        "sessionId": status.session_id,
        "task": status.task_description,
        "workflowType": status.workflow_type.value if status.workflow_type else None,
        "currentPhase": status.current_phase.value,
        "nextPhase": status.next_phase.value if status.next_phase else None,
        "nextGuidanceTool": guidance_tool_name(status.next_phase),
        "progress": {
            "completedPhases": [p.value for p in progress.completed],
            "skippedPhases": [p.value for p in progress.skipped],
            "remainingPhases": [p.value for p in progress.remaining],
            "totalPhases": progress.total,
            "percent": progress.percent,
            "finished": progress.is_finished,
        },
        "iterationCounts": _phase_map(status.iteration_counts),
        "iterationLimits": _phase_map(status.iteration_limits),
        "validationStates": {
            phase.value: _validation_state_to_dict(state)
            for phase, state in status.validation_states.items()
        },
        "metrics": {
            "filesAnalyzed": status.metrics.files_analyzed,
            "filesModified": status.metrics.files_modified,
            "lintIssuesFound": status.metrics.lint_issues_found,
            "lintIssuesFixed": status.metrics.lint_issues_fixed,
            "phasesCompleted": status.metrics.phases_completed,
        },
        "pendingEscalation": (
            escalation_to_dict(status.pending_escalation)
            if status.pending_escalation
            else None
        ),
        "elapsedSeconds": round(status.elapsed_seconds, 3),
        "outputDirectory": status.task_directory,
    }


def resume_outcome_to_dict(outcome: ResumeOutcome) -> dict[str, Any]:
    return {
        "action": outcome.action.value,
        "phase": outcome.phase.value,
        "grantedIterations": outcome.granted_iterations,
        "waivedRequirements": list(outcome.waived),
        "nextPhase": outcome.next_phase.value if outcome.next_phase else None,
        "nextGuidanceTool": guidance_tool_name(outcome.next_phase),
        "sessionEnded": outcome.session_ended,
    }
