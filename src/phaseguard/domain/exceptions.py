"""
Domain exceptions for PhaseGuard.

These represent rule violations inside the core. They never cross the tool
boundary: server.tools.ToolRouter normalizes each one into a structured
``{error, message, resolution}`` object.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from phaseguard.domain.models import EscalationContext, ValidationReport


class PhaseGuardError(Exception):
    """Base class for all PhaseGuard errors."""

    code = "PHASEGUARD_ERROR"

    def __init__(self, message: str, resolution: str | None = None):
        """
        Args:
            message: Human-readable error message
            resolution: Suggested remediation, if any
        """
        super().__init__(message)
        self.message = message
        self.resolution = resolution


class NoActiveSession(PhaseGuardError):
    """Raised when an operation needs a session and none is active."""

    code = "NO_ACTIVE_SESSION"

    def __init__(self, message: str = "No active session"):
        super().__init__(
            message,
            resolution="Start a workflow with plan_workflow or build_custom_workflow first",
        )


class SafetyViolation(PhaseGuardError):
    """
    Raised when a file modification is attempted before the file was read.

    Always fatal to that single action; never silently bypassed.
    """

    code = "SAFETY_VIOLATION"

    def __init__(self, path: str, action: str):
        """
        Args:
            path: The file the action targeted
            action: The action description as supplied by the caller
        """
        super().__init__(
            f"Cannot modify '{path}' before reading it (read before write)",
            resolution=f'First read the file "{path}", then you can modify it',
        )
        self.path = path
        self.action = action


class ValidationFailure(PhaseGuardError):
    """
    Raised when submitted work does not meet a phase's criteria.

    Recoverable: the report carries the remediation list.
    """

    code = "VALIDATION_FAILED"

    def __init__(self, report: "ValidationReport"):
        super().__init__(
            f"Phase {report.phase.value} validation failed "
            f"({len(report.failed)} requirement(s) not met)",
            resolution="; ".join(report.next_steps) or None,
        )
        self.report = report


class EscalationRequired(PhaseGuardError):
    """
    Raised when the attempt budget is exhausted and a human must decide.

    Automatic progress stops until resume() is called with a decision.
    """

    code = "ESCALATION_REQUIRED"

    def __init__(self, context: "EscalationContext"):
        super().__init__(
            f"Phase {context.failed_phase.value} requires a human decision "
            f"({context.trigger.value} after {context.attempt_count} attempt(s))",
            resolution="Present the options to the user and call resume_workflow "
            "with the chosen action",
        )
        self.context = context


class ConfigurationError(PhaseGuardError):
    """Raised for invalid configuration or unusable output directories."""

    code = "CONFIGURATION_ERROR"
