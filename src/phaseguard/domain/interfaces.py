"""
Domain interfaces (Ports) for PhaseGuard.

These abstract base classes define the contracts that implementations must satisfy.
They have no external dependencies and represent the core domain boundaries.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from phaseguard.domain.models import ActionKind, GuardResult, OutputArtifact
    from phaseguard.domain.phases import Phase
    from phaseguard.domain.workflow_event import WorkflowEvent, WorkflowEventType


class GuardInterface(ABC):
    """
    Port for artifact validation.

    Guards are deterministic validators that return pass or fail with feedback.
    """

    @abstractmethod
    def validate(self, artifact: "OutputArtifact", phase: "Phase") -> "GuardResult":
        """
        Validate one submitted artifact for a phase.

        Args:
            artifact: The artifact to validate
            phase: The phase the artifact was submitted for

        Returns:
            GuardResult with passed=True/False and optional feedback
        """
        pass


class ActionClassifierInterface(ABC):
    """
    Port for deciding whether an agent action reads or modifies a file.

    The safety gate only depends on this classification; how free-text action
    descriptions are interpreted is an implementation detail.
    """

    @abstractmethod
    def classify(self, action: str) -> "ActionKind":
        """
        Classify an action description.

        Args:
            action: Free-text action as supplied by the agent (e.g. "edit")

        Returns:
            ActionKind.MODIFY, ActionKind.READ or ActionKind.OTHER
        """
        pass


class ArtifactWriterInterface(ABC):
    """
    Port for persisting validated phase artifacts.

    Implementations resolve and verify the output location once per session
    and then write individual files into it.
    """

    @abstractmethod
    def prepare(self, output_directory: str, task_directory_name: str | None) -> str:
        """
        Resolve, create and verify the directory artifacts go into.

        Args:
            output_directory: Configured output directory (may be relative)
            task_directory_name: Sanitized task subdirectory, or None for none

        Returns:
            Location identifier of the prepared directory

        Raises:
            ConfigurationError: If the directory cannot be created or written
        """
        pass

    @abstractmethod
    def write(self, directory: str, file_name: str, content: str) -> str:
        """
        Write one artifact.

        Args:
            directory: A location previously returned by prepare()
            file_name: Final file name (already numbered)
            content: File content

        Returns:
            Location identifier of the written file

        Raises:
            OSError: If the write fails
        """
        pass


class WorkflowEventStoreInterface(ABC):
    """Port for recording the workflow event trace."""

    @abstractmethod
    def store_event(self, event: "WorkflowEvent") -> str:
        """
        Append an event.

        Returns:
            The event_id
        """
        pass

    @abstractmethod
    def get_events(
        self,
        session_id: str,
        event_type: "WorkflowEventType | None" = None,
    ) -> list["WorkflowEvent"]:
        """
        Retrieve events of a session in chronological order.

        Args:
            session_id: Session to filter by
            event_type: Optional event type filter
        """
        pass
