"""
Persistence adapters for phase artifacts and the workflow event trace.
"""

from phaseguard.infrastructure.persistence.filesystem import FilesystemArtifactWriter
from phaseguard.infrastructure.persistence.memory import InMemoryArtifactWriter
from phaseguard.infrastructure.persistence.workflow_events import (
    FilesystemWorkflowEventStore,
    InMemoryWorkflowEventStore,
)

__all__ = [
    "InMemoryArtifactWriter",
    "FilesystemArtifactWriter",
    "InMemoryWorkflowEventStore",
    "FilesystemWorkflowEventStore",
]
