"""
Infrastructure layer for PhaseGuard.

Contains adapters for external concerns (artifact files, event trace, configuration).
"""

from phaseguard.infrastructure.config import (
    ServerSettings,
    load_workflow_config,
    workflow_config_from_dict,
)
from phaseguard.infrastructure.persistence import (
    FilesystemArtifactWriter,
    FilesystemWorkflowEventStore,
    InMemoryArtifactWriter,
    InMemoryWorkflowEventStore,
)

__all__ = [
    # Persistence
    "InMemoryArtifactWriter",
    "FilesystemArtifactWriter",
    "InMemoryWorkflowEventStore",
    "FilesystemWorkflowEventStore",
    # Configuration
    "ServerSettings",
    "load_workflow_config",
    "workflow_config_from_dict",
]
