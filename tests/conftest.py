"""Shared pytest fixtures for phaseguard tests."""

from datetime import date

import pytest

from phaseguard.application.session_store import SessionStore
from phaseguard.application.workflow import WorkflowOrchestrator
from phaseguard.domain.models import (
    ArtifactFormat,
    GuidanceMode,
    OutputArtifact,
    WorkflowConfiguration,
)
from phaseguard.domain.phases import Phase
from phaseguard.infrastructure.persistence.memory import InMemoryArtifactWriter
from phaseguard.infrastructure.persistence.workflow_events import InMemoryWorkflowEventStore

FIXED_DATE = date(2025, 1, 15)


@pytest.fixture
def memory_writer() -> InMemoryArtifactWriter:
    """Create an in-memory artifact writer."""
    return InMemoryArtifactWriter()


@pytest.fixture
def event_store() -> InMemoryWorkflowEventStore:
    """Create an in-memory workflow event store."""
    return InMemoryWorkflowEventStore()


@pytest.fixture
def orchestrator(
    memory_writer: InMemoryArtifactWriter, event_store: InMemoryWorkflowEventStore
) -> WorkflowOrchestrator:
    """Orchestrator over in-memory adapters with a fixed date for file names."""
    return WorkflowOrchestrator(memory_writer, event_store, today=lambda: FIXED_DATE)


@pytest.fixture
def three_phase_config() -> WorkflowConfiguration:
    """Audit, write, present; directive guidance."""
    return WorkflowConfiguration(
        selected_phases=(Phase.AUDIT_INVENTORY, Phase.WRITE_OR_REFACTOR, Phase.PRESENT),
        guidance_mode=GuidanceMode.DIRECTIVE,
    )


@pytest.fixture
def store() -> SessionStore:
    """Session store with a live default session."""
    store = SessionStore()
    store.start_session("Refactor the payment module")
    return store


@pytest.fixture
def audit_artifact() -> OutputArtifact:
    """A well-formed audit artifact."""
    return OutputArtifact(
        path="audit.md",
        format=ArtifactFormat.MARKDOWN,
        content="# Audit\n\nRead payments.py; the changes needed are listed below.",
        description="Audit notes",
    )


@pytest.fixture
def audit_output() -> dict:
    """Submitted work that satisfies the audit minimums."""
    return {"files_analyzed": 1, "changes_identified": 1}
