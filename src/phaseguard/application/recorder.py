"""
ArtifactRecorder: persists validated phase outputs.

Each artifact of an accepted submission is written under a numbered name
(``NN-phase-name[-YYYY-MM-DD][-SS].ext``). A failed write is reported per
artifact and never aborts the submission.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from phaseguard.application.session_store import SessionStore
from phaseguard.domain.interfaces import ArtifactWriterInterface
from phaseguard.domain.models import (
    FailedArtifact,
    OutputArtifact,
    PhaseOutput,
    SavedArtifact,
    utcnow,
)
from phaseguard.domain.naming import numbered_file_name, sanitize_task_name
from phaseguard.domain.phases import Phase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordResult:
    """Outcome of recording one accepted submission."""

    phase_output: PhaseOutput
    saved: tuple[SavedArtifact, ...]
    failed: tuple[FailedArtifact, ...]


def _today() -> date:
    return utcnow().date()


class ArtifactRecorder:
    """Writes accepted artifacts through an ArtifactWriterInterface."""

    def __init__(
        self,
        store: SessionStore,
        writer: ArtifactWriterInterface,
        today: Callable[[], date] | None = None,
    ):
        """
        Args:
            store: Session store to record phase outputs in
            writer: Persistence adapter for artifact files
            today: Date source for date-stamped names
        """
        self._store = store
        self._writer = writer
        self._today = today or _today

    def prepare(self) -> str:
        """
        Resolve and verify the live session's output directory.

        Raises:
            ConfigurationError: If the directory is not writable
        """
        session = self._store.require_session()
        prefs = session.workflow_config.output_preferences
        task_dir = (
            sanitize_task_name(session.task_description)
            if prefs.create_task_subdirectory
            else None
        )
        location = self._writer.prepare(prefs.output_directory, task_dir)
        self._store.set_task_directory(location)
        logger.info("Artifacts for session %s go to %s", session.session_id, location)
        return location

    def record(
        self,
        phase: Phase,
        output: Mapping[str, Any],
        artifacts: Iterable[OutputArtifact],
    ) -> RecordResult:
        """Write the artifacts, then upsert the phase output with those that saved."""
        session = self._store.require_session()
        directory = session.task_directory or self.prepare()
        prefs = session.workflow_config.output_preferences
        stamp = self._today() if prefs.include_date else None

        saved: list[SavedArtifact] = []
        failed: list[FailedArtifact] = []
        for sequence, artifact in enumerate(artifacts):
            file_name = numbered_file_name(phase, artifact.format, stamp, sequence)
            try:
                location = self._writer.write(directory, file_name, artifact.content)
            except OSError as e:
                logger.warning("Could not save artifact %s as %s: %s", artifact.path, file_name, e)
                failed.append(FailedArtifact(source=artifact.path, error=str(e)))
                continue
            saved.append(
                SavedArtifact(
                    source=artifact.path,
                    path=location,
                    format=artifact.format,
                    description=artifact.description,
                    saved_at=utcnow(),
                )
            )

        phase_output = self._store.record_phase_output(phase, output, saved)
        return RecordResult(phase_output=phase_output, saved=tuple(saved), failed=tuple(failed))
