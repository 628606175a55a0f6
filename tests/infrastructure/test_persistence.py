"""Tests for the filesystem and in-memory persistence adapters."""

import json
import os
from pathlib import Path

import pytest

from phaseguard.domain.exceptions import ConfigurationError
from phaseguard.domain.workflow_event import WorkflowEvent, WorkflowEventType
from phaseguard.infrastructure.persistence import (
    FilesystemArtifactWriter,
    FilesystemWorkflowEventStore,
    InMemoryArtifactWriter,
    InMemoryWorkflowEventStore,
)
from phaseguard.infrastructure.persistence.filesystem import WRITE_PROBE_NAME


def _event(event_id: str, session_id: str = "s-1", **kwargs) -> WorkflowEvent:
    defaults = {
        "event_type": WorkflowEventType.PHASE_FAIL,
        "phase": "LINT",
        "verdict": "FAIL",
        "attempt": 1,
        "summary": "lint_checks_run: 0",
        "created_at": f"2025-01-15T10:00:0{event_id[-1]}+00:00",
    }
    defaults.update(kwargs)
    return WorkflowEvent(event_id=event_id, session_id=session_id, **defaults)


class TestFilesystemArtifactWriter:
    def test_prepare_creates_task_directory(self, tmp_path: Path) -> None:
        writer = FilesystemArtifactWriter(tmp_path)

        location = writer.prepare("out", "my-task")

        assert Path(location) == tmp_path / "out" / "my-task"
        assert Path(location).is_dir()
        assert not (Path(location) / WRITE_PROBE_NAME).exists()

    def test_absolute_output_directory(self, tmp_path: Path) -> None:
        writer = FilesystemArtifactWriter("/nonexistent-base")

        location = writer.prepare(str(tmp_path / "abs"), None)

        assert Path(location) == tmp_path / "abs"

    def test_write_is_readable(self, tmp_path: Path) -> None:
        writer = FilesystemArtifactWriter(tmp_path)
        directory = writer.prepare("out", "task")

        path = writer.write(directory, "01-audit-inventory.md", "# Audit")

        assert Path(path).read_text(encoding="utf-8") == "# Audit"
        assert not Path(path + ".tmp").exists()

    def test_write_overwrites(self, tmp_path: Path) -> None:
        writer = FilesystemArtifactWriter(tmp_path)
        directory = writer.prepare("out", None)

        writer.write(directory, "05-test.md", "first")
        path = writer.write(directory, "05-test.md", "second")

        assert Path(path).read_text(encoding="utf-8") == "second"

    def test_unusable_directory_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")

        with pytest.raises(ConfigurationError, match="not writable"):
            FilesystemArtifactWriter(tmp_path).prepare("blocker", "task")

    @pytest.mark.skipif(
        os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions as non-root"
    )
    def test_read_only_directory_raises(self, tmp_path: Path) -> None:
        read_only = tmp_path / "ro"
        read_only.mkdir()
        read_only.chmod(0o500)
        try:
            with pytest.raises(ConfigurationError):
                FilesystemArtifactWriter(tmp_path).prepare("ro", None)
        finally:
            read_only.chmod(0o700)


class TestInMemoryArtifactWriter:
    def test_records_files(self) -> None:
        writer = InMemoryArtifactWriter()

        location = writer.write(writer.prepare("out", "task"), "05-test.md", "ok")

        assert location == "out/task/05-test.md"
        assert writer.files == {"out/task/05-test.md": "ok"}

    def test_simulated_failures(self) -> None:
        writer = InMemoryArtifactWriter(fail_on=("05-test.md",))

        with pytest.raises(OSError):
            writer.write("out", "05-test.md", "ok")


class TestWorkflowEventStores:
    @pytest.fixture(params=["memory", "filesystem"])
    def event_store(self, request, tmp_path: Path):
        if request.param == "memory":
            return InMemoryWorkflowEventStore()
        return FilesystemWorkflowEventStore(tmp_path)

    def test_events_come_back_in_time_order(self, event_store) -> None:
        event_store.store_event(_event("e-2"))
        event_store.store_event(_event("e-1"))

        assert [e.event_id for e in event_store.get_events("s-1")] == ["e-1", "e-2"]

    def test_filter_by_type(self, event_store) -> None:
        event_store.store_event(_event("e-1"))
        event_store.store_event(
            _event("e-2", event_type=WorkflowEventType.ESCALATE, trigger="iteration_limit")
        )

        escalations = event_store.get_escalation_events("s-1")

        assert [e.event_id for e in escalations] == ["e-2"]
        assert escalations[0].trigger == "iteration_limit"

    def test_unknown_session_is_empty(self, event_store) -> None:
        assert event_store.get_events("missing") == []

    def test_round_trip_keeps_every_field(self, event_store) -> None:
        event = _event("e-1")
        event_store.store_event(event)

        assert event_store.get_events("s-1") == [event]


def test_filesystem_store_writes_one_jsonl_file_per_session(tmp_path: Path) -> None:
    store = FilesystemWorkflowEventStore(tmp_path)

    store.store_event(_event("e-1", session_id="s-1"))
    store.store_event(_event("e-2", session_id="s-1"))
    store.store_event(_event("e-3", session_id="s-2"))

    lines = (tmp_path / "events" / "s-1.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0])["event_type"] == "PHASE_FAIL"
    assert (tmp_path / "events" / "s-2.jsonl").exists()
