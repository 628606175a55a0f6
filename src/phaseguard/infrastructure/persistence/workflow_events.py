"""Workflow event store implementations."""

import json
from pathlib import Path
from typing import Any

from phaseguard.domain.interfaces import WorkflowEventStoreInterface
from phaseguard.domain.workflow_event import WorkflowEvent, WorkflowEventType


class InMemoryWorkflowEventStore(WorkflowEventStoreInterface):
    """In-memory implementation for testing."""

    def __init__(self) -> None:
        self._events: list[WorkflowEvent] = []

    def store_event(self, event: WorkflowEvent) -> str:
        self._events.append(event)
        return event.event_id

    def get_events(
        self,
        session_id: str,
        event_type: WorkflowEventType | None = None,
    ) -> list[WorkflowEvent]:
        return sorted(
            [
                e
                for e in self._events
                if e.session_id == session_id
                and (event_type is None or e.event_type == event_type)
            ],
            key=lambda e: e.created_at,
        )

    def get_escalation_events(self, session_id: str) -> list[WorkflowEvent]:
        return self.get_events(session_id, WorkflowEventType.ESCALATE)


class FilesystemWorkflowEventStore(WorkflowEventStoreInterface):
    """Filesystem implementation storing one JSONL file per session."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = Path(base_path)
        self.events_dir = self.base_path / "events"
        self.events_dir.mkdir(parents=True, exist_ok=True)

    def _get_session_file(self, session_id: str) -> Path:
        return self.events_dir / f"{session_id}.jsonl"

    def store_event(self, event: WorkflowEvent) -> str:
        path = self._get_session_file(event.session_id)
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(self._event_to_dict(event)) + "\n")
        return event.event_id

    def get_events(
        self,
        session_id: str,
        event_type: WorkflowEventType | None = None,
    ) -> list[WorkflowEvent]:
        path = self._get_session_file(session_id)
        if not path.exists():
            return []
        events: list[WorkflowEvent] = []
        with open(path, encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                event = self._dict_to_event(json.loads(line))
                if event_type and event.event_type != event_type:
                    continue
                events.append(event)
        return sorted(events, key=lambda e: e.created_at)

    def get_escalation_events(self, session_id: str) -> list[WorkflowEvent]:
        return self.get_events(session_id, WorkflowEventType.ESCALATE)

    def _event_to_dict(self, event: WorkflowEvent) -> dict[str, Any]:
        """Serialize event to dict."""
        return {
            "event_id": event.event_id,
            "event_type": event.event_type.value,
            "session_id": event.session_id,
            "phase": event.phase,
            "verdict": event.verdict,
            "attempt": event.attempt,
            "trigger": event.trigger,
            "summary": event.summary,
            "created_at": event.created_at,
        }

    def _dict_to_event(self, data: dict[str, Any]) -> WorkflowEvent:
        """Deserialize dict to event."""
        return WorkflowEvent(
            event_id=data["event_id"],
            event_type=WorkflowEventType(data["event_type"]),
            session_id=data["session_id"],
            phase=data.get("phase"),
            verdict=data.get("verdict"),
            attempt=data.get("attempt"),
            trigger=data.get("trigger"),
            summary=data.get("summary", ""),
            created_at=data.get("created_at", ""),
        )
