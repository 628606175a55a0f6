"""
SafetyGate: refuses file modifications that were not preceded by a read.

The rule is independent of the current phase. A denied action records
nothing, so retrying the same action after a read succeeds.
"""

import logging

from phaseguard.application.event_emitter import WorkflowEventEmitter
from phaseguard.application.session_store import SessionStore
from phaseguard.domain.exceptions import SafetyViolation
from phaseguard.domain.interfaces import ActionClassifierInterface
from phaseguard.domain.models import ActionCheck, ActionKind
from phaseguard.guards.actions import KeywordActionClassifier

logger = logging.getLogger(__name__)

READ_BEFORE_WRITE = "read before write"


class SafetyGate:
    """Enforces read-before-write over the live session's file history."""

    def __init__(
        self,
        store: SessionStore,
        classifier: ActionClassifierInterface | None = None,
        emitter: WorkflowEventEmitter | None = None,
    ):
        """
        Args:
            store: Session store holding the file history
            classifier: Decides whether an action reads or modifies
            emitter: Optional event emitter for SAFETY_DENIED events
        """
        self._store = store
        self._classifier = classifier or KeywordActionClassifier()
        self._emitter = emitter

    def check(self, action: str, path: str) -> ActionCheck:
        """
        Decide whether ``action`` on ``path`` may proceed, recording it if so.

        Raises:
            NoActiveSession: If no session is live
        """
        session = self._store.require_session()
        kind = self._classifier.classify(action)

        if kind is ActionKind.MODIFY:
            if not self._store.file_history(path).has_been_read:
                violation = SafetyViolation(path, action)
                logger.warning(
                    "Denied '%s' on %s in session %s: %s",
                    action,
                    path,
                    session.session_id,
                    READ_BEFORE_WRITE,
                )
                if self._emitter is not None:
                    self._emitter.safety_denied(session.session_id, path, action)
                return ActionCheck(
                    allowed=False,
                    action=action,
                    path=path,
                    kind=kind,
                    reason=violation.message,
                    resolution=violation.resolution,
                )
            self._store.record_file_modified(path)
            return ActionCheck(
                allowed=True, action=action, path=path, kind=kind, reason="File was read first"
            )

        if kind is ActionKind.READ:
            self._store.record_file_read(path)
            return ActionCheck(allowed=True, action=action, path=path, kind=kind, reason="Read recorded")

        return ActionCheck(
            allowed=True, action=action, path=path, kind=kind, reason="Action does not touch file content"
        )

    def enforce(self, action: str, path: str) -> ActionCheck:
        """
        Like check(), but raise instead of returning a denial.

        Raises:
            SafetyViolation: If the action modifies an unread file
        """
        result = self.check(action, path)
        if not result.allowed:
            raise SafetyViolation(path, action)
        return result
