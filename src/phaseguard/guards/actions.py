"""
Action classification for the safety gate.

Agents describe actions in free text ("edit", "Modifying config", "read file").
The classifier maps that text to READ, MODIFY or OTHER. Modification wins
when both kinds of verb appear, so "read and update" is treated as a write.
"""

import re
from collections.abc import Iterable

from phaseguard.domain.interfaces import ActionClassifierInterface
from phaseguard.domain.models import ActionKind

# Verb stems; a word matches when it starts with one of them.
DEFAULT_MODIFY_VERBS: frozenset[str] = frozenset(
    {
        "edit",
        "writ",
        "modif",
        "creat",
        "delet",
        "remov",
        "updat",
        "refactor",
        "chang",
        "renam",
        "overwrit",
        "append",
        "patch",
        "replac",
        "insert",
        "save",
    }
)
DEFAULT_READ_VERBS: frozenset[str] = frozenset(
    {"read", "view", "open", "inspect", "examin", "review", "analy"}
)

_WORD = re.compile(r"[a-z]+")


class KeywordActionClassifier(ActionClassifierInterface):
    """Classifies actions by verb stems found in the description."""

    def __init__(
        self,
        modify_verbs: Iterable[str] = DEFAULT_MODIFY_VERBS,
        read_verbs: Iterable[str] = DEFAULT_READ_VERBS,
    ):
        self.modify_verbs = tuple(sorted(v.lower() for v in modify_verbs))
        self.read_verbs = tuple(sorted(v.lower() for v in read_verbs))

    def classify(self, action: str) -> ActionKind:
        words = _WORD.findall(action.lower())
        if any(word.startswith(self.modify_verbs) for word in words):
            return ActionKind.MODIFY
        if any(word.startswith(self.read_verbs) for word in words):
            return ActionKind.READ
        return ActionKind.OTHER
