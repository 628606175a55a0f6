"""
Content guards.

Pure guards with no I/O dependencies - they only inspect artifact content.
"""

import json
import re

from phaseguard.domain.interfaces import GuardInterface
from phaseguard.domain.models import ArtifactFormat, GuardResult, OutputArtifact
from phaseguard.domain.phases import Phase

DEFAULT_MIN_CONTENT_LENGTH = 10


def _label(artifact: OutputArtifact) -> str:
    return f"'{artifact.path}'" if artifact.path else "(unnamed)"


class ContentLengthGuard(GuardInterface):
    """Rejects empty artifacts and artifacts shorter than a minimum length."""

    def __init__(self, min_length: int = DEFAULT_MIN_CONTENT_LENGTH):
        """
        Args:
            min_length: Minimum number of characters after stripping whitespace
        """
        self.min_length = min_length

    def validate(self, artifact: OutputArtifact, phase: Phase) -> GuardResult:
        content = artifact.content.strip()
        if not content:
            return GuardResult(
                passed=False, feedback=f"Artifact {_label(artifact)} has empty content"
            )
        if len(content) < self.min_length:
            return GuardResult(
                passed=False,
                feedback=(
                    f"Artifact {_label(artifact)} content too short "
                    f"({len(content)} chars, minimum {self.min_length})"
                ),
            )
        return GuardResult(passed=True, feedback="Content length ok")


class JsonFormatGuard(GuardInterface):
    """
    Validates that JSON-format artifacts parse.

    A parse failure is fatal: the submission is malformed rather than weak.
    Artifacts in other formats pass unchanged.
    """

    def validate(self, artifact: OutputArtifact, phase: Phase) -> GuardResult:
        if artifact.format is not ArtifactFormat.JSON:
            return GuardResult(passed=True, feedback="Not a JSON artifact")
        try:
            json.loads(artifact.content)
        except json.JSONDecodeError as e:
            return GuardResult(
                passed=False,
                feedback=f"Artifact {_label(artifact)} is not valid JSON: {e}",
                fatal=True,
            )
        return GuardResult(passed=True, feedback="JSON valid")


# A single line that starts with a placeholder marker, e.g. "TODO: fill in".
_PLACEHOLDER = re.compile(
    r"(?:todo|tbd|fixme|placeholder|lorem ipsum|n/a)\b[^\n]{0,60}|(?:\.{3,}|…)\s*",
    re.IGNORECASE,
)


class PlaceholderGuard(GuardInterface):
    """Rejects artifacts that are nothing but a placeholder marker."""

    def validate(self, artifact: OutputArtifact, phase: Phase) -> GuardResult:
        if _PLACEHOLDER.fullmatch(artifact.content.strip()):
            return GuardResult(
                passed=False,
                feedback=f"Artifact {_label(artifact)} contains only placeholder text",
            )
        return GuardResult(passed=True, feedback="No placeholder content")
