"""
Keyword relevance guard.

A deliberately loose check that an artifact talks about the work of its
phase. It catches arbitrary prose submitted as evidence; it does not grade
correctness, and synonyms outside the keyword lists are not recognised.
"""

from collections.abc import Mapping

from phaseguard.domain.interfaces import GuardInterface
from phaseguard.domain.models import GuardResult, OutputArtifact
from phaseguard.domain.phases import Phase

# Lower-case substrings; any one of them is enough.
PHASE_KEYWORDS: dict[Phase, tuple[str, ...]] = {
    Phase.AUDIT_INVENTORY: (
        "audit",
        "inventory",
        "file",
        "change",
        "dependenc",
        "analy",
        "risk",
    ),
    Phase.COMPARE_ANALYZE: (
        "approach",
        "option",
        "alternative",
        "compar",
        "trade-off",
        "tradeoff",
        "recommend",
    ),
    Phase.QUESTION_DETERMINE: (
        "question",
        "assum",
        "step",
        "plan",
        "criteri",
        "clarif",
    ),
    Phase.WRITE_OR_REFACTOR: (
        "change",
        "modif",
        "implement",
        "refactor",
        "file",
        "updat",
        "added",
    ),
    Phase.TEST: ("test", "pass", "fail", "coverage", "assert", "suite"),
    Phase.LINT: (
        "lint",
        "error",
        "warning",
        "type check",
        "style",
        "format",
        "mypy",
        "ruff",
    ),
    Phase.ITERATE: ("fix", "resolv", "retest", "re-run", "rerun", "verif"),
    Phase.PRESENT: ("summary", "summar", "change", "result", "recommend"),
}


class KeywordRelevanceGuard(GuardInterface):
    """
    Requires an artifact to mention at least one keyword of its phase.

    Phases without keywords always pass.
    """

    def __init__(self, keywords: Mapping[Phase, tuple[str, ...]] | None = None):
        """
        Args:
            keywords: Phase -> lower-case keywords; defaults to PHASE_KEYWORDS
        """
        self.keywords = dict(PHASE_KEYWORDS if keywords is None else keywords)

    def validate(self, artifact: OutputArtifact, phase: Phase) -> GuardResult:
        keywords = self.keywords.get(phase, ())
        if not keywords:
            return GuardResult(passed=True, feedback="No relevance keywords for phase")
        content = artifact.content.lower()
        if any(keyword in content for keyword in keywords):
            return GuardResult(passed=True, feedback="Content relevant to phase")
        return GuardResult(
            passed=False,
            feedback=(
                f"Artifact '{artifact.path}' does not look like {phase.value} output; "
                f"mention at least one of: {', '.join(keywords)}"
            ),
        )
