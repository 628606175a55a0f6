"""
Guards for PhaseGuard.

Guards are deterministic validators that return pass or fail with feedback.
They can be composed using CompositeGuard for layered validation.

Organization by validation profile:
- static/: Structural checks on artifact content (length, JSON, placeholders)
- relevance/: Per-phase content predicates
- composite/: Guard composition patterns
- actions: Read/modify classification for the safety gate
"""

from phaseguard.domain.interfaces import GuardInterface
from phaseguard.guards.actions import KeywordActionClassifier
from phaseguard.guards.composite import CompositeGuard
from phaseguard.guards.relevance import PHASE_KEYWORDS, KeywordRelevanceGuard
from phaseguard.guards.static import (
    ContentLengthGuard,
    JsonFormatGuard,
    PlaceholderGuard,
)


def default_artifact_guard() -> GuardInterface:
    """Structural checks every artifact must pass, cheapest first."""
    return CompositeGuard(ContentLengthGuard(), JsonFormatGuard(), PlaceholderGuard())


__all__ = [
    # Static guards (pure, fast)
    "ContentLengthGuard",
    "JsonFormatGuard",
    "PlaceholderGuard",
    # Relevance predicates (swappable per phase)
    "KeywordRelevanceGuard",
    "PHASE_KEYWORDS",
    # Composition patterns
    "CompositeGuard",
    "default_artifact_guard",
    # Safety gate input
    "KeywordActionClassifier",
]
