"""
Relevance guards - Per-phase content predicates.

Swappable: the validation engine takes any GuardInterface per phase.
"""

from phaseguard.guards.relevance.keywords import PHASE_KEYWORDS, KeywordRelevanceGuard

__all__ = [
    "PHASE_KEYWORDS",
    "KeywordRelevanceGuard",
]
