"""
Composite guards - Guard composition patterns.

These guards combine multiple guards using logical operators.
"""

from phaseguard.guards.composite.base import CompositeGuard

__all__ = [
    "CompositeGuard",
]
