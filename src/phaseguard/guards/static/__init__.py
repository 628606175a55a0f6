"""
Static guards - Pure structural checks on artifact content.

These guards are fast, deterministic, and look only at the artifact itself.
"""

from phaseguard.guards.static.content import (
    ContentLengthGuard,
    JsonFormatGuard,
    PlaceholderGuard,
)

__all__ = [
    "ContentLengthGuard",
    "JsonFormatGuard",
    "PlaceholderGuard",
]
