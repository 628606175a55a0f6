"""
Artifact file naming and output directory resolution.

Pure string/path arithmetic; nothing here touches the filesystem.
"""

import re
from datetime import date
from pathlib import PurePath

from phaseguard.domain.models import DEFAULT_OUTPUT_DIRECTORY, ArtifactFormat
from phaseguard.domain.phases import Phase, phase_file_number

_INVALID_CHARS = re.compile(r"[^a-z0-9\-_]")
_REPEATED_HYPHENS = re.compile(r"-+")
MAX_TASK_NAME_LENGTH = 60


def sanitize_task_name(task: str) -> str:
    """
    Turn a task description into a directory-safe name.

    Lower-cases, replaces whitespace with hyphens, strips anything outside
    ``[a-z0-9-_]`` and collapses/trims hyphens. Falls back to "task".
    """
    name = re.sub(r"\s+", "-", task.strip().lower())
    name = _INVALID_CHARS.sub("", name)
    name = _REPEATED_HYPHENS.sub("-", name).strip("-")
    name = name[:MAX_TASK_NAME_LENGTH].rstrip("-")
    return name or "task"


def phase_file_stem(phase: Phase) -> str:
    """``NN-phase-name``; the identifier a phase's artifact file starts with."""
    return f"{phase_file_number(phase):02d}-{phase.slug}"


def numbered_file_name(
    phase: Phase,
    fmt: ArtifactFormat,
    on_date: date | None = None,
    sequence: int = 0,
) -> str:
    """
    Build ``NN-phase-name[-YYYY-MM-DD][-SS].ext``.

    Args:
        phase: Phase the artifact belongs to
        fmt: Artifact format, selects the extension
        on_date: Date stamp, or None for an undated name
        sequence: 0 for the first artifact of a submission; later ones get a suffix
    """
    parts = [phase_file_stem(phase)]
    if on_date is not None:
        parts.append(on_date.isoformat())
    if sequence > 0:
        parts.append(f"{sequence:02d}")
    return f"{'-'.join(parts)}.{fmt.extension}"


def matches_expected_file(identifier: str, expected: str) -> bool:
    """True if a claimed file identifier satisfies an expected file stem."""
    name = PurePath(identifier).name
    return identifier == expected or name.startswith(expected)


def resolve_output_directory(output_directory: str | None, base_directory: str) -> str:
    """Resolve a configured output directory against the base directory."""
    target = PurePath(output_directory or DEFAULT_OUTPUT_DIRECTORY)
    if target.is_absolute():
        return str(target)
    return str(PurePath(base_directory) / target)
