"""
Per-phase validation criteria.

Criteria are derived, never stored: the same phase under the same
configuration always yields the same criteria.
"""

from collections.abc import Mapping, Sized
from types import MappingProxyType
from typing import Any

from phaseguard.domain.models import ValidationCriteria, WorkflowConfiguration
from phaseguard.domain.naming import phase_file_stem
from phaseguard.domain.phases import WORKABLE_PHASES, Phase

MINIMUM_REQUIREMENTS: dict[Phase, Mapping[str, int | bool]] = {
    Phase.AUDIT_INVENTORY: {"files_analyzed": 1, "changes_identified": 1},
    Phase.COMPARE_ANALYZE: {"approaches_considered": 2, "recommendation_made": True},
    Phase.QUESTION_DETERMINE: {"implementation_steps": 1, "success_criteria_defined": True},
    Phase.WRITE_OR_REFACTOR: {"files_modified": 1},
    Phase.TEST: {"tests_run": 1, "test_results_documented": True},
    Phase.LINT: {"lint_checks_run": 1, "errors_documented": True},
    Phase.ITERATE: {"fixes_applied": 1, "verification_run": True},
    Phase.PRESENT: {"summary_provided": True},
}

BLOCKING_MESSAGES: dict[Phase, tuple[str, ...]] = {
    Phase.AUDIT_INVENTORY: (
        "Analyze at least one file before moving on",
        "List every change you intend to make",
    ),
    Phase.COMPARE_ANALYZE: (
        "Compare at least two approaches",
        "State which approach you recommend",
    ),
    Phase.QUESTION_DETERMINE: (
        "Write down the implementation steps",
        "Define how success will be verified",
    ),
    Phase.WRITE_OR_REFACTOR: ("Modify at least one file, reading it first",),
    Phase.TEST: ("Run the tests and document their results",),
    Phase.LINT: ("Run at least one lint or type check and document its errors",),
    Phase.ITERATE: ("Apply fixes and re-run verification",),
    Phase.PRESENT: ("Provide a summary of the work",),
}

COMPLETION_CRITERIA: dict[Phase, tuple[str, ...]] = {
    Phase.AUDIT_INVENTORY: (
        "All relevant files have been read",
        "Dependencies and risks are recorded",
        "Every required change is listed",
    ),
    Phase.COMPARE_ANALYZE: (
        "Alternatives are compared on the same criteria",
        "A recommendation is made",
    ),
    Phase.QUESTION_DETERMINE: (
        "Open questions are answered or recorded as assumptions",
        "The implementation plan is final",
    ),
    Phase.WRITE_OR_REFACTOR: ("All planned changes are applied",),
    Phase.TEST: ("Test results are recorded, including failures",),
    Phase.LINT: ("Lint errors and warnings are recorded",),
    Phase.ITERATE: ("Recorded failures are fixed and verified",),
    Phase.PRESENT: ("The summary covers changes, results and follow-ups",),
}


def criteria_for(
    phase: Phase, config: WorkflowConfiguration | None = None
) -> ValidationCriteria:
    """
    Derive the criteria a submission for ``phase`` must satisfy.

    A numbered output file is expected only for workable phases and only when
    the configuration asks for phase artifacts.
    """
    expected_files: tuple[str, ...] = ()
    if (
        config is not None
        and config.output_preferences.create_phase_artifacts
        and phase in WORKABLE_PHASES
    ):
        expected_files = (phase_file_stem(phase),)
    return ValidationCriteria(
        phase=phase,
        minimum_requirements=MappingProxyType(dict(MINIMUM_REQUIREMENTS.get(phase, {}))),
        expected_files=expected_files,
        blocking_messages=BLOCKING_MESSAGES.get(phase, ()),
        completion_criteria=COMPLETION_CRITERIA.get(phase, ()),
    )


def _camel_case(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def lookup(work: Mapping[str, Any], key: str) -> Any:
    """Read a requirement from submitted work, accepting snake_case or camelCase keys."""
    if key in work:
        return work[key]
    return work.get(_camel_case(key))


def _as_count(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return int(bool(value))
    if isinstance(value, int | float):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return int(text)
        return 1 if text else 0
    if isinstance(value, Sized):
        return len(value)
    return 0


def check_requirement(
    key: str, expected: int | bool, work: Mapping[str, Any]
) -> tuple[bool, str]:
    """
    Compare one minimum requirement against submitted work.

    Numeric minimums compare ``actual >= expected`` (collections count their
    length); booleans compare truthiness.

    Returns:
        (satisfied, message listing actual vs. required)
    """
    value = lookup(work, key)
    if isinstance(expected, bool):
        actual_flag = bool(value)
        ok = actual_flag == expected
        return ok, f"{key}: {actual_flag} (required {expected})"
    actual = _as_count(value)
    ok = actual >= expected
    return ok, f"{key}: {actual} (required >= {expected})"
