"""
Phase model for structured agent workflows.

Phases are a closed enumeration. Their order is NOT intrinsic: each session
supplies its own ordered selection (see WorkflowConfiguration.selected_phases).
The only fixed ordering is the file-numbering table used to name persisted
artifacts.
"""

from dataclasses import dataclass
from enum import Enum


class Phase(str, Enum):
    """Named stage of an enforced task workflow."""

    PLANNING = "PLANNING"
    AUDIT_INVENTORY = "AUDIT_INVENTORY"
    COMPARE_ANALYZE = "COMPARE_ANALYZE"
    QUESTION_DETERMINE = "QUESTION_DETERMINE"
    WRITE_OR_REFACTOR = "WRITE_OR_REFACTOR"
    TEST = "TEST"
    LINT = "LINT"
    ITERATE = "ITERATE"
    PRESENT = "PRESENT"
    USER_INPUT_REQUIRED = "USER_INPUT_REQUIRED"

    @classmethod
    def parse(cls, value: "str | Phase") -> "Phase":
        """
        Parse a phase name, accepting legacy aliases and any casing.

        Raises:
            ValueError: If the name is not a known phase
        """
        if isinstance(value, Phase):
            return value
        normalized = str(value).strip().upper().replace("-", "_").replace(" ", "_")
        normalized = PHASE_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            known = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown phase '{value}'. Known phases: {known}") from None

    @property
    def slug(self) -> str:
        """Lower-case, hyphenated name used in file names."""
        return self.value.lower().replace("_", "-")


PHASE_ALIASES: dict[str, str] = {
    "WRITE_REFACTOR": "WRITE_OR_REFACTOR",
    "REFACTOR": "WRITE_OR_REFACTOR",
    "AUDIT": "AUDIT_INVENTORY",
    "INVENTORY": "AUDIT_INVENTORY",
    "QUESTION": "QUESTION_DETERMINE",
    "DETERMINE_PLAN": "QUESTION_DETERMINE",
}

# Fixed numbering for persisted artifact names. Lexicographic order of the
# zero-padded prefix equals workflow order within a task directory.
PHASE_FILE_NUMBERS: dict[Phase, int] = {
    Phase.PLANNING: 0,
    Phase.AUDIT_INVENTORY: 1,
    Phase.COMPARE_ANALYZE: 2,
    Phase.QUESTION_DETERMINE: 3,
    Phase.WRITE_OR_REFACTOR: 4,
    Phase.TEST: 5,
    Phase.LINT: 6,
    Phase.ITERATE: 7,
    Phase.PRESENT: 8,
}
UNNUMBERED_PHASE = 99

# Phases an agent can actually work through (and submit output for).
WORKABLE_PHASES: tuple[Phase, ...] = (
    Phase.AUDIT_INVENTORY,
    Phase.COMPARE_ANALYZE,
    Phase.QUESTION_DETERMINE,
    Phase.WRITE_OR_REFACTOR,
    Phase.TEST,
    Phase.LINT,
    Phase.ITERATE,
    Phase.PRESENT,
)


def phase_file_number(phase: Phase) -> int:
    return PHASE_FILE_NUMBERS.get(phase, UNNUMBERED_PHASE)


@dataclass(frozen=True)
class PhaseInfo:
    """Static descriptive data for a phase."""

    phase: Phase
    description: str
    objective: str
    expected_output: tuple[str, ...]
    estimated_minutes: int

    @property
    def guidance_tool(self) -> str:
        return f"{self.phase.value.lower()}_guidance"


PHASE_INFO: dict[Phase, PhaseInfo] = {
    Phase.PLANNING: PhaseInfo(
        Phase.PLANNING,
        "Initial workflow setup and planning",
        "Understand the task and the phases ahead",
        ("task", "selected_phases"),
        5,
    ),
    Phase.AUDIT_INVENTORY: PhaseInfo(
        Phase.AUDIT_INVENTORY,
        "Read, analyze code and catalog all required changes",
        "Understand the codebase and list every change needed",
        ("files_analyzed", "dependencies", "issues", "changes_identified", "risks"),
        25,
    ),
    Phase.COMPARE_ANALYZE: PhaseInfo(
        Phase.COMPARE_ANALYZE,
        "Evaluate different implementation approaches",
        "Weigh alternative approaches and pick one",
        ("approaches_considered", "comparison", "recommendation_made"),
        10,
    ),
    Phase.QUESTION_DETERMINE: PhaseInfo(
        Phase.QUESTION_DETERMINE,
        "Clarify ambiguities and finalize implementation strategy",
        "Resolve open questions and fix the step-by-step plan",
        ("questions", "assumptions", "implementation_steps", "success_criteria_defined"),
        15,
    ),
    Phase.WRITE_OR_REFACTOR: PhaseInfo(
        Phase.WRITE_OR_REFACTOR,
        "Implement the planned changes",
        "Apply the planned changes, reading each file before editing it",
        ("files_modified", "changes_description", "deviations"),
        30,
    ),
    Phase.TEST: PhaseInfo(
        Phase.TEST,
        "Execute tests and validate functionality",
        "Run the relevant test suites and record their results",
        ("tests_run", "test_results_documented", "failing_tests", "coverage"),
        15,
    ),
    Phase.LINT: PhaseInfo(
        Phase.LINT,
        "Verify code quality and standards",
        "Run linters and type checkers and record every issue",
        ("lint_checks_run", "errors_documented", "errors", "warnings"),
        10,
    ),
    Phase.ITERATE: PhaseInfo(
        Phase.ITERATE,
        "Fix issues found during testing and linting",
        "Resolve recorded failures and re-verify",
        ("fixes_applied", "verification_run", "remaining_issues"),
        20,
    ),
    Phase.PRESENT: PhaseInfo(
        Phase.PRESENT,
        "Summarize programming work and results",
        "Summarize what changed, why, and what is left",
        ("summary_provided", "detailed_changes", "recommendations"),
        10,
    ),
    Phase.USER_INPUT_REQUIRED: PhaseInfo(
        Phase.USER_INPUT_REQUIRED,
        "Escalation phase for user guidance",
        "Wait for a human decision",
        ("decision",),
        5,
    ),
}


def estimate_minutes(phases: "tuple[Phase, ...] | list[Phase]") -> int:
    """Rough duration estimate for a phase selection."""
    return sum(PHASE_INFO[p].estimated_minutes for p in phases)
