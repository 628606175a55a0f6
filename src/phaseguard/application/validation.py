"""
ValidationEngine: decides whether a phase submission meets its criteria.

Pure with respect to the session: it never mutates state. Recording the
outcome and counting the attempt is the caller's job.
"""

from collections.abc import Collection, Iterable, Mapping
from typing import Any

from phaseguard.domain.criteria import check_requirement, criteria_for
from phaseguard.domain.interfaces import GuardInterface
from phaseguard.domain.models import (
    OutputArtifact,
    ValidationCriteria,
    ValidationReport,
    WorkflowConfiguration,
)
from phaseguard.domain.naming import matches_expected_file
from phaseguard.domain.phases import Phase
from phaseguard.guards import KeywordRelevanceGuard, default_artifact_guard


def _unique(items: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


class ValidationEngine:
    """
    Validates submitted work and artifacts against per-phase criteria.

    Every artifact goes through the structural guard first and then the
    phase's relevance guard. Relevance guards are swappable per phase.
    """

    def __init__(
        self,
        artifact_guard: GuardInterface | None = None,
        relevance_guards: Mapping[Phase, GuardInterface] | None = None,
        default_relevance: GuardInterface | None = None,
    ):
        """
        Args:
            artifact_guard: Structural checks applied to every artifact
            relevance_guards: Phase-specific content predicates
            default_relevance: Predicate for phases without a specific one
        """
        self._artifact_guard = artifact_guard or default_artifact_guard()
        self._relevance_guards = dict(relevance_guards or {})
        self._default_relevance = default_relevance or KeywordRelevanceGuard()

    def set_relevance_guard(self, phase: Phase, guard: GuardInterface) -> None:
        self._relevance_guards[phase] = guard

    def relevance_guard(self, phase: Phase) -> GuardInterface:
        return self._relevance_guards.get(phase, self._default_relevance)

    def validate(
        self,
        phase: Phase,
        submitted_work: Mapping[str, Any],
        artifacts: Iterable[OutputArtifact],
        created_files: Iterable[str] = (),
        criteria: ValidationCriteria | None = None,
        config: WorkflowConfiguration | None = None,
        waived: Collection[str] = (),
    ) -> ValidationReport:
        """
        Validate one submission.

        Args:
            phase: Phase the work was submitted for
            submitted_work: Structured output payload of the phase
            artifacts: Evidence artifacts
            created_files: File identifiers the agent claims to have created
            criteria: Explicit criteria; derived from phase and config when omitted
            config: Session configuration used to derive criteria
            waived: Requirement keys or file identifiers not enforced

        Returns:
            ValidationReport; is_complete iff nothing failed
        """
        criteria = criteria or criteria_for(phase, config)
        artifacts = tuple(artifacts)
        passed: list[str] = []
        failed: list[str] = []
        failed_requirements: list[str] = []
        next_steps: list[str] = []

        for key, expected in criteria.minimum_requirements.items():
            if key in waived:
                passed.append(f"{key}: waived")
                continue
            ok, message = check_requirement(key, expected, submitted_work)
            if ok:
                passed.append(message)
            else:
                failed.append(message)
                failed_requirements.append(key)
                next_steps.append(
                    f"Set '{key}' to true"
                    if isinstance(expected, bool)
                    else f"Report at least {expected} for '{key}'"
                )

        claimed = [*created_files, *(a.path for a in artifacts if a.path)]
        for expected_file in criteria.expected_files:
            if expected_file in waived:
                passed.append(f"Output file {expected_file}: waived")
            elif artifacts or any(matches_expected_file(c, expected_file) for c in claimed):
                passed.append(f"Output file {expected_file}: provided")
            else:
                failed.append(f"Missing expected output file '{expected_file}'")
                failed_requirements.append(expected_file)
                next_steps.append(
                    f"Submit an output artifact for {phase.value} "
                    f"(saved as {expected_file}-*) or list it in createdFiles"
                )

        fatal = False
        for artifact in artifacts:
            result = self._artifact_guard.validate(artifact, phase)
            if result.passed:
                result = self.relevance_guard(phase).validate(artifact, phase)
            if result.passed:
                passed.append(f"Artifact '{artifact.path}' accepted")
            else:
                failed.append(result.feedback)
                fatal = fatal or result.fatal
                next_steps.append(f"Fix and resubmit: {result.feedback}")

        failed_unique = _unique(failed)
        return ValidationReport(
            phase=phase,
            is_complete=not failed_unique,
            passed=_unique(passed),
            failed=failed_unique,
            blocking_messages=criteria.blocking_messages if failed_unique else (),
            next_steps=_unique(next_steps),
            failed_requirements=_unique(failed_requirements),
            fatal=fatal,
        )
