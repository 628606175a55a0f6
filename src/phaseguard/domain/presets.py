"""
Workflow presets.

A preset is a named (phases, iteration limits) pair. Presets only ever seed a
WorkflowConfiguration; nothing at runtime depends on which preset was used.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType

from phaseguard.domain.models import (
    DEFAULT_ITERATION_LIMITS,
    DEFAULT_SELECTED_PHASES,
    GuidanceMode,
    WorkflowConfiguration,
    WorkflowType,
)
from phaseguard.domain.phases import Phase


@dataclass(frozen=True)
class WorkflowPreset:
    """Phase selection and iteration limits for one workflow type."""

    workflow_type: WorkflowType
    phases: tuple[Phase, ...]
    iteration_limits: Mapping[Phase, int]
    description: str

    def to_configuration(
        self, guidance_mode: GuidanceMode = GuidanceMode.DIRECTIVE
    ) -> WorkflowConfiguration:
        return WorkflowConfiguration(
            selected_phases=self.phases,
            iteration_limits=self.iteration_limits,
            guidance_mode=guidance_mode,
        )


def _limits(test: int, lint: int, iterate: int) -> Mapping[Phase, int]:
    return MappingProxyType({Phase.TEST: test, Phase.LINT: lint, Phase.ITERATE: iterate})


PRESETS: dict[WorkflowType, WorkflowPreset] = {
    WorkflowType.REFACTOR: WorkflowPreset(
        WorkflowType.REFACTOR,
        (
            Phase.AUDIT_INVENTORY,
            Phase.COMPARE_ANALYZE,
            Phase.QUESTION_DETERMINE,
            Phase.WRITE_OR_REFACTOR,
            Phase.TEST,
            Phase.LINT,
            Phase.ITERATE,
            Phase.PRESENT,
        ),
        _limits(test=3, lint=5, iterate=10),
        "Improve existing code structure without changing behaviour",
    ),
    WorkflowType.FEATURE: WorkflowPreset(
        WorkflowType.FEATURE,
        (
            Phase.AUDIT_INVENTORY,
            Phase.COMPARE_ANALYZE,
            Phase.QUESTION_DETERMINE,
            Phase.WRITE_OR_REFACTOR,
            Phase.TEST,
            Phase.LINT,
            Phase.PRESENT,
        ),
        _limits(test=5, lint=5, iterate=10),
        "Add new functionality with integrated testing",
    ),
    WorkflowType.TEST: WorkflowPreset(
        WorkflowType.TEST,
        (
            Phase.AUDIT_INVENTORY,
            Phase.WRITE_OR_REFACTOR,
            Phase.TEST,
            Phase.ITERATE,
            Phase.PRESENT,
        ),
        _limits(test=5, lint=3, iterate=8),
        "Write or improve test coverage",
    ),
    WorkflowType.TDD: WorkflowPreset(
        WorkflowType.TDD,
        (
            Phase.AUDIT_INVENTORY,
            Phase.QUESTION_DETERMINE,
            Phase.TEST,
            Phase.WRITE_OR_REFACTOR,
            Phase.LINT,
            Phase.ITERATE,
            Phase.PRESENT,
        ),
        _limits(test=10, lint=5, iterate=15),
        "Red-green-refactor: write failing tests first, then implement",
    ),
    WorkflowType.CUSTOM: WorkflowPreset(
        WorkflowType.CUSTOM,
        DEFAULT_SELECTED_PHASES,
        DEFAULT_ITERATION_LIMITS,
        "User-selected phases and limits",
    ),
}


def get_preset(workflow_type: WorkflowType | str) -> WorkflowPreset:
    """
    Look up a preset.

    Raises:
        ValueError: If the workflow type is unknown
    """
    return PRESETS[WorkflowType(workflow_type)]


def configuration_for(
    workflow_type: WorkflowType | str,
    guidance_mode: GuidanceMode = GuidanceMode.DIRECTIVE,
    **overrides: object,
) -> WorkflowConfiguration:
    """Build a configuration from a preset, replacing any given fields."""
    config = get_preset(workflow_type).to_configuration(guidance_mode)
    return replace(config, **overrides) if overrides else config


# Checked in order; the first family with a matching keyword wins.
_DETECTION_KEYWORDS: tuple[tuple[WorkflowType, tuple[str, ...]], ...] = (
    (WorkflowType.TDD, ("tdd", "test-driven", "test driven")),
    (WorkflowType.REFACTOR, ("refactor", "refactoring", "restructure", "clean up", "cleanup")),
    (WorkflowType.TEST, ("test", "tests", "testing", "coverage")),
    (WorkflowType.FEATURE, ("add", "implement", "feature", "build", "create")),
)


def detect_workflow_type(task: str) -> WorkflowType | None:
    """
    Suggest a workflow type from a task description.

    Keyword heuristic only; the result is a suggestion, never a decision.
    """
    text = task.lower()
    for workflow_type, keywords in _DETECTION_KEYWORDS:
        for keyword in keywords:
            if re.search(rf"\b{re.escape(keyword)}\b", text):
                return workflow_type
    return None
