"""
Base guard implementations and composition patterns.

CompositeGuard implements the Decorator pattern for guard composition.
"""

from phaseguard.domain.interfaces import GuardInterface
from phaseguard.domain.models import GuardResult, OutputArtifact
from phaseguard.domain.phases import Phase


class CompositeGuard(GuardInterface):
    """
    Logical AND of multiple guards. All must pass.

    Evaluates guards in order, short-circuits on first failure, so cheap
    structural checks run before content heuristics.
    """

    def __init__(self, *guards: GuardInterface):
        """
        Args:
            *guards: Guards to compose (evaluated in order)
        """
        self.guards = guards

    def validate(self, artifact: OutputArtifact, phase: Phase) -> GuardResult:
        """
        Validate artifact against all composed guards.

        Short-circuits on first failure.
        """
        for guard in self.guards:
            result = guard.validate(artifact, phase)
            if not result.passed:
                return result  # Short-circuit on failure
        return GuardResult(passed=True, feedback="All guards passed")
