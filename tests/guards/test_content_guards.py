"""Tests for structural artifact guards and guard composition."""

import pytest

from phaseguard.domain.interfaces import GuardInterface
from phaseguard.domain.models import ArtifactFormat, GuardResult, OutputArtifact
from phaseguard.domain.phases import Phase
from phaseguard.guards import (
    CompositeGuard,
    ContentLengthGuard,
    JsonFormatGuard,
    PlaceholderGuard,
    default_artifact_guard,
)


def _artifact(content: str, fmt: ArtifactFormat = ArtifactFormat.MARKDOWN) -> OutputArtifact:
    return OutputArtifact(path="out.md", format=fmt, content=content)


class TestContentLengthGuard:
    def test_rejects_empty_content(self) -> None:
        result = ContentLengthGuard().validate(_artifact("   \n"), Phase.TEST)

        assert not result.passed
        assert result.feedback == "Artifact 'out.md' has empty content"

    def test_rejects_short_content(self) -> None:
        result = ContentLengthGuard().validate(_artifact("x"), Phase.TEST)

        assert not result.passed
        assert "too short (1 chars, minimum 10)" in result.feedback
        assert not result.fatal

    def test_accepts_long_enough_content(self) -> None:
        assert ContentLengthGuard().validate(_artifact("ten chars!"), Phase.TEST).passed

    def test_custom_minimum(self) -> None:
        assert not ContentLengthGuard(min_length=50).validate(_artifact("a" * 49), Phase.TEST).passed


class TestJsonFormatGuard:
    def test_valid_json_passes(self) -> None:
        result = JsonFormatGuard().validate(_artifact('{"ok": true}', ArtifactFormat.JSON), Phase.TEST)

        assert result.passed

    def test_invalid_json_is_fatal(self) -> None:
        result = JsonFormatGuard().validate(_artifact("{not json", ArtifactFormat.JSON), Phase.TEST)

        assert not result.passed
        assert result.fatal
        assert "is not valid JSON" in result.feedback

    def test_other_formats_pass(self) -> None:
        assert JsonFormatGuard().validate(_artifact("{not json"), Phase.TEST).passed


class TestPlaceholderGuard:
    @pytest.mark.parametrize("content", ["TODO", "TBD: fill in later", "...", "Lorem ipsum dolor", "n/a"])
    def test_rejects_placeholders(self, content: str) -> None:
        assert not PlaceholderGuard().validate(_artifact(content), Phase.TEST).passed

    @pytest.mark.parametrize(
        "content",
        [
            "All 42 tests passed",
            "TODO list reviewed:\n- item one done\n- item two done",
            "Names and addresses were checked",
        ],
    )
    def test_accepts_real_content(self, content: str) -> None:
        assert PlaceholderGuard().validate(_artifact(content), Phase.TEST).passed


class _Counting(GuardInterface):
    def __init__(self, passed: bool):
        self.passed = passed
        self.calls = 0

    def validate(self, artifact: OutputArtifact, phase: Phase) -> GuardResult:
        self.calls += 1
        return GuardResult(passed=self.passed, feedback="counted")


class TestCompositeGuard:
    def test_all_pass(self) -> None:
        result = CompositeGuard(_Counting(True), _Counting(True)).validate(_artifact("x"), Phase.TEST)

        assert result.passed
        assert result.feedback == "All guards passed"

    def test_short_circuits_on_first_failure(self) -> None:
        second = _Counting(True)

        result = CompositeGuard(_Counting(False), second).validate(_artifact("x"), Phase.TEST)

        assert not result.passed
        assert second.calls == 0

    def test_default_guard_checks_length_first(self) -> None:
        result = default_artifact_guard().validate(_artifact("{", ArtifactFormat.JSON), Phase.TEST)

        assert "too short" in result.feedback
        assert not result.fatal
