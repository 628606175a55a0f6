"""Tests for artifact naming and output directory resolution."""

from datetime import date

from phaseguard.domain.models import ArtifactFormat
from phaseguard.domain.naming import (
    MAX_TASK_NAME_LENGTH,
    matches_expected_file,
    numbered_file_name,
    phase_file_stem,
    resolve_output_directory,
    sanitize_task_name,
)
from phaseguard.domain.phases import Phase


class TestSanitizeTaskName:
    def test_lowercases_and_hyphenates(self) -> None:
        assert sanitize_task_name("Refactor Payment Module") == "refactor-payment-module"

    def test_strips_invalid_characters(self) -> None:
        assert sanitize_task_name("Fix bug #42 (urgent!)") == "fix-bug-42-urgent"

    def test_collapses_and_trims_hyphens(self) -> None:
        assert sanitize_task_name("  -- a --- b --  ") == "a-b"

    def test_truncates_long_names(self) -> None:
        name = sanitize_task_name("word " * 40)

        assert len(name) <= MAX_TASK_NAME_LENGTH
        assert not name.endswith("-")

    def test_falls_back_to_task(self) -> None:
        assert sanitize_task_name("!!!") == "task"
        assert sanitize_task_name("") == "task"


class TestNumberedFileName:
    def test_dated_name(self) -> None:
        name = numbered_file_name(Phase.AUDIT_INVENTORY, ArtifactFormat.MARKDOWN, date(2025, 1, 15))

        assert name == "01-audit-inventory-2025-01-15.md"

    def test_undated_name(self) -> None:
        assert numbered_file_name(Phase.LINT, ArtifactFormat.JSON) == "06-lint.json"

    def test_sequence_suffix_for_later_artifacts(self) -> None:
        name = numbered_file_name(Phase.TEST, ArtifactFormat.TEXT, None, sequence=2)

        assert name == "05-test-02.txt"

    def test_unnumbered_phase(self) -> None:
        assert phase_file_stem(Phase.USER_INPUT_REQUIRED) == "99-user-input-required"

    def test_prefix_sorts_in_workflow_order(self) -> None:
        names = [
            numbered_file_name(p, ArtifactFormat.MARKDOWN)
            for p in (Phase.PRESENT, Phase.AUDIT_INVENTORY, Phase.TEST)
        ]

        assert sorted(names) == ["01-audit-inventory.md", "05-test.md", "08-present.md"]


class TestMatchesExpectedFile:
    def test_exact_identifier(self) -> None:
        assert matches_expected_file("01-audit-inventory", "01-audit-inventory")

    def test_path_with_matching_basename(self) -> None:
        assert matches_expected_file(
            "out/task/01-audit-inventory-2025-01-15.md", "01-audit-inventory"
        )

    def test_other_file(self) -> None:
        assert not matches_expected_file("notes.md", "01-audit-inventory")


class TestResolveOutputDirectory:
    def test_relative_resolves_against_base(self) -> None:
        assert resolve_output_directory("out", "/work") == "/work/out"

    def test_absolute_is_kept(self) -> None:
        assert resolve_output_directory("/tmp/out", "/work") == "/tmp/out"

    def test_default_directory(self) -> None:
        assert resolve_output_directory(None, "/work") == "/work/structured-workflow"
