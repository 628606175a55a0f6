"""Tests for the phaseguard command line."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from phaseguard.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_presets_lists_every_preset(runner: CliRunner) -> None:
    result = runner.invoke(main, ["presets"])

    assert result.exit_code == 0
    for name in ("refactor", "feature", "test", "tdd", "custom"):
        assert name in result.output


def test_detect_suggests_a_preset(runner: CliRunner) -> None:
    result = runner.invoke(main, ["detect", "Refactor the billing module"])

    assert result.exit_code == 0
    assert "refactor" in result.output


def test_detect_without_match(runner: CliRunner) -> None:
    result = runner.invoke(main, ["detect", "Explain the architecture"])

    assert result.exit_code == 0
    assert "No preset matches" in result.output


def test_check_config_valid(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "workflow.json"
    path.write_text(json.dumps({"preset": "feature", "iterationLimits": {"LINT": 2}}))

    result = runner.invoke(main, ["check-config", str(path)])

    assert result.exit_code == 0
    assert "Guidance" in result.output


def test_check_config_invalid(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "workflow.json"
    path.write_text(json.dumps({"selectedPhases": ["DEPLOY"]}))

    result = runner.invoke(main, ["check-config", str(path)])

    assert result.exit_code == 1


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(main, ["--version"])

    assert result.exit_code == 0
    assert "phaseguard" in result.output
