"""
Tests for the command-line interface.
"""

import json
import logging

import pytest
from click.testing import CliRunner

from logcoach.cli import cli


@pytest.fixture
def runner(tmp_path, monkeypatch, isolated_config):
    """CLI runner isolated from any user configuration files."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    root_level = logging.getLogger().level
    yield CliRunner()
    logging.getLogger().setLevel(root_level)


@pytest.fixture
def bad_file(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("shopping list: eggs, milk, bread, a new keyboard\n" * 5)
    return path


class TestValidateCommand:
    """Test the validate command."""

    def test_valid_file(self, runner, log_file):
        result = runner.invoke(cli, ["validate", str(log_file)])
        assert result.exit_code == 0
        assert "looks like a combat log" in result.output

    def test_invalid_file(self, runner, bad_file):
        result = runner.invoke(cli, ["validate", str(bad_file)])
        assert result.exit_code == 1
        assert "Unrecognized format" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["validate", str(tmp_path / "missing.txt")])
        assert result.exit_code == 2


class TestAnalyzeCommand:
    """Test the analyze command."""

    def test_summary_tables(self, runner, log_file):
        result = runner.invoke(cli, ["analyze", str(log_file)])

        assert result.exit_code == 0
        assert "Hero" in result.output
        assert "Avoidable Damage Taken" in result.output
        assert "Melee" in result.output

    def test_json_output_file(self, runner, log_file, tmp_path):
        out = tmp_path / "result.json"
        result = runner.invoke(cli, ["analyze", str(log_file), "--format", "json", "-o", str(out)])

        assert result.exit_code == 0
        data = json.loads(out.read_text())
        assert data["performance"]["player_name"] == "Hero"
        assert data["performance"]["total_damage"] == 4500
        assert data["metadata"]["events_processed"] == 9

    def test_digest(self, runner, log_file):
        result = runner.invoke(cli, ["analyze", str(log_file), "--format", "digest"])

        assert result.exit_code == 0
        assert "PLAYER: Hero" in result.output

    def test_anonymized_player_hint(self, runner, log_file, tmp_path):
        out = tmp_path / "digest.txt"
        result = runner.invoke(
            cli,
            ["analyze", str(log_file), "--anonymize", "--player", "Mender",
             "--format", "digest", "--output", str(out)],
        )

        assert result.exit_code == 0
        digest = out.read_text()
        assert "PLAYER: Player2" in digest
        assert "Mender" not in digest

    def test_invalid_file(self, runner, bad_file):
        result = runner.invoke(cli, ["analyze", str(bad_file)])
        assert result.exit_code == 1
        assert "WoWCombatLog" in result.output


class TestExcerptCommand:
    """Test the excerpt command."""

    def test_tail(self, runner, log_file, tmp_path):
        out = tmp_path / "excerpt.txt"
        result = runner.invoke(cli, ["excerpt", str(log_file), "--max-lines", "2", "-o", str(out)])

        assert result.exit_code == 0
        lines = out.read_text().splitlines()
        assert len(lines) == 2
        assert "ENCOUNTER_END" in lines[-1]

    def test_prefilter(self, runner, log_file, tmp_path):
        out = tmp_path / "excerpt.txt"
        result = runner.invoke(cli, ["excerpt", str(log_file), "--prefilter", "-o", str(out)])

        assert result.exit_code == 0
        lines = out.read_text().splitlines()
        assert len(lines) == 2
        assert all("SPELL_DAMAGE" in line for line in lines)


class TestGroupOptions:
    """Test options shared by every command."""

    def test_config_file(self, runner, log_file, tmp_path):
        config = tmp_path / "custom.yaml"
        config.write_text("engine:\n  avoidable_top_n: 0\n")
        out = tmp_path / "result.json"

        result = runner.invoke(
            cli, ["--config", str(config), "analyze", str(log_file), "--format", "json", "-o", str(out)]
        )

        assert result.exit_code == 0
        assert json.loads(out.read_text())["performance"]["avoidable_damage"] == []

    def test_missing_config_file(self, runner, log_file, tmp_path):
        result = runner.invoke(cli, ["--config", str(tmp_path / "nope.yaml"), "validate", str(log_file)])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_verbose(self, runner, log_file):
        result = runner.invoke(cli, ["-v", "validate", str(log_file)])
        assert result.exit_code == 0
