"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli_command(command: str, stdin: str | None = None, timeout: int = 30) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        command: The command to run (after 'python -m resus')
        stdin: Text piped to interactive prompts
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    full_command = f"{sys.executable} -m resus {command}"
    # Wide terminal so Rich tables don't wrap cell text
    env = {**os.environ, "COLUMNS": "200", "RESUS_LOG_LEVEL": "WARNING"}

    result = subprocess.run(
        full_command,
        shell=True,
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        input=stdin,
        env=env,
        timeout=timeout,
    )

    return result.returncode, result.stdout, result.stderr


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        """Main help should list every command."""
        code, stdout, stderr = run_cli_command("--help")

        assert code == 0, f"Help failed: {stderr}"
        for command in ("doses", "scenarios", "causes", "simulate", "live"):
            assert command in stdout

    def test_simulate_help(self):
        code, stdout, stderr = run_cli_command("simulate --help")

        assert code == 0, f"Simulate help failed: {stderr}"
        assert "--scenario" in stdout


class TestCLIReference:
    """Test reference-card commands."""

    def test_doses_for_twenty_kg(self):
        code, stdout, stderr = run_cli_command("doses --weight 20")

        assert code == 0, f"Doses failed with: {stderr}"
        assert "0.2 mg" in stdout
        assert "100 mg" in stdout
        assert "40 J" in stdout

    def test_doses_rejects_zero_weight(self):
        code, stdout, stderr = run_cli_command("doses --weight 0")

        assert code == 1
        assert "positive" in stdout

    @pytest.mark.parametrize("weight", ["nan", "inf"])
    def test_doses_rejects_non_finite_weight(self, weight):
        code, stdout, stderr = run_cli_command(f"doses --weight {weight}")

        assert code == 1
        assert "positive" in stdout

    def test_scenarios_lists_catalog(self):
        code, stdout, stderr = run_cli_command("scenarios")

        assert code == 0, f"Scenarios failed with: {stderr}"
        assert "vf_witnessed" in stdout
        assert "refractory_vf" in stdout

    def test_causes_checklist(self):
        code, stdout, stderr = run_cli_command("causes")

        assert code == 0, f"Causes failed with: {stderr}"
        assert "Needle decompression" in stdout
        assert "Hypovolemia" in stdout


class TestCLISimulate:
    """Test the interactive trainer with piped input."""

    def test_quit_shows_performance(self):
        code, stdout, stderr = run_cli_command(
            "simulate --scenario vf_witnessed --seed 1 --no-hints", stdin="1\n2\nq\n"
        )

        assert code == 0, f"Simulate crashed: {stderr}"
        assert "Witnessed VF Arrest" in stdout
        assert "Performance" in stdout
        assert "Excellent CPR initiation" in stdout

    def test_unknown_scenario(self):
        code, stdout, stderr = run_cli_command("simulate --scenario nope", stdin="q\n")

        assert code == 1
        assert "Unknown scenario" in stdout


class TestCLILive:
    """Test the live clock exits cleanly."""

    def test_quit_prints_debrief(self):
        code, stdout, stderr = run_cli_command("live --weight 20 --quiet", stdin="q\n")

        assert code == 0, f"Live crashed: {stderr}"
        assert "Debrief" in stdout
        assert "Outcome: ongoing" in stdout

    def test_live_rejects_bad_weight(self):
        code, stdout, stderr = run_cli_command("live --weight 0")

        assert code == 1
        assert "positive" in stdout
