"""Tests for CLI commands."""

import json
import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from envylint.cli import cli
from .helpers.cli_assertions import (
    assert_exit_code,
    assert_output_contains,
    assert_output_not_contains,
    clean_output,
)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def in_temp_dir(temp_dir: Path):
    """Run a test with temp_dir as the working directory."""
    original_dir = os.getcwd()
    os.chdir(temp_dir)
    try:
        yield temp_dir
    finally:
        os.chdir(original_dir)


def test_cli_help(cli_runner):
    """Test CLI help command."""
    result = cli_runner.invoke(cli, ["--help"])

    assert_exit_code(result, 0)
    assert "envylint" in result.output
    assert "check" in result.output
    assert "contexts" in result.output


def test_check_command_help(cli_runner):
    """Test check command help."""
    result = cli_runner.invoke(cli, ["check", "--help"])

    assert_exit_code(result, 0)
    assert_output_contains(result, "Run feature envy detection")
    assert "--threshold" in result.output
    assert "--format" in result.output


def test_check_finds_envy_and_writes_report(cli_runner, in_temp_dir, pyproject_toml, sample_python_file):
    """check reports the candidate, exits 1 and writes the configured CSV."""
    result = cli_runner.invoke(cli, ["check", "--threshold", "0.1"])

    assert_exit_code(result, 1)
    assert_output_contains(result, "Invoice.customer_headroom -> Customer")
    assert_output_contains(result, "Results saved to reports/envy.csv")

    report = in_temp_dir / "reports" / "envy.csv"
    lines = report.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("Method Class,Method Name")
    assert lines[1] == "Invoice,customer_headroom,0.0000,Customer,0.2012,YES"


def test_check_threshold_option_suppresses(cli_runner, in_temp_dir, pyproject_toml, sample_python_file):
    """A command-line threshold wider than the margin suppresses the candidate."""
    result = cli_runner.invoke(cli, ["check", "--no-report", "--threshold", "0.3"])

    assert_exit_code(result, 0)
    assert_output_contains(result, "No feature envy found")
    assert_output_not_contains(result, "Results saved to")
    assert not (in_temp_dir / "reports").exists()


def test_check_json_format(cli_runner, in_temp_dir, pyproject_toml, sample_python_file):
    """JSON output is machine readable."""
    result = cli_runner.invoke(cli, ["check", "--no-report", "--format", "json", str(sample_python_file)])

    assert_exit_code(result, 1)
    payload = json.loads(result.output[result.output.index("{"):])
    assert payload["summary"]["candidates"] == 1
    assert payload["candidates"][0]["method"] == "customer_headroom"


def test_check_report_message_on_stdout(cli_runner, in_temp_dir, sample_python_file):
    """The saved-report message is part of the regular output."""
    result = cli_runner.invoke(cli, ["check", "-o", "out.csv"])

    assert_exit_code(result, 1)
    assert "Results saved to out.csv" in clean_output(result.stdout)
    assert (in_temp_dir / "out.csv").exists()


def test_check_json_stdout_stays_parseable(cli_runner, in_temp_dir, sample_python_file):
    """With JSON output the saved-report message goes to stderr."""
    result = cli_runner.invoke(cli, ["check", "--format", "json", "-o", "out.csv"])

    assert_exit_code(result, 1)
    payload = json.loads(result.stdout)
    assert payload["candidates"][0]["candidate_class"] == "Customer"
    assert "Results saved to out.csv" in result.stderr


def test_check_csv_format(cli_runner, in_temp_dir, sample_python_file):
    """Without pyproject.toml the target directory is analysed with defaults."""
    result = cli_runner.invoke(cli, ["check", "--no-report", "--format", "csv", str(in_temp_dir)])

    assert_exit_code(result, 1)
    assert "Invoice,customer_headroom,0.0000,Customer,0.2012,YES" in clean_output(result.output)


def test_check_invalid_threshold(cli_runner, in_temp_dir, sample_python_file):
    """Negative thresholds are rejected."""
    result = cli_runner.invoke(cli, ["check", "--no-report", "--threshold", "-1"])

    assert_exit_code(result, 2)
    assert_output_contains(result, "Invalid configuration")


def test_contexts_command(cli_runner, sample_python_file):
    """contexts shows classes, methods and tokens."""
    result = cli_runner.invoke(cli, ["contexts", str(sample_python_file)])

    assert_exit_code(result, 0)
    assert_output_contains(result, "Invoice")
    assert_output_contains(result, "customer_headroom")
    assert_output_contains(result, "FIELD_buyer")


def test_contexts_command_syntax_error(cli_runner, temp_dir):
    """An unparseable file exits with status 1."""
    bad = temp_dir / "bad.py"
    bad.write_text("def broken(:\n")

    result = cli_runner.invoke(cli, ["contexts", str(bad)])

    assert_exit_code(result, 1)
