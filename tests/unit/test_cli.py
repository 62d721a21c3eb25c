"""Tests for CLI module."""

import json
import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from citemeta.cli.main import cli

PKG_DEMO = Path(__file__).parent.parent / "fixtures" / "pkg_demo"


@pytest.fixture
def runner() -> CliRunner:
    """Provide Click test CLI runner."""
    return CliRunner()


# ---------------------------------------------------------------------------
# Top-level CLI
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_cli_version_flag(runner: CliRunner) -> None:
    """Test --version flag outputs version string."""
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "citemeta" in result.output


@pytest.mark.unit
def test_cli_help(runner: CliRunner) -> None:
    """Test --help output lists commands."""
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "citation" in result.output
    assert "read" in result.output


@pytest.mark.unit
def test_cli_invalid_command(runner: CliRunner) -> None:
    """Test invalid command returns non-zero exit code."""
    result = runner.invoke(cli, ["invalid-command"])

    assert result.exit_code != 0


# ---------------------------------------------------------------------------
# citation command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_citation_help(runner: CliRunner) -> None:
    """Test citation command help."""
    result = runner.invoke(cli, ["citation", "--help"])

    assert result.exit_code == 0
    assert "Convert the citations of PACKAGE" in result.output


@pytest.mark.unit
def test_citation_to_file(runner: CliRunner, tmp_path: Path) -> None:
    """Test citation command writes JSON and audit events."""
    pkg_dir = shutil.copytree(PKG_DEMO, tmp_path / "demo")
    output_file = tmp_path / "citation.json"
    events_file = tmp_path / "events.jsonl"

    result = runner.invoke(
        cli,
        ["citation", str(pkg_dir), "-o", str(output_file), "--events", str(events_file)],
    )

    assert result.exit_code == 0
    assert "Wrote 2 citation(s)" in result.output
    assert len(json.loads(output_file.read_text(encoding="utf-8"))) == 2
    assert events_file.exists()


@pytest.mark.unit
def test_citation_missing_package(runner: CliRunner) -> None:
    """Test an unknown package prints a notice and an empty list."""
    result = runner.invoke(cli, ["citation", "no-such-distribution-citemeta"])

    assert result.exit_code == 0
    assert "No citation available" in result.output
    assert "[]" in result.output


@pytest.mark.unit
def test_citation_broken_file(runner: CliRunner, tmp_path: Path) -> None:
    """Test an unreadable citation file exits with status 1."""
    pkg_dir = shutil.copytree(PKG_DEMO, tmp_path / "demo")
    fixture = Path(__file__).parent.parent / "fixtures" / "citation" / "CITATION_syntax_error"
    shutil.copy(fixture, pkg_dir / "inst" / "CITATION")

    result = runner.invoke(cli, ["citation", str(pkg_dir)])

    assert result.exit_code == 1
    assert "Error" in result.output


# ---------------------------------------------------------------------------
# read command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_read_to_stdout(runner: CliRunner, fixtures_dir: Path) -> None:
    """Test read command prints the citation array."""
    result = runner.invoke(cli, ["read", str(fixtures_dir / "CITATION.bib")])

    assert result.exit_code == 0
    citations = json.loads(result.output)
    assert [c["@type"] for c in citations] == ["SoftwareSourceCode", "ScholarlyArticle"]


@pytest.mark.unit
def test_read_syntax_error(runner: CliRunner, fixtures_dir: Path) -> None:
    """Test read command fails on an unparseable file."""
    result = runner.invoke(cli, ["read", str(fixtures_dir / "CITATION_syntax_error")])

    assert result.exit_code == 1
    assert "Failed to read CITATION_syntax_error" in result.output


@pytest.mark.unit
def test_read_nonexistent_file(runner: CliRunner) -> None:
    """Test read command rejects a missing file."""
    result = runner.invoke(cli, ["read", "/nonexistent/CITATION"])

    assert result.exit_code != 0
