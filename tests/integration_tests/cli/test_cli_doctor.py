"""Integration tests for CLI doctor command."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from format_converter.cli import cli as cli_module


def test_doctor_command_runs_and_prints_python(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Run doctor against a fresh base directory."""
    monkeypatch.setenv("FC_BASE_DIR", str(tmp_path))
    runner = CliRunner()
    result = runner.invoke(cli_module.app, ["doctor"])

    assert result.exit_code == 0
    assert "Python:" in result.output
    assert "git:" in result.output
    assert "registered converters: 0" in result.output
    assert (tmp_path / "converters" / "registry.json").is_file()
