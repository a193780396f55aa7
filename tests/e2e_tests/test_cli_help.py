"""End-to-end smoke test for CLI help output."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import format_converter


def test_package_import_smoke() -> None:
    """Ensure package can be imported in the test process."""
    assert format_converter.__version__


def test_cli_help_smoke() -> None:
    """Ensure the installed CLI entrypoint responds to --help."""
    result = subprocess.run(
        ["fc", "--help"],
        capture_output=True,
        text=True,
        check=False,
    )

    assert result.returncode == 0, result.stderr
    assert "Your favorite file converter" in result.stdout


def test_cli_convert_missing_input_fails_cleanly(tmp_path: Path) -> None:
    """Ensure CLI returns a user-facing validation error for a missing input."""
    result = subprocess.run(
        ["fc", "convert", "missing.json", "out.yaml"],
        capture_output=True,
        text=True,
        check=False,
        cwd=tmp_path,
        env={**os.environ, "FC_BASE_DIR": str(tmp_path / "home")},
    )

    assert result.returncode != 0
    assert "does not exist" in result.stderr.lower()


def test_cli_list_on_fresh_home(tmp_path: Path) -> None:
    """Ensure a fresh base directory lists no converters."""
    result = subprocess.run(
        ["fc", "converter", "list"],
        capture_output=True,
        text=True,
        check=False,
        env={**os.environ, "FC_BASE_DIR": str(tmp_path / "home")},
    )

    assert result.returncode == 0, result.stderr
    assert "No converters found." in result.stdout
