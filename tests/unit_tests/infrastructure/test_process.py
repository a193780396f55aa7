"""Unit tests for the subprocess-backed command runner."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from format_converter.errors import CommandError
from format_converter.infrastructure.process import SubprocessRunner


def test_run_captures_output_and_exit_code(tmp_path: Path) -> None:
    """Capture stdout, stderr and the return code."""
    script = "import os, sys; print(os.getcwd()); print('oops', file=sys.stderr); sys.exit(3)"
    result = SubprocessRunner().run([sys.executable, "-c", script], cwd=tmp_path)

    assert result.returncode == 3
    assert not result.ok
    assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()
    assert result.stderr.strip() == "oops"
    assert result.output.startswith("oops")


def test_run_reports_missing_executable() -> None:
    """Raise CommandError when the executable does not exist."""
    with pytest.raises(CommandError, match="Unable to run"):
        SubprocessRunner().run(["definitely-not-a-real-executable-fc"])


def test_run_reports_timeout() -> None:
    """Raise CommandError when the command exceeds its timeout."""
    with pytest.raises(CommandError, match="timed out"):
        SubprocessRunner().run(
            [sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2
        )
