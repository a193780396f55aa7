"""Subprocess-backed command runner."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from format_converter.application.results import CommandResult
from format_converter.errors import CommandError

logger = logging.getLogger(__name__)


class SubprocessRunner:
    """Run commands with captured text output."""

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run ``args`` to completion.

        Parameters
        ----------
        args : Sequence[str]
            Command and arguments, never passed through a shell.
        cwd : Path | None, default=None
            Working directory.
        timeout : float | None, default=None
            Seconds before the process is killed.

        Returns
        -------
        CommandResult
            Exit code and captured output.

        Raises
        ------
        CommandError
            If the executable cannot be spawned or the timeout expires.
        """
        argv = tuple(str(arg) for arg in args)
        logger.debug("running %s (cwd=%s)", " ".join(argv), cwd)
        try:
            completed = subprocess.run(
                argv,
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise CommandError(f"{argv[0]} timed out after {timeout}s") from exc
        except OSError as exc:
            raise CommandError(f"Unable to run {argv[0]}: {exc}") from exc
        return CommandResult(
            args=argv,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
