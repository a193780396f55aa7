"""Typed option objects for the install pipeline."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from format_converter.adapters.loaders import DEPENDENCY_DIR

REQUIREMENTS_FILE = "requirements.txt"
BUILD_SCRIPT = "build.py"
DEFAULT_STAGE_TIMEOUT = 600.0


@dataclass(frozen=True)
class InstallerCommands:
    """External commands run by each install stage.

    A stage whose command builder returns ``None`` has nothing to do for
    that checkout and succeeds without spawning a process.
    """

    git: str = "git"
    python: str = sys.executable
    stage_timeout: float | None = DEFAULT_STAGE_TIMEOUT

    def fetch(self, source_url: str, destination: Path) -> list[str]:
        """Clone ``source_url`` into ``destination``."""
        return [self.git, "clone", "--depth", "1", source_url, str(destination)]

    def dependencies(self, directory: Path) -> list[str] | None:
        """Install ``requirements.txt`` into the converter's private target."""
        if not (directory / REQUIREMENTS_FILE).is_file():
            return None
        return [
            self.python,
            "-m",
            "pip",
            "install",
            "--disable-pip-version-check",
            "--quiet",
            "--target",
            DEPENDENCY_DIR,
            "-r",
            REQUIREMENTS_FILE,
        ]

    def build(self, directory: Path) -> list[str] | None:
        """Run the converter's ``build.py`` when it ships one."""
        if not (directory / BUILD_SCRIPT).is_file():
            return None
        return [self.python, BUILD_SCRIPT]
