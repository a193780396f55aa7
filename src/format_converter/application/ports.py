"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from format_converter.application.results import CommandResult
from format_converter.schemas import ConverterDescriptor, Registry


class RegistryStore(Protocol):
    """Durable storage for the registry document."""

    def load(self) -> Registry:
        """Load the registry, creating an empty one when absent."""

    def save(self, registry: Registry) -> None:
        """Overwrite the stored registry with ``registry``."""


class ConverterLoader(Protocol):
    """Turn an installed converter directory into a descriptor."""

    def load(self, converter_directory: Path) -> ConverterDescriptor:
        """Load and validate the converter built in ``converter_directory``."""


class CommandRunner(Protocol):
    """Run an external command to completion."""

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run ``args`` and return captured output.

        Raises ``CommandError`` when the command cannot be spawned or times out.
        """
