"""Exception hierarchy for converter lifecycle and dispatch."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class FormatConverterError(Exception):
    """Base class for all package errors.

    Attributes
    ----------
    exit_code : int
        Process exit code used by the CLI when this error aborts a command.
    """

    exit_code = 1


class RegistryIOError(FormatConverterError):
    """Registry document could not be read or written."""

    exit_code = 3


class CorruptRegistryError(FormatConverterError):
    """Registry document exists but is not valid JSON or violates its schema."""

    exit_code = 3


class InstallError(FormatConverterError):
    """Converter installation failed."""

    exit_code = 4


class InvalidSourceError(InstallError):
    """Source URL does not yield a usable converter name."""


class AlreadyInstalledError(InstallError):
    """A registry entry with the derived name already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Converter '{name}' already exists.")
        self.name = name


class StaleInstallError(InstallError):
    """Directory left by a previous failed install blocks a new one."""

    def __init__(self, directory: Path) -> None:
        super().__init__(
            f"Directory '{directory}' exists but is not registered "
            "(left by a failed install). Remove it or retry with --force."
        )
        self.directory = directory


class StageError(InstallError):
    """An external install stage exited non-zero, failed to spawn or timed out.

    Attributes
    ----------
    stage : str
        Stage label (``fetch``, ``dependencies``, ``build``).
    output : str
        Captured diagnostic output of the failing command.
    """

    stage = "stage"

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class FetchFailedError(StageError):
    """Cloning the source repository failed."""

    stage = "fetch"


class DependencyResolutionError(StageError):
    """Installing the converter's dependencies failed."""

    stage = "dependencies"


class BuildFailedError(StageError):
    """Building the converter failed."""

    stage = "build"


class LoadError(FormatConverterError):
    """Converter artifact could not be turned into a descriptor."""

    exit_code = 5


class ArtifactMissingError(LoadError):
    """Expected build artifact does not exist."""

    def __init__(self, artifact: Path) -> None:
        super().__init__(f"Build artifact not found: {artifact}")
        self.artifact = artifact


class SchemaInvalidError(LoadError):
    """Loaded candidate does not satisfy the converter descriptor shape.

    Attributes
    ----------
    violations : tuple[str, ...]
        Each violated constraint as ``"<field>: <reason>"``.
    """

    def __init__(self, source: str, violations: Sequence[str]) -> None:
        self.violations = tuple(violations)
        detail = "; ".join(self.violations) or "invalid converter"
        super().__init__(f"Converter at '{source}' does not have a valid schema: {detail}")


class ConverterNotFoundError(FormatConverterError):
    """No registry entry matches the requested name."""

    exit_code = 6

    def __init__(self, name: str) -> None:
        super().__init__(f"Converter '{name}' not found.")
        self.name = name


class ConversionError(FormatConverterError):
    """File conversion could not be dispatched or reported failure."""

    exit_code = 2


class NoConverterError(ConversionError):
    """No loaded converter declares the requested format pair."""

    def __init__(self, source_format: str, target_format: str) -> None:
        super().__init__(f"No converter found for {source_format} -> {target_format}")
        self.source_format = source_format
        self.target_format = target_format


class CommandError(FormatConverterError):
    """External command could not be spawned or timed out."""
