"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from format_converter.schemas import ConverterDescriptor
from format_converter.types import FormatPair


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Diagnostic output, stderr first."""
        return "\n".join(part for part in (self.stderr.strip(), self.stdout.strip()) if part)


@dataclass(frozen=True)
class InstallResult:
    """Converter produced by a successful install pipeline."""

    name: str
    directory: Path
    descriptor: ConverterDescriptor


@dataclass(frozen=True)
class ConverterSummary:
    """Listing row for one loaded converter."""

    name: str
    description: str
    formats: tuple[FormatPair, ...]


@dataclass(frozen=True)
class ConversionResult:
    """Structured outcome of a dispatched conversion."""

    converter: str
    source_format: str
    target_format: str
    input_path: Path
    output_path: Path
