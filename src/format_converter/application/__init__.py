"""Application-layer use-cases and option objects."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from format_converter.application.options import InstallerCommands
from format_converter.application.results import (
    CommandResult,
    ConversionResult,
    ConverterSummary,
    InstallResult,
)

if TYPE_CHECKING:
    from format_converter.application.manager import ConverterManager


def convert_file(
    manager: ConverterManager,
    input_path: Path,
    output_path: Path,
    *,
    target_format: str | None = None,
    options: Mapping[str, object] | None = None,
    overwrite: bool = False,
) -> ConversionResult:
    """Dispatch one file conversion via lazy use-case import."""
    from format_converter.application.use_cases import convert_file as _impl

    return _impl(
        manager,
        input_path,
        output_path,
        target_format=target_format,
        options=options,
        overwrite=overwrite,
    )


__all__ = [
    "CommandResult",
    "ConversionResult",
    "ConverterSummary",
    "InstallResult",
    "InstallerCommands",
    "convert_file",
]
