"""Top-level API for plugin-based file format conversion."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from format_converter.application.installer import Installer
    from format_converter.application.manager import ConverterManager
    from format_converter.application.results import ConversionResult
    from format_converter.config import Settings

__version__ = "0.1.0"


def create_manager(
    settings: Settings | None = None,
    *,
    installer: Installer | None = None,
) -> ConverterManager:
    """Create an initialized converter manager.

    Parameters
    ----------
    settings : Settings | None, default=None
        Base directory and debug flag; read from the environment when omitted.
    installer : Installer | None, default=None
        Custom install pipeline.

    Returns
    -------
    ConverterManager
        Manager with the registry loaded and converters indexed.
    """
    from .api import create_manager as _impl

    return _impl(settings, installer=installer)


def convert_file(
    manager: ConverterManager,
    input_path: Path,
    output_path: Path,
    *,
    target_format: str | None = None,
    options: Mapping[str, object] | None = None,
    overwrite: bool = False,
) -> ConversionResult:
    """Convert a file with the converter registered for its format pair.

    Parameters
    ----------
    manager : ConverterManager
        Initialized manager used for dispatch.
    input_path : Path
        Source file.
    output_path : Path
        Destination file.
    target_format : str | None, default=None
        Explicit target format, required when ``output_path`` has no suffix.
    options : Mapping[str, object] | None, default=None
        Converter options.
    overwrite : bool, default=False
        Allow replacing an existing output file.

    Returns
    -------
    ConversionResult
        Converter used, resolved formats and the written path.
    """
    from .api import convert_file as _impl

    return _impl(
        manager,
        input_path,
        output_path,
        target_format=target_format,
        options=options,
        overwrite=overwrite,
    )


__all__ = ["convert_file", "create_manager"]
