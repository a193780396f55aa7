"""Public API (delegates to application use-cases)."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from format_converter.application.installer import Installer
from format_converter.application.manager import ConverterManager
from format_converter.application.results import ConversionResult
from format_converter.application.use_cases import convert_file as _convert_file
from format_converter.config import Settings
from format_converter.errors import RegistryIOError


def create_manager(
    settings: Optional[Settings] = None,
    *,
    installer: Optional[Installer] = None,
) -> ConverterManager:
    """Build and initialize a converter manager.

    Raises the manager's initialization error (``RegistryIOError`` or
    ``CorruptRegistryError``) when the registry cannot be loaded.
    """
    manager = ConverterManager(settings or Settings.from_env(), installer=installer)
    if not manager.initialize():
        raise manager.last_error or RegistryIOError("Converter manager failed to initialize.")
    return manager


def convert_file(
    manager: ConverterManager,
    input_path: Path,
    output_path: Path,
    *,
    target_format: Optional[str] = None,
    options: Optional[Mapping[str, object]] = None,
    overwrite: bool = False,
) -> ConversionResult:
    """Convert ``input_path`` into ``output_path`` with the matching converter."""
    return _convert_file(
        manager,
        Path(input_path),
        Path(output_path),
        target_format=target_format,
        options=options,
        overwrite=overwrite,
    )
