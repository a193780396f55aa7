"""Application use-cases orchestrating conversion dispatch."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from format_converter.application.results import ConversionResult
from format_converter.errors import ConversionError, LoadError, NoConverterError
from format_converter.schemas import ConverterDescriptor, normalize_format
from format_converter.types import MutableOptionMap, OptionMap

if TYPE_CHECKING:
    from format_converter.application.manager import ConverterManager

logger = logging.getLogger(__name__)


def resolve_formats(
    input_path: Path,
    output_path: Path,
    target_format: str | None = None,
) -> tuple[str, str]:
    """Derive the ``(source, target)`` format pair for a conversion.

    Parameters
    ----------
    input_path : Path
        Source file; its suffix gives the source format.
    output_path : Path
        Destination file; its suffix gives the target format.
    target_format : str | None, default=None
        Explicit target format. Required when ``output_path`` has no
        suffix, and takes precedence over it otherwise.

    Returns
    -------
    tuple[str, str]
        Lower-cased format tags without leading dots.

    Raises
    ------
    ConversionError
        If either format is empty.
    """
    source = normalize_format(input_path.suffix)
    if not source:
        raise ConversionError(f"Invalid input file format: '{input_path}' has no extension.")

    target = normalize_format(target_format) if target_format else ""
    if not target:
        target = normalize_format(output_path.suffix)
    if not target:
        raise ConversionError(
            f"Invalid output file format: '{output_path}' has no extension. "
            "Name the target format explicitly."
        )
    return source, target


def apply_declared_options(
    descriptor: ConverterDescriptor, options: OptionMap
) -> MutableOptionMap:
    """Fill declared defaults and reject missing required options.

    Options the converter does not declare are passed through untouched.
    Broken option declarations are reported as ``ConversionError``.
    """
    try:
        declared = descriptor.options()
    except LoadError as exc:
        raise ConversionError(
            f"Converter '{descriptor.name}' has invalid options: {exc}"
        ) from exc

    resolved: MutableOptionMap = dict(options)
    missing: list[str] = []
    for key, spec in declared.items():
        if key in resolved:
            continue
        if spec.required:
            missing.append(key)
        elif spec.default is not None:
            resolved[key] = spec.default
    if missing:
        raise ConversionError(
            f"Converter '{descriptor.name}' requires option(s): {', '.join(sorted(missing))}"
        )
    return resolved


def convert_file(
    manager: ConverterManager,
    input_path: Path,
    output_path: Path,
    *,
    target_format: str | None = None,
    options: Mapping[str, object] | None = None,
    overwrite: bool = False,
) -> ConversionResult:
    """Use-case: resolve a converter for two paths and run it.

    Raises
    ------
    ConversionError
        If the input is missing, the output exists without ``overwrite``,
        no converter declares the pair, or the converter reports failure.
    """
    if not input_path.is_file():
        raise ConversionError(f"Input file not found: {input_path}")
    if output_path.exists() and not overwrite:
        raise ConversionError(
            f"Output file already exists: {output_path}. Use --force to overwrite."
        )

    source, target = resolve_formats(input_path, output_path, target_format)
    descriptor = manager.get_converter(source, target)
    if descriptor is None:
        raise NoConverterError(source, target)

    resolved = apply_declared_options(descriptor, options or {})
    logger.info("Converting %s to %s using %s", input_path, output_path, descriptor.name)
    try:
        succeeded = descriptor.run(str(input_path), str(output_path), resolved)
    except ConversionError:
        raise
    except Exception as exc:
        raise ConversionError(
            f"Converter '{descriptor.name}' failed: {type(exc).__name__}: {exc}"
        ) from exc
    if not succeeded:
        raise ConversionError(f"Converter '{descriptor.name}' reported failure.")

    return ConversionResult(
        converter=descriptor.name,
        source_format=source,
        target_format=target,
        input_path=input_path,
        output_path=output_path,
    )
