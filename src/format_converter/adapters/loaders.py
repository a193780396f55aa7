"""Load installed converter artifacts into descriptors."""

from __future__ import annotations

import importlib.util
import itertools
import logging
import re
import sys
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING

from format_converter.errors import ArtifactMissingError, SchemaInvalidError
from format_converter.schemas import ConverterDescriptor

if TYPE_CHECKING:
    from format_converter.plugins.base import ConverterPlugin

logger = logging.getLogger(__name__)

ARTIFACT_PATH = Path("dist") / "converter.py"
DEPENDENCY_DIR = ".fc-deps"
FACTORY_NAME = "create_converter"
EXPORT_NAME = "CONVERTER"

_load_counter = itertools.count()


def artifact_path(converter_directory: Path) -> Path:
    """Return the conventional build artifact location for a converter."""
    return converter_directory / ARTIFACT_PATH


def _module_name(converter_directory: Path) -> str:
    slug = re.sub(r"\W", "_", converter_directory.name) or "converter"
    return f"_fc_converter_{slug}_{next(_load_counter)}"


def _import_artifact(path: Path, module_name: str) -> ModuleType:
    """Execute the artifact as a fresh module.

    .. warning::
        This runs third-party code. Only install converters from trusted
        sources.
    """
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise SchemaInvalidError(str(path), ["module: unable to create import spec"])
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise SchemaInvalidError(
            str(path), [f"module: import failed ({type(exc).__name__}: {exc})"]
        ) from exc
    return module


def _exported_candidate(
    module: ModuleType, source: str
) -> ConverterPlugin | Mapping[str, object]:
    """Return the module's factory result or ``CONVERTER`` export.

    The value should satisfy :class:`~format_converter.plugins.base.ConverterPlugin`
    either as an object or as a mapping with the same keys; the descriptor
    schema does the actual checking.
    """
    factory = getattr(module, FACTORY_NAME, None)
    if factory is not None:
        if not callable(factory):
            raise SchemaInvalidError(source, [f"{FACTORY_NAME}: must be callable"])
        try:
            return factory()
        except Exception as exc:
            raise SchemaInvalidError(
                source, [f"{FACTORY_NAME}: raised {type(exc).__name__}: {exc}"]
            ) from exc

    candidate = getattr(module, EXPORT_NAME, None)
    if candidate is None:
        raise SchemaInvalidError(
            source,
            [f"module: must expose {FACTORY_NAME}() or {EXPORT_NAME}"],
        )
    return candidate


class PluginLoader:
    """Materialize and validate the converter built in a directory."""

    def load(self, converter_directory: Path) -> ConverterDescriptor:
        """Load the converter artifact under ``converter_directory``.

        Parameters
        ----------
        converter_directory : Path
            Installation directory of one converter.

        Returns
        -------
        ConverterDescriptor
            Descriptor keyed by the converter's self-declared name.

        Raises
        ------
        ArtifactMissingError
            If ``dist/converter.py`` does not exist.
        SchemaInvalidError
            If the artifact cannot be imported or its export is invalid.
        """
        path = artifact_path(converter_directory)
        if not path.is_file():
            raise ArtifactMissingError(path)

        # Stays on sys.path: converters may import their dependencies lazily
        # inside convert(). Added at most once per directory.
        deps_dir = converter_directory / DEPENDENCY_DIR
        if deps_dir.is_dir() and str(deps_dir) not in sys.path:
            sys.path.insert(0, str(deps_dir))

        module_name = _module_name(converter_directory)
        module = _import_artifact(path, module_name)
        try:
            candidate = _exported_candidate(module, str(path))
            descriptor = ConverterDescriptor.from_candidate(candidate, str(path))
        finally:
            # The descriptor keeps the module alive through its callables.
            sys.modules.pop(module_name, None)
        logger.debug("loaded converter '%s' from %s", descriptor.name, path)
        return descriptor
