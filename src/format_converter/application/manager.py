"""Converter manager: lifecycle and dispatch facade."""

from __future__ import annotations

import logging
import shutil
import threading
from datetime import UTC, datetime

from format_converter.adapters.loaders import PluginLoader
from format_converter.application.installer import Installer
from format_converter.application.ports import ConverterLoader, RegistryStore
from format_converter.application.results import ConverterSummary
from format_converter.config import Settings
from format_converter.errors import (
    ArtifactMissingError,
    ConverterNotFoundError,
    FormatConverterError,
    LoadError,
    RegistryIOError,
    StageError,
)
from format_converter.infrastructure.process import SubprocessRunner
from format_converter.infrastructure.registry_store import JsonRegistryStore
from format_converter.plugins.registry import ConverterIndex
from format_converter.schemas import ConverterDescriptor, Registry, RegistryEntry

logger = logging.getLogger(__name__)


class ConverterManager:
    """Own the registry document and the in-memory converter index.

    Public operations return ``True``/``False`` instead of raising; the
    failure is logged and kept on :attr:`last_error`. Mutations are
    serialized; lookups read index snapshots.

    Parameters
    ----------
    settings : Settings
        Base directory and debug flag.
    store : RegistryStore | None, default=None
        Registry persistence, JSON file under ``settings`` by default.
    loader : ConverterLoader | None, default=None
        Artifact loader used at startup and by the default installer.
    installer : Installer | None, default=None
        Install pipeline, subprocess-backed by default.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        store: RegistryStore | None = None,
        loader: ConverterLoader | None = None,
        installer: Installer | None = None,
    ) -> None:
        self.settings = settings
        self.store = store or JsonRegistryStore(settings.registry_path)
        self.loader = loader or PluginLoader()
        self.installer = installer or Installer(
            settings.converters_dir, SubprocessRunner(), self.loader
        )
        self.index = ConverterIndex()
        self.last_error: Exception | None = None
        self._registry = Registry()
        # registry entry name -> descriptor loaded from that entry's directory
        self._loaded: dict[str, ConverterDescriptor] = {}
        self._mutation_lock = threading.Lock()

    @property
    def registry(self) -> Registry:
        """Registry as last loaded or persisted."""
        return self._registry

    def initialize(self) -> bool:
        """Load the registry and every registered converter.

        Converters that cannot be loaded are logged and skipped.

        Returns
        -------
        bool
            ``False`` only when the registry cannot be read or created.
        """
        with self._mutation_lock:
            self.last_error = None
            try:
                self.settings.converters_dir.mkdir(parents=True, exist_ok=True)
                registry = self.store.load()
            except OSError as exc:
                error = RegistryIOError(
                    f"Unable to create {self.settings.converters_dir}: {exc}"
                )
                error.__cause__ = exc
                return self._fail(error, "Error while initializing converter manager")
            except FormatConverterError as exc:
                return self._fail(exc, "Error while initializing converter manager")

            loaded: dict[str, ConverterDescriptor] = {}
            for entry in registry.converters:
                descriptor = self._load_entry(entry)
                if descriptor is not None:
                    loaded[entry.name] = descriptor

            self._registry = registry
            self._loaded = loaded
            self.index.reset(loaded.values())
            return True

    def add_converter(self, source_url: str, *, force: bool = False) -> bool:
        """Install, register and index the converter at ``source_url``.

        The registry is persisted before the index is touched, so the index
        never holds a converter missing from disk.

        Parameters
        ----------
        source_url : str
            Repository URL of the converter.
        force : bool, default=False
            Replace a leftover directory from a failed install.

        Returns
        -------
        bool
            ``True`` when the converter was installed and registered.
        """
        with self._mutation_lock:
            self.last_error = None
            context = f"Error while adding converter: {source_url}"
            try:
                result = self.installer.install(source_url, self._registry, force=force)
            except FormatConverterError as exc:
                return self._fail(exc, context)
            except Exception as exc:
                logger.exception("unexpected error while adding converter %s", source_url)
                self.last_error = exc
                return False

            entry = RegistryEntry(
                name=result.name,
                source=source_url,
                installed_at=datetime.now(UTC),
            )
            updated = self._registry.with_entry(entry)
            try:
                self.store.save(updated)
            except FormatConverterError as exc:
                return self._fail(exc, context)

            self._registry = updated
            self._track(entry.name, result.descriptor)
            logger.info("Added converter: %s", result.descriptor.name)
            return True

    def remove_converter(self, name: str) -> bool:
        """Unregister ``name`` and delete its installation directory.

        Directory deletion is best effort; the registry and index are
        already consistent when it runs.

        Returns
        -------
        bool
            ``False`` when ``name`` is not registered or the registry
            cannot be written.
        """
        with self._mutation_lock:
            self.last_error = None
            context = f"Error while removing converter: {name}"
            if self._registry.find(name) is None:
                return self._fail(ConverterNotFoundError(name), context)

            updated = self._registry.without(name)
            try:
                self.store.save(updated)
            except FormatConverterError as exc:
                return self._fail(exc, context)

            self._registry = updated
            self._loaded.pop(name, None)
            # Another entry may declare the same name; rebuild as initialize() would.
            self.index.reset(
                self._loaded[entry] for entry in updated.names() if entry in self._loaded
            )

            directory = self.settings.converters_dir / name
            if directory.exists():
                try:
                    shutil.rmtree(directory)
                except OSError as exc:
                    logger.error(
                        "Error removing converter directory %s: %s",
                        directory,
                        exc,
                        exc_info=exc if self.settings.debug else None,
                    )

            logger.info("Removed converter: %s", name)
            return True

    def list_converters(self) -> list[ConverterSummary]:
        """Summarize loaded converters in index order."""
        return [
            ConverterSummary(
                name=descriptor.name,
                description=descriptor.description,
                formats=tuple(descriptor.format_pairs()),
            )
            for descriptor in self.index.snapshot()
        ]

    def get_converter(
        self, source_format: str, target_format: str
    ) -> ConverterDescriptor | None:
        """Return the first loaded converter declaring the format pair.

        Formats are compared as given; normalize them before calling.
        """
        return self.index.resolve(source_format, target_format)

    def get_converter_by_name(self, name: str) -> ConverterDescriptor | None:
        """Return the loaded converter with self-declared ``name``."""
        return self.index.get(name)

    def unloaded_entries(self) -> list[str]:
        """Registry names whose converter is not in the index."""
        return [name for name in self._registry.names() if name not in self._loaded]

    def _load_entry(self, entry: RegistryEntry) -> ConverterDescriptor | None:
        directory = self.settings.converters_dir / entry.name
        try:
            descriptor = self.loader.load(directory)
        except ArtifactMissingError as exc:
            logger.error('Converter "%s" not found: %s', entry.name, exc)
            return None
        except LoadError as exc:
            logger.error(
                'Converter "%s" could not be loaded: %s',
                entry.name,
                exc,
                exc_info=exc if self.settings.debug else None,
            )
            return None
        logger.info("Loaded converter: %s", descriptor.name)
        return descriptor

    def _track(self, entry_name: str, descriptor: ConverterDescriptor) -> None:
        self._loaded[entry_name] = descriptor
        self.index.register(descriptor)

    def _fail(self, exc: FormatConverterError, context: str) -> bool:
        self.last_error = exc
        logger.error(
            "%s: %s", context, exc, exc_info=exc if self.settings.debug else None
        )
        if isinstance(exc, StageError) and exc.output:
            logger.debug("%s output:\n%s", exc.stage, exc.output)
        return False
