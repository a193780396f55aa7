"""In-memory converter index used for dispatch."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from format_converter.schemas import ConverterDescriptor

logger = logging.getLogger(__name__)


class ConverterIndex:
    """Insertion-ordered mapping from converter name to descriptor.

    Readers work on snapshots taken under the lock, so a lookup never sees
    a partially applied mutation.
    """

    def __init__(self) -> None:
        self._converters: dict[str, ConverterDescriptor] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._converters)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._converters

    def register(self, descriptor: ConverterDescriptor) -> None:
        """Insert ``descriptor`` under its self-declared name.

        Re-registering a name replaces the descriptor but keeps its original
        position.
        """
        with self._lock:
            if descriptor.name in self._converters:
                logger.warning(
                    "converter '%s' registered twice; replacing previous descriptor",
                    descriptor.name,
                )
            self._converters[descriptor.name] = descriptor

    def unregister(self, name: str) -> ConverterDescriptor | None:
        """Remove and return the descriptor called ``name``, if present."""
        with self._lock:
            return self._converters.pop(name, None)

    def reset(self, descriptors: Iterable[ConverterDescriptor] = ()) -> None:
        """Replace the whole index in one step, keeping the given order."""
        rebuilt: dict[str, ConverterDescriptor] = {}
        for descriptor in descriptors:
            rebuilt[descriptor.name] = descriptor
        with self._lock:
            self._converters = rebuilt

    def get(self, name: str) -> ConverterDescriptor | None:
        with self._lock:
            return self._converters.get(name)

    def names(self) -> list[str]:
        """Return names in insertion order."""
        return [descriptor.name for descriptor in self.snapshot()]

    def snapshot(self) -> tuple[ConverterDescriptor, ...]:
        """Return the descriptors in insertion order."""
        with self._lock:
            return tuple(self._converters.values())

    def resolve(
        self, source_format: str, target_format: str
    ) -> ConverterDescriptor | None:
        """Return the first descriptor declaring the pair.

        Parameters
        ----------
        source_format : str
            Normalized source format tag.
        target_format : str
            Normalized target format tag.

        Returns
        -------
        ConverterDescriptor | None
            First match in insertion order, ``None`` when nothing matches.
        """
        for descriptor in self.snapshot():
            if descriptor.supports(source_format, target_format):
                return descriptor
        return None
