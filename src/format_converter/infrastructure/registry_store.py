"""JSON file implementation of the registry store."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from format_converter.errors import CorruptRegistryError, RegistryIOError
from format_converter.schemas import Registry, describe_validation_error

logger = logging.getLogger(__name__)


class JsonRegistryStore:
    """Persist the registry as a single JSON document.

    Every save rewrites the whole document. Callers serialize mutations.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> Registry:
        """Load the registry, writing an empty document first if none exists.

        Returns
        -------
        Registry
            Parsed registry.

        Raises
        ------
        RegistryIOError
            If the document or its directory cannot be read or created.
        CorruptRegistryError
            If the document is not valid JSON or violates the schema.
        """
        if not self.path.exists():
            logger.debug("creating empty registry at %s", self.path)
            self.save(Registry())

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RegistryIOError(f"Unable to read registry {self.path}: {exc}") from exc

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptRegistryError(
                f"Registry {self.path} is not valid JSON: {exc}"
            ) from exc

        try:
            return Registry.model_validate(payload)
        except ValidationError as exc:
            details = "; ".join(describe_validation_error(exc))
            raise CorruptRegistryError(
                f"Registry {self.path} has an invalid schema: {details}"
            ) from exc

    def save(self, registry: Registry) -> None:
        """Atomically replace the stored document with ``registry``.

        Raises
        ------
        RegistryIOError
            If the document cannot be written.
        """
        text = json.dumps(registry.to_document(), indent=2) + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(text)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise RegistryIOError(f"Unable to write registry {self.path}: {exc}") from exc
        logger.debug("wrote %d registry entries to %s", len(registry.converters), self.path)
