"""Environment-driven settings."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict

BASE_DIR_ENV = "FC_BASE_DIR"
DEBUG_ENV = "DEBUG"
_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Resolved configuration for a converter manager.

    Only path selection and error verbosity are configurable; neither
    changes lifecycle behavior.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_dir: Path
    debug: bool = False

    @property
    def converters_dir(self) -> Path:
        """Directory holding the registry and one directory per converter."""
        return self.base_dir / "converters"

    @property
    def registry_path(self) -> Path:
        """Location of ``registry.json``."""
        return self.converters_dir / "registry.json"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``FC_BASE_DIR`` and ``DEBUG``.

        Parameters
        ----------
        environ : Mapping[str, str] | None, default=None
            Environment to read; defaults to ``os.environ``.

        Returns
        -------
        Settings
            Settings with ``base_dir`` defaulting to ``~/.fc``.
        """
        env = os.environ if environ is None else environ
        raw_base = env.get(BASE_DIR_ENV, "").strip()
        if raw_base:
            base_dir = Path(raw_base).expanduser()
        else:
            home = env.get("HOME", "").strip()
            base_dir = (Path(home) if home else Path.home()) / ".fc"
        debug = env.get(DEBUG_ENV, "").strip().lower() in _TRUTHY
        return cls(base_dir=base_dir, debug=debug)
