"""Install pipeline: fetch, resolve dependencies, build, load."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Sequence
from pathlib import Path
from urllib.parse import urlsplit

from format_converter.application.options import InstallerCommands
from format_converter.application.ports import CommandRunner, ConverterLoader
from format_converter.application.results import InstallResult
from format_converter.errors import (
    AlreadyInstalledError,
    BuildFailedError,
    CommandError,
    DependencyResolutionError,
    FetchFailedError,
    InstallError,
    InvalidSourceError,
    StageError,
    StaleInstallError,
)
from format_converter.schemas import Registry, validate_source_url

logger = logging.getLogger(__name__)


def derive_name(source_url: str) -> str:
    """Derive the converter directory name from a source URL.

    The name is the last non-empty path segment with a trailing ``.git``
    removed, e.g. ``https://host/org/json2yaml.git`` -> ``json2yaml``.

    Raises
    ------
    InvalidSourceError
        If no usable name can be derived.
    """
    raw = source_url.strip()
    parts = urlsplit(raw)
    path = parts.path if parts.scheme or parts.netloc else raw
    segments = [segment for segment in path.split("/") if segment]
    name = segments[-1].removesuffix(".git") if segments else ""
    if not name or name in {".", ".."} or "\\" in name:
        raise InvalidSourceError(f"Cannot derive a converter name from '{source_url}'.")
    return name


class Installer:
    """Run the install pipeline for one converter source.

    Each stage runs only after the previous one succeeded. Nothing is
    cleaned up after a failed stage.
    """

    def __init__(
        self,
        converters_dir: Path,
        runner: CommandRunner,
        loader: ConverterLoader,
        commands: InstallerCommands | None = None,
    ) -> None:
        self.converters_dir = converters_dir
        self.runner = runner
        self.loader = loader
        self.commands = commands or InstallerCommands()

    def install(
        self,
        source_url: str,
        registry: Registry,
        *,
        force: bool = False,
    ) -> InstallResult:
        """Install the converter published at ``source_url``.

        Parameters
        ----------
        source_url : str
            Repository location handed to the fetch command.
        registry : Registry
            Current registry, used to reject duplicate names.
        force : bool, default=False
            Delete an unregistered leftover directory instead of failing.

        Returns
        -------
        InstallResult
            Derived name, install directory and validated descriptor.

        Raises
        ------
        InstallError
            On a duplicate name, leftover directory or failed stage.
        LoadError
            If the built artifact is missing or invalid.
        """
        validate_source_url(source_url)
        name = derive_name(source_url)
        if registry.find(name) is not None:
            raise AlreadyInstalledError(name)

        directory = self.converters_dir / name
        if directory.exists():
            if not force:
                raise StaleInstallError(directory)
            logger.warning("removing leftover directory %s", directory)
            try:
                shutil.rmtree(directory)
            except OSError as exc:
                raise InstallError(f"Unable to remove {directory}: {exc}") from exc

        self.converters_dir.mkdir(parents=True, exist_ok=True)
        self._run_stage(
            FetchFailedError,
            self.commands.fetch(source_url, directory),
            cwd=self.converters_dir,
            what=f"cloning repository {source_url}",
        )
        self._run_stage(
            DependencyResolutionError,
            self.commands.dependencies(directory),
            cwd=directory,
            what=f"installing dependencies for {name}",
        )
        self._run_stage(
            BuildFailedError,
            self.commands.build(directory),
            cwd=directory,
            what=f"building {name}",
        )

        descriptor = self.loader.load(directory)
        return InstallResult(name=name, directory=directory, descriptor=descriptor)

    def _run_stage(
        self,
        error_cls: type[StageError],
        args: Sequence[str] | None,
        *,
        cwd: Path,
        what: str,
    ) -> None:
        if args is None:
            logger.debug("%s stage: nothing to do", error_cls.stage)
            return

        logger.info("%s stage: %s", error_cls.stage, what)
        try:
            result = self.runner.run(args, cwd=cwd, timeout=self.commands.stage_timeout)
        except CommandError as exc:
            raise error_cls(f"Error {what}: {exc}") from exc

        if not result.ok:
            raise error_cls(
                f"Error {what}: exit code {result.returncode}",
                output=result.output,
            )
