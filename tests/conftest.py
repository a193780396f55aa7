"""Shared pytest configuration, marker assignment and converter fixtures."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from format_converter.adapters.loaders import PluginLoader
from format_converter.application.installer import Installer
from format_converter.application.manager import ConverterManager
from format_converter.application.results import CommandResult
from format_converter.config import Settings

CONVERTER_SOURCE = '''\
class _Converter:
    name = {name!r}
    description = {description!r}
    source_formats = {sources!r}
    target_formats = {targets!r}

    def convert(self, input_path, output_path, options):
        with open(input_path, encoding="utf-8") as src:
            text = src.read()
        with open(output_path, "w", encoding="utf-8") as dst:
            dst.write(text.upper() if options.get("upper") else text)
        return True


CONVERTER = _Converter()
'''


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


def write_converter_artifact(
    directory: Path,
    *,
    name: str,
    sources: Sequence[str] = ("json",),
    targets: Sequence[str] = ("yaml",),
    description: str = "Test converter",
) -> Path:
    """Write a loadable ``dist/converter.py`` under ``directory``."""
    artifact = directory / "dist" / "converter.py"
    artifact.parent.mkdir(parents=True, exist_ok=True)
    artifact.write_text(
        CONVERTER_SOURCE.format(
            name=name,
            description=description,
            sources=list(sources),
            targets=list(targets),
        ),
        encoding="utf-8",
    )
    return artifact


class FakeRunner:
    """Command runner that materializes published repositories on clone.

    Dependency and build stages succeed unless a return code is configured
    for them through ``returncodes``.
    """

    def __init__(self) -> None:
        self.repos: dict[str, Callable[[Path], None]] = {}
        self.returncodes: dict[str, int] = {}
        self.calls: list[tuple[str, tuple[str, ...], Path | None]] = []

    def publish(
        self,
        url: str,
        *,
        name: str,
        sources: Sequence[str] = ("json",),
        targets: Sequence[str] = ("yaml",),
        description: str = "Test converter",
        with_artifact: bool = True,
        requirements: bool = False,
        build_script: bool = False,
    ) -> None:
        """Make ``url`` clonable, producing a converter repository."""

        def populate(directory: Path) -> None:
            directory.mkdir(parents=True)
            (directory / "README.md").write_text(name, encoding="utf-8")
            if requirements:
                (directory / "requirements.txt").write_text("", encoding="utf-8")
            if build_script:
                (directory / "build.py").write_text("", encoding="utf-8")
            if with_artifact:
                write_converter_artifact(
                    directory,
                    name=name,
                    sources=sources,
                    targets=targets,
                    description=description,
                )

        self.repos[url] = populate

    def stages(self) -> list[str]:
        return [stage for stage, _args, _cwd in self.calls]

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        del timeout
        argv = tuple(str(arg) for arg in args)
        if "clone" in argv:
            stage = "fetch"
        elif "pip" in argv:
            stage = "dependencies"
        else:
            stage = "build"
        self.calls.append((stage, argv, cwd))

        code = self.returncodes.get(stage, 0)
        if code != 0:
            return CommandResult(args=argv, returncode=code, stderr=f"{stage} failed")

        if stage == "fetch":
            url, destination = argv[-2], Path(argv[-1])
            populate = self.repos.get(url)
            if populate is None:
                return CommandResult(
                    args=argv, returncode=128, stderr="fatal: repository not found"
                )
            populate(destination)
        return CommandResult(args=argv, returncode=0)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temporary base directory."""
    return Settings(base_dir=tmp_path / "fc-home")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def write_converter() -> Callable[..., Path]:
    """Return a helper writing converter artifacts into a directory."""
    return write_converter_artifact


@pytest.fixture
def make_manager(
    settings: Settings, fake_runner: FakeRunner
) -> Callable[..., ConverterManager]:
    """Build initialized managers sharing the same base directory and runner."""

    def _make(initialize: bool = True) -> ConverterManager:
        loader = PluginLoader()
        installer = Installer(settings.converters_dir, fake_runner, loader)
        manager = ConverterManager(settings, loader=loader, installer=installer)
        if initialize:
            assert manager.initialize()
        return manager

    return _make
