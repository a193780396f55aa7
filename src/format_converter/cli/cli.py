#!/usr/bin/env python3
"""
format_converter.cli.cli

Typer-based ``fc`` command line for managing converters and converting files.

Examples
--------
Install a converter and convert a file:

    fc add https://github.com/example/json2yaml
    fc convert data.json data.yaml

Manage installed converters:

    fc converter list
    fc converter remove json2yaml
"""

from __future__ import annotations

import logging
import shutil
import sys
import traceback
from pathlib import Path
from typing import TYPE_CHECKING

import typer

from format_converter.config import Settings
from format_converter.errors import FormatConverterError, NoConverterError

if TYPE_CHECKING:
    from format_converter.application.manager import ConverterManager

app = typer.Typer(
    name="fc",
    help="Your favorite file converter.",
    no_args_is_help=True,
)
converter_app = typer.Typer(help="Manage converters.", no_args_is_help=True)
app.add_typer(converter_app, name="converter")

FORCE_ADD_HELP = "Delete a directory left by a failed install before retrying."
ADD_HINT = 'Use "fc converter add <url>" to add a new converter.'
LIST_HINT = 'Use "fc converter list" to see available converters.'


# -----------------------------
# Utilities
# -----------------------------
def _print_error(exc: BaseException, debug: bool) -> int:
    """Print a user-friendly error.

    Parameters
    ----------
    exc : BaseException
        Error that aborted the command.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.secho(f"✗ {type(exc).__name__}: {exc}", fg=typer.colors.RED, err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _coerce_option_value(raw: str) -> object:
    """Best-effort coercion for CLI key/value options."""
    lowered = raw.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    try:
        if "." in raw:
            return float(raw)
        return int(raw)
    except ValueError:
        return raw


def _parse_options(option_items: list[str] | None) -> dict[str, object]:
    """Parse repeatable KEY=VALUE converter options."""
    parsed: dict[str, object] = {}
    for item in option_items or []:
        if "=" not in item:
            raise typer.BadParameter(
                f"Invalid option entry '{item}'. Use KEY=VALUE format."
            )
        key, raw_value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter("Option key cannot be empty.")
        parsed[key] = _coerce_option_value(raw_value)
    return parsed


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s" if debug else "%(message)s",
        force=True,
    )


def _debug(ctx: typer.Context) -> bool:
    return bool((ctx.obj or {}).get("debug", False))


def _manager(ctx: typer.Context) -> ConverterManager:
    """Return the context's initialized manager, creating it on first use."""
    state = ctx.obj
    manager = state.get("manager")
    if manager is not None:
        return manager

    from format_converter.api import create_manager

    try:
        manager = create_manager(state["settings"])
    except FormatConverterError as exc:
        raise typer.Exit(code=_print_error(exc, _debug(ctx)))
    state["manager"] = manager
    return manager


def _exit_for(manager: ConverterManager, debug: bool) -> typer.Exit:
    error = manager.last_error
    if error is None:
        return typer.Exit(code=1)
    if debug:
        _print_error(error, debug)
    code = getattr(error, "exit_code", None)
    return typer.Exit(code=code if isinstance(code, int) and code > 0 else 1)


def _add(ctx: typer.Context, url: str, force: bool) -> None:
    manager = _manager(ctx)
    typer.echo(f"Adding converter: {url}")
    if not manager.add_converter(url, force=force):
        typer.secho(f"Failed to add converter: {url}", fg=typer.colors.RED, err=True)
        raise _exit_for(manager, _debug(ctx))
    typer.secho(f"✓ Added converter: {url}", fg=typer.colors.GREEN)


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False, "--debug", help="Show full error details (also enabled by DEBUG=1)."
    ),
) -> None:
    """Initialize shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug error output.
    """
    settings = Settings.from_env()
    if debug and not settings.debug:
        settings = settings.model_copy(update={"debug": True})
    _configure_logging(settings.debug)
    ctx.obj = {"debug": settings.debug, "settings": settings, "manager": None}


# -----------------------------
# Commands
# -----------------------------
@app.command("add")
def add_cmd(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Repository URL of the converter."),
    force: bool = typer.Option(False, "--force", help=FORCE_ADD_HELP),
) -> None:
    """Add a new converter."""
    _add(ctx, url, force)


@converter_app.command("add")
def converter_add_cmd(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Repository URL of the converter."),
    force: bool = typer.Option(False, "--force", help=FORCE_ADD_HELP),
) -> None:
    """Add a new converter."""
    _add(ctx, url, force)


@converter_app.command("remove")
def converter_remove_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the converter to remove."),
) -> None:
    """Remove a converter."""
    manager = _manager(ctx)
    typer.echo(f"Removing converter: {name}")
    if not manager.remove_converter(name):
        typer.secho(f"Failed to remove converter: {name}", fg=typer.colors.RED, err=True)
        raise _exit_for(manager, _debug(ctx))
    typer.secho(f"✓ Removed converter: {name}", fg=typer.colors.GREEN)


@converter_app.command("list")
def converter_list_cmd(ctx: typer.Context) -> None:
    """List available converters."""
    converters = _manager(ctx).list_converters()
    if not converters:
        typer.echo("No converters found.")
        typer.echo(ADD_HINT)
        return

    typer.echo("Available converters:")
    for summary in converters:
        typer.echo(f"  {summary.name} - {summary.description}")
        for source, target in summary.formats:
            typer.echo(f"    {source} -> {target}")


@converter_app.command("options")
def converter_options_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Converter name as shown by 'fc converter list'."),
) -> None:
    """Show the options a converter accepts."""
    descriptor = _manager(ctx).get_converter_by_name(name)
    if descriptor is None:
        typer.secho(f"Converter '{name}' is not loaded.", fg=typer.colors.RED, err=True)
        typer.echo(LIST_HINT, err=True)
        raise typer.Exit(code=6)

    try:
        declared = descriptor.options()
    except FormatConverterError as exc:
        raise typer.Exit(code=_print_error(exc, _debug(ctx)))

    if not declared:
        typer.echo(f"{name} declares no options.")
        return
    for key, spec in declared.items():
        flags = "required" if spec.required else f"default: {spec.default!r}"
        typer.echo(f"  {key} ({flags}) - {spec.description}")


@app.command("convert")
def convert_cmd(
    ctx: typer.Context,
    input_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Path to the input file.",
    ),
    output_path: Path = typer.Argument(..., help="Path to the output file."),
    to: str | None = typer.Option(
        None,
        "--to",
        help="Target format, required when the output path has no extension.",
    ),
    option: list[str] | None = typer.Option(
        None, "--option", "-o", help="Converter option KEY=VALUE (repeatable)."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite the output file if it already exists."
    ),
) -> None:
    """Convert a file from one format to another."""
    debug = _debug(ctx)
    option_payload = _parse_options(option)
    manager = _manager(ctx)

    try:
        from format_converter.api import convert_file

        result = convert_file(
            manager,
            input_path,
            output_path,
            target_format=to,
            options=option_payload,
            overwrite=force,
        )
    except FormatConverterError as exc:
        code = _print_error(exc, debug)
        if isinstance(exc, NoConverterError):
            typer.echo(LIST_HINT, err=True)
        raise typer.Exit(code=code)
    except Exception as exc:
        raise typer.Exit(code=_print_error(exc, debug))
    typer.secho(f"✓ Conversion successful: {result.output_path}", fg=typer.colors.GREEN)


@app.command("doctor")
def doctor_cmd(ctx: typer.Context) -> None:
    """Print environment details and converter health."""
    settings: Settings = ctx.obj["settings"]
    typer.echo(f"Python: {sys.version.split()[0]}")
    git = shutil.which("git")
    typer.echo(f"git: {git or '<not found>'}")
    typer.echo(f"base dir: {settings.base_dir}")
    typer.echo(f"registry: {settings.registry_path}")

    manager = _manager(ctx)
    registered = manager.registry.names()
    loaded = manager.index.names()
    typer.echo(f"registered converters: {len(registered)}")
    typer.echo(f"loaded converters: {len(loaded)}")
    unloaded = manager.unloaded_entries()
    if unloaded:
        typer.echo(f"registered but not loaded: {', '.join(unloaded)}")


if __name__ == "__main__":
    app()
