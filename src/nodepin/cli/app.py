# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

import shlex
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated, Final

import typer
from rich.table import Table

from .. import npm_commands
from ..config import ConfigError, load_config
from ..launcher import prepare_launch, run_launch, select_pinned
from ..project import find_project_root, project_scripts
from ..resolver import resolve
from .shared import CLIContext, CLIError, build_cli_logger, require_context
from .typer_ext import create_typer

COMMAND_NOT_FOUND_EXIT: Final[int] = 127
PASSTHROUGH_SETTINGS: Final[dict[str, bool]] = {"allow_extra_args": True, "ignore_unknown_options": True}

app = create_typer(help="Run package-manager commands under the project's pinned Node.js version.")
config_app = create_typer(help="Read and change package-manager configuration.")
app.add_typer(config_app, name="config")


@app.callback()
def main_callback(
    ctx: typer.Context,
    root: Annotated[
        Path,
        typer.Option("--root", "-r", help="Project directory (defaults to the working directory)."),
    ] = Path("."),
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in messages.")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Print debug details.")] = False,
) -> None:
    """Load configuration and install the shared CLI context."""

    try:
        config = load_config()
    except ConfigError as exc:
        build_cli_logger(emoji=not no_emoji, debug=debug).fail(str(exc))
        raise typer.Exit(code=2) from exc
    if no_emoji:
        config.use_emoji = False
    logger = build_cli_logger(emoji=config.use_emoji, debug=debug)
    ctx.obj = CLIContext.create(root.expanduser().resolve(), config, logger)


def _run_pinned(state: CLIContext, argv: Sequence[str], *, cwd: Path | None = None) -> int:
    prepared = prepare_launch(argv, cwd or state.root, state.config, catalog_store=state.catalog_store)
    state.logger.debug(f"source={prepared.source} version={prepared.version} cmd={shlex.join(prepared.cmd)}")
    try:
        completed = run_launch(prepared)
    except FileNotFoundError as exc:
        state.logger.fail(str(exc))
        return COMMAND_NOT_FOUND_EXIT
    return completed.returncode


def _project_root(state: CLIContext) -> Path:
    project_root = find_project_root(state.root, state.config.manifest_filename)
    if project_root is None:
        raise CLIError(f"No {state.config.manifest_filename} found at or above {state.root}")
    return project_root


def _exit_with(state: CLIContext, error: CLIError) -> typer.Exit:
    state.logger.fail(str(error))
    return typer.Exit(code=error.exit_code)


@app.command("versions")
def versions_command(ctx: typer.Context) -> None:
    """List installed runtime versions, marking the pinned selection."""

    state = require_context(ctx)
    catalog = state.catalog_store.scan(state.config.catalog_roots)
    if not catalog:
        state.logger.warn(f"No runtime versions installed under {state.config.install_root}")
        return
    selection = select_pinned(state.root, state.config, catalog_store=state.catalog_store)
    table = Table(title="Installed versions")
    table.add_column("", width=1)
    table.add_column("Version", no_wrap=True)
    table.add_column("Path", overflow="fold")
    for entry in catalog:
        marker = "*" if selection.selected == entry else ""
        table.add_row(marker, entry.name, str(entry.path))
    state.logger.console.print(table)


@app.command("resolve")
def resolve_command(
    ctx: typer.Context,
    specifier: Annotated[str, typer.Argument(help="Version specifier such as 16, v16.2 or node16.")],
) -> None:
    """Print the installed version selected for SPECIFIER."""

    state = require_context(ctx)
    selected = resolve(specifier, state.catalog_store.scan(state.config.catalog_roots))
    if selected is None:
        raise _exit_with(state, CLIError(f"No installed version matches {specifier!r}"))
    state.logger.echo(f"{selected.name}\t{selected.path}")


@app.command("env")
def env_command(
    ctx: typer.Context,
    export: Annotated[bool, typer.Option("--export", help="Prefix each line with 'export'.")] = False,
) -> None:
    """Print the environment overlay for the project's pinned version."""

    state = require_context(ctx)
    selection = select_pinned(state.root, state.config, catalog_store=state.catalog_store)
    if selection.pinned is None:
        raise _exit_with(state, CLIError(f"No {state.config.pin_filename} found at or above {state.root}"))
    if selection.overlay is None:
        state.logger.warn(f"Version {selection.pinned.specifier} is not installed; using the ambient environment.")
        raise typer.Exit(code=1)
    for key, value in selection.overlay.as_dict().items():
        state.logger.echo(f"export {key}={shlex.quote(value)}" if export else f"{key}={value}")


@app.command("run", context_settings=PASSTHROUGH_SETTINGS)
def exec_command(
    ctx: typer.Context,
    command: Annotated[list[str], typer.Argument(help="Command and arguments to run.")],
) -> None:
    """Run COMMAND under the project's pinned runtime version."""

    state = require_context(ctx)
    raise typer.Exit(code=_run_pinned(state, command))


@app.command("scripts")
def scripts_command(ctx: typer.Context) -> None:
    """List the scripts declared by the project manifest."""

    state = require_context(ctx)
    try:
        project_root = _project_root(state)
    except CLIError as exc:
        raise _exit_with(state, exc) from exc
    scripts = project_scripts(project_root, manifest=state.config.manifest_filename, cache=state.parse_cache)
    if not scripts:
        state.logger.warn("No scripts declared")
        return
    for name, body in scripts.items():
        state.logger.echo(f"{name}\t{body}")


@app.command("run-script", context_settings=PASSTHROUGH_SETTINGS)
def run_script_command(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Script declared in the manifest.")],
    args: Annotated[list[str] | None, typer.Argument(help="Arguments forwarded to the script.")] = None,
) -> None:
    """Run a manifest script through the package manager."""

    state = require_context(ctx)
    try:
        project_root = _project_root(state)
    except CLIError as exc:
        raise _exit_with(state, exc) from exc
    scripts = project_scripts(project_root, manifest=state.config.manifest_filename, cache=state.parse_cache)
    if name not in scripts:
        raise _exit_with(state, CLIError(f"Script {name!r} is not declared in {state.config.manifest_filename}"))
    argv = npm_commands.run_script(name, args or (), executable=state.config.package_manager)
    raise typer.Exit(code=_run_pinned(state, argv, cwd=project_root))


@app.command("install")
def install_command(
    ctx: typer.Context,
    packages: Annotated[list[str] | None, typer.Argument(help="Packages to install.")] = None,
    dev: Annotated[bool, typer.Option("--dev", "-D", help="Save as development dependencies.")] = False,
    global_scope: Annotated[bool, typer.Option("--global", "-g", help="Install globally.")] = False,
) -> None:
    """Install PACKAGES, or the manifest's dependencies when none are given."""

    state = require_context(ctx)
    argv = npm_commands.install(
        packages or (),
        dev=dev,
        global_scope=global_scope,
        executable=state.config.package_manager,
    )
    raise typer.Exit(code=_run_pinned(state, argv))


GlobalOption = Annotated[bool, typer.Option("--global", "-g", help="Operate on the global configuration.")]


@config_app.command("get")
def config_get_command(ctx: typer.Context, key: str, global_scope: GlobalOption = False) -> None:
    """Print a configuration value."""

    state = require_context(ctx)
    try:
        argv = npm_commands.config_get(key, global_scope=global_scope, executable=state.config.package_manager)
    except ValueError as exc:
        raise _exit_with(state, CLIError(str(exc), exit_code=2)) from exc
    raise typer.Exit(code=_run_pinned(state, argv))


@config_app.command("set")
def config_set_command(ctx: typer.Context, key: str, value: str, global_scope: GlobalOption = False) -> None:
    """Set a configuration value."""

    state = require_context(ctx)
    try:
        argv = npm_commands.config_set(key, value, global_scope=global_scope, executable=state.config.package_manager)
    except ValueError as exc:
        raise _exit_with(state, CLIError(str(exc), exit_code=2)) from exc
    raise typer.Exit(code=_run_pinned(state, argv))


@config_app.command("delete")
def config_delete_command(ctx: typer.Context, key: str, global_scope: GlobalOption = False) -> None:
    """Delete a configuration value."""

    state = require_context(ctx)
    try:
        argv = npm_commands.config_delete(key, global_scope=global_scope, executable=state.config.package_manager)
    except ValueError as exc:
        raise _exit_with(state, CLIError(str(exc), exit_code=2)) from exc
    raise typer.Exit(code=_run_pinned(state, argv))


@config_app.command("list")
def config_list_command(ctx: typer.Context, global_scope: GlobalOption = False) -> None:
    """List configuration values."""

    state = require_context(ctx)
    argv = npm_commands.config_list(global_scope=global_scope, executable=state.config.package_manager)
    raise typer.Exit(code=_run_pinned(state, argv))


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main"]
