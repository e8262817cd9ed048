# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors, context)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.text import Text

from ..catalog import CatalogStore, default_catalog_store
from ..config import NodepinConfig
from ..logging import fail as core_fail
from ..logging import get_console
from ..logging import ok as core_ok
from ..logging import warn as core_warn
from ..parse_cache import ParseCache, default_parse_cache


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    console: Console
    use_emoji: bool
    debug_enabled: bool = False

    def fail(self, message: str) -> None:
        """Log a failure message honouring emoji preferences."""

        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        """Log a warning message honouring emoji preferences."""

        core_warn(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        """Log a success message honouring emoji preferences."""

        core_ok(message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout using Typer's echo helper."""

        typer.echo(message)

    def debug(self, message: str) -> None:
        """Emit a debug message when debug logging is enabled."""

        if self.debug_enabled:
            self.console.print(Text("[debug] ", style="bold cyan") + Text(message, style="dim"))


def build_cli_logger(*, emoji: bool, debug: bool = False, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` bound to the shared console for these preferences."""

    console = get_console(use_emoji=emoji, use_color=False if no_color else None)
    return CLILogger(console=console, use_emoji=emoji, debug_enabled=debug)


@dataclass(slots=True)
class CLIContext:
    """State shared by every command of one CLI invocation."""

    root: Path
    config: NodepinConfig
    logger: CLILogger
    catalog_store: CatalogStore
    parse_cache: ParseCache

    @classmethod
    def create(cls, root: Path, config: NodepinConfig, logger: CLILogger) -> CLIContext:
        """Return a context using the process-wide stores."""

        return cls(
            root=root,
            config=config,
            logger=logger,
            catalog_store=default_catalog_store(),
            parse_cache=default_parse_cache(),
        )


def require_context(ctx: typer.Context) -> CLIContext:
    """Return the :class:`CLIContext` installed by the application callback."""

    state = ctx.obj
    if not isinstance(state, CLIContext):
        raise CLIError("CLI context was not initialised", exit_code=2)
    return state


__all__ = [
    "CLIContext",
    "CLIError",
    "CLILogger",
    "build_cli_logger",
    "require_context",
]
