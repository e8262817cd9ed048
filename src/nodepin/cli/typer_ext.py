# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer subclasses that render help with arguments first and options sorted."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click
import typer
from click.core import Argument, Context, Parameter
from click.formatting import HelpFormatter
from typer.core import TyperCommand, TyperGroup

CommandCallback = TypeVar("CommandCallback", bound=Callable[..., Any])


def _option_sort_key(param: Parameter) -> str:
    """Return the long option name of ``param`` without dashes, lower-cased."""

    names = [*getattr(param, "opts", ()), *getattr(param, "secondary_opts", ())]
    long_names = sorted(name for name in names if name.startswith("--"))
    chosen = long_names[0] if long_names else (names[0] if names else param.name or "")
    return chosen.lstrip("-").lower()


def _write_sorted_params(command: click.Command, ctx: Context, formatter: HelpFormatter) -> None:
    arguments: list[tuple[str, str]] = []
    options: list[tuple[str, tuple[str, str]]] = []
    for param in command.get_params(ctx):
        record = param.get_help_record(ctx)
        if record is None:
            continue
        if isinstance(param, Argument):
            arguments.append(record)
        else:
            options.append((_option_sort_key(param), record))

    if arguments:
        with formatter.section("Arguments"):
            formatter.write_dl(arguments)
    if options:
        options.sort(key=lambda item: item[0])
        with formatter.section("Options"):
            formatter.write_dl([record for _, record in options])


class SortedTyperCommand(TyperCommand):
    """Command whose help lists positional arguments, then options alphabetically."""

    def format_options(self, ctx: Context, formatter: HelpFormatter) -> None:
        _write_sorted_params(self, ctx, formatter)


class SortedTyperGroup(TyperGroup):
    """Group with sorted options that registers :class:`SortedTyperCommand` subcommands."""

    command_class = SortedTyperCommand

    def format_options(self, ctx: Context, formatter: HelpFormatter) -> None:
        _write_sorted_params(self, ctx, formatter)
        self.format_commands(ctx, formatter)


class SortedTyper(typer.Typer):
    """Typer application using sorted help for the group and its commands."""

    def __init__(self, *args: Any, cls: type[TyperGroup] | None = None, **kwargs: Any) -> None:
        super().__init__(*args, cls=cls or SortedTyperGroup, **kwargs)

    def command(
        self,
        name: str | None = None,
        *,
        cls: type[TyperCommand] | None = None,
        **kwargs: Any,
    ) -> Callable[[CommandCallback], CommandCallback]:
        return super().command(name, cls=cls or SortedTyperCommand, **kwargs)


def create_typer(**kwargs: Any) -> SortedTyper:
    """Return a :class:`SortedTyper` with plain Click help shown when invoked bare.

    Rich help panels bypass ``format_options``, so markup mode is disabled to
    keep the sorted listings.
    """

    kwargs.setdefault("no_args_is_help", True)
    kwargs.setdefault("add_completion", False)
    kwargs.setdefault("rich_markup_mode", None)
    return SortedTyper(**kwargs)


__all__ = ["SortedTyper", "SortedTyperCommand", "SortedTyperGroup", "create_typer"]
