# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Prepare and run package-manager commands under the pinned runtime."""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .catalog import CatalogStore, InstalledVersion, default_catalog_store
from .config import NodepinConfig
from .environment import EnvironmentOverlay, synthesize_environment
from .logging import warn
from .pinfile import PinnedVersion, read_pinned_version
from .process_utils import run_command
from .resolver import resolve

LaunchSource = Literal["pinned", "ambient"]


class PreparedLaunch(BaseModel):
    """Command ready for execution including its environment."""

    model_config = ConfigDict(validate_assignment=True)

    cmd: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    cwd: Path
    version: str | None = None
    source: LaunchSource = "ambient"


@dataclass(frozen=True, slots=True)
class PinnedSelection:
    """Outcome of resolving the pinned version for a directory."""

    pinned: PinnedVersion | None = None
    selected: InstalledVersion | None = None
    overlay: EnvironmentOverlay | None = None


def select_pinned(
    cwd: Path,
    config: NodepinConfig,
    *,
    env: Mapping[str, str] | None = None,
    catalog_store: CatalogStore | None = None,
) -> PinnedSelection:
    """Resolve the version pinned for ``cwd`` and synthesise its overlay.

    Args:
        cwd: Directory whose pin file governs the launch.
        config: Effective configuration.
        env: Ambient environment; defaults to :data:`os.environ`.
        catalog_store: Catalog store to scan through.

    Returns:
        PinnedSelection: Pin, selected version and overlay; each is ``None``
        when the previous step produced nothing.
    """

    ambient = env if env is not None else os.environ
    pinned = read_pinned_version(cwd, config.pin_filename)
    if pinned is None:
        return PinnedSelection()
    store = catalog_store if catalog_store is not None else default_catalog_store()
    selected = resolve(pinned.specifier, store.scan(config.catalog_roots))
    overlay = synthesize_environment(
        selected,
        ambient,
        install_root=config.install_root,
        runtime=config.runtime,
    )
    return PinnedSelection(pinned=pinned, selected=selected, overlay=overlay)


def prepare_launch(
    argv: Sequence[str],
    cwd: Path,
    config: NodepinConfig,
    *,
    env: Mapping[str, str] | None = None,
    catalog_store: CatalogStore | None = None,
) -> PreparedLaunch:
    """Return ``argv`` prepared to run under the version pinned for ``cwd``.

    When a pin exists but no installed version satisfies it, a warning is
    emitted and the ambient environment is used unmodified.
    """

    ambient = dict(env if env is not None else os.environ)
    selection = select_pinned(cwd, config, env=ambient, catalog_store=catalog_store)
    if selection.overlay is None or selection.selected is None:
        if selection.pinned is not None:
            warn(
                f"Version {selection.pinned.specifier} pinned by {selection.pinned.source} "
                "is not installed; runtime versions may mismatch.",
                use_emoji=config.use_emoji,
            )
        return PreparedLaunch(cmd=list(argv), env=ambient, cwd=cwd)
    return PreparedLaunch(
        cmd=list(argv),
        env=selection.overlay.merged(ambient),
        cwd=cwd,
        version=selection.selected.name,
        source="pinned",
    )


def run_launch(
    prepared: PreparedLaunch,
    *,
    check: bool = False,
    capture_output: bool = False,
    timeout: float | None = None,
) -> CompletedProcess[str]:
    """Run ``prepared`` with its environment and working directory."""

    return run_command(
        prepared.cmd,
        cwd=prepared.cwd,
        env=prepared.env,
        check=check,
        capture_output=capture_output,
        timeout=timeout,
    )


def run_shell_command(
    command: str,
    cwd: Path,
    config: NodepinConfig,
    *,
    env: Mapping[str, str] | None = None,
    catalog_store: CatalogStore | None = None,
    capture_output: bool = False,
    timeout: float | None = None,
) -> CompletedProcess[str]:
    """Split ``command`` without a shell and run it under the pinned runtime."""

    argv = shlex.split(command)
    if not argv:
        raise ValueError("command must not be empty")
    prepared = prepare_launch(argv, cwd, config, env=env, catalog_store=catalog_store)
    return run_launch(prepared, capture_output=capture_output, timeout=timeout)


__all__ = [
    "LaunchSource",
    "PinnedSelection",
    "PreparedLaunch",
    "prepare_launch",
    "run_launch",
    "run_shell_command",
    "select_pinned",
]
