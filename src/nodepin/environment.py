# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Synthesise subprocess environments that run under a selected runtime."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .catalog import InstalledVersion
from .constants import (
    AUXILIARY_VARIABLES,
    BIN_SUBDIR,
    DEFAULT_RUNTIME,
    INCLUDE_SUBDIR,
    LIB_SUBDIR,
    NVM_BIN_VAR,
    NVM_INCLUDE_VAR,
    NVM_PATH_VAR,
    PATH_VAR,
    VERSIONS_SUBDIR,
)


class EnvironmentOverlay(BaseModel):
    """Variables that supersede the ambient environment for a subprocess."""

    model_config = ConfigDict(frozen=True)

    variables: dict[str, str] = Field(default_factory=dict)
    path_entries: list[str] = Field(default_factory=list)
    overridden: tuple[str, ...] = AUXILIARY_VARIABLES

    @property
    def path(self) -> str:
        """Return the synthesised PATH value."""

        return os.pathsep.join(self.path_entries)

    def as_dict(self) -> dict[str, str]:
        """Return the overlay variables including ``PATH``."""

        return {**self.variables, PATH_VAR: self.path}

    def merged(self, ambient_env: Mapping[str, str]) -> dict[str, str]:
        """Return ``ambient_env`` with the overlay applied on top.

        Ambient variables named in :attr:`overridden` are removed first so the
        overlay values win unambiguously.
        """

        env = {key: value for key, value in ambient_env.items() if key not in self.overridden}
        env.update(self.as_dict())
        return env


def foreign_bin_pattern(install_root: Path | str) -> re.Pattern[str]:
    """Return the pattern matching ``bin`` directories of any installed version.

    Args:
        install_root: Installation root hint such as ``~/.nvm``.

    Returns:
        re.Pattern[str]: Pattern matching ``<root>/(versions/<family>/)?vX.Y.Z/bin``
        with an optional trailing separator.
    """

    prefix = re.escape(str(Path(install_root).expanduser()).rstrip("/"))
    return re.compile(
        rf"^{prefix}/(?:{VERSIONS_SUBDIR}/[^/]+/)?v\d+\.\d+\.\d+/{BIN_SUBDIR}/?$",
    )


def split_path(value: str | None) -> list[str]:
    """Split a PATH string into its non-empty entries."""

    if not value:
        return []
    return [entry for entry in value.split(os.pathsep) if entry]


def synthesize_environment(
    selected: InstalledVersion | None,
    ambient_env: Mapping[str, str],
    *,
    install_root: Path | str,
    ambient_path: Sequence[str] | None = None,
    runtime: str = DEFAULT_RUNTIME,
) -> EnvironmentOverlay | None:
    """Derive the environment overlay that activates ``selected``.

    The selected version's ``bin`` directory becomes the first PATH entry.
    Ambient PATH entries that belong to any installed version beneath
    ``install_root`` are dropped, while every other entry keeps its relative
    order.

    Args:
        selected: Resolved installed version, or ``None`` when nothing matched.
        ambient_env: Environment the subprocess would otherwise inherit.
        install_root: Installation root used to recognise foreign ``bin`` dirs.
        ambient_path: Explicit PATH entries; defaults to ``ambient_env["PATH"]``.
        runtime: Runtime name used for the ``lib`` and ``include`` subdirectories.

    Returns:
        EnvironmentOverlay | None: Overlay for ``selected``, or ``None`` when no
        version was selected and callers must use the ambient environment.
    """

    if selected is None:
        return None

    version_path = Path(selected.path)
    bin_dir = str(version_path / BIN_SUBDIR)
    variables = {
        NVM_BIN_VAR: bin_dir,
        NVM_PATH_VAR: str(version_path / LIB_SUBDIR / runtime),
        NVM_INCLUDE_VAR: str(version_path / INCLUDE_SUBDIR / runtime),
    }

    entries = list(ambient_path) if ambient_path is not None else split_path(ambient_env.get(PATH_VAR))
    pattern = foreign_bin_pattern(install_root)
    survivors = [entry for entry in entries if entry and not pattern.match(entry)]
    return EnvironmentOverlay(variables=variables, path_entries=[bin_dir, *survivors])


__all__ = [
    "EnvironmentOverlay",
    "foreign_bin_pattern",
    "split_path",
    "synthesize_environment",
]
