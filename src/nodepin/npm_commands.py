# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Argument vectors for package-manager invocations."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from .constants import DEFAULT_PACKAGE_MANAGER

GLOBAL_FLAG: Final[str] = "--global"
SAVE_DEV_FLAG: Final[str] = "--save-dev"


def _scope(global_scope: bool) -> list[str]:
    return [GLOBAL_FLAG] if global_scope else []


def _require(value: str, label: str) -> str:
    if not value.strip():
        raise ValueError(f"{label} must not be empty")
    return value


def install(
    packages: Sequence[str] = (),
    *,
    dev: bool = False,
    global_scope: bool = False,
    executable: str = DEFAULT_PACKAGE_MANAGER,
) -> list[str]:
    """Return ``npm install`` arguments; no packages installs the manifest."""

    cmd = [executable, "install", *packages]
    if dev:
        cmd.append(SAVE_DEV_FLAG)
    return cmd + _scope(global_scope)


def uninstall(
    packages: Sequence[str],
    *,
    global_scope: bool = False,
    executable: str = DEFAULT_PACKAGE_MANAGER,
) -> list[str]:
    """Return ``npm uninstall`` arguments for ``packages``."""

    if not packages:
        raise ValueError("uninstall requires at least one package")
    return [executable, "uninstall", *packages, *_scope(global_scope)]


def run_script(
    name: str,
    args: Sequence[str] = (),
    *,
    executable: str = DEFAULT_PACKAGE_MANAGER,
) -> list[str]:
    """Return ``npm run`` arguments, forwarding ``args`` after ``--``."""

    cmd = [executable, "run", _require(name, "script name")]
    if args:
        cmd.extend(["--", *args])
    return cmd


def config_get(key: str, *, global_scope: bool = False, executable: str = DEFAULT_PACKAGE_MANAGER) -> list[str]:
    """Return ``npm config get`` arguments."""

    return [executable, "config", "get", _require(key, "config key"), *_scope(global_scope)]


def config_set(
    key: str,
    value: str,
    *,
    global_scope: bool = False,
    executable: str = DEFAULT_PACKAGE_MANAGER,
) -> list[str]:
    """Return ``npm config set`` arguments."""

    return [executable, "config", "set", f"{_require(key, 'config key')}={value}", *_scope(global_scope)]


def config_delete(key: str, *, global_scope: bool = False, executable: str = DEFAULT_PACKAGE_MANAGER) -> list[str]:
    """Return ``npm config delete`` arguments."""

    return [executable, "config", "delete", _require(key, "config key"), *_scope(global_scope)]


def config_list(*, global_scope: bool = False, executable: str = DEFAULT_PACKAGE_MANAGER) -> list[str]:
    """Return ``npm config list`` arguments."""

    return [executable, "config", "list", *_scope(global_scope)]


__all__ = [
    "GLOBAL_FLAG",
    "config_delete",
    "config_get",
    "config_list",
    "config_set",
    "install",
    "run_script",
    "uninstall",
]
