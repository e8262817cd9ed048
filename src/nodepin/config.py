# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and loaders for nodepin."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .catalog import default_roots
from .constants import (
    DEFAULT_INSTALL_ROOT,
    DEFAULT_MANIFEST_FILENAME,
    DEFAULT_PACKAGE_MANAGER,
    DEFAULT_PIN_FILENAME,
    DEFAULT_RUNTIME,
)

CONFIG_ENV_VAR: Final[str] = "NODEPIN_CONFIG"
INSTALL_ROOT_ENV_VAR: Final[str] = "NVM_DIR"
PACKAGE_MANAGER_ENV_VAR: Final[str] = "NODEPIN_PACKAGE_MANAGER"
NO_EMOJI_ENV_VAR: Final[str] = "NODEPIN_NO_EMOJI"
DEFAULT_CONFIG_PATH: Final[Path] = Path("~/.config/nodepin/config.toml")


class ConfigError(ValueError):
    """Raised when configuration input is invalid."""


class NodepinConfig(BaseModel):
    """Settings controlling version resolution and package-manager launches."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    install_root: Path = Field(default_factory=lambda: DEFAULT_INSTALL_ROOT.expanduser())
    runtime: str = DEFAULT_RUNTIME
    pin_filename: str = DEFAULT_PIN_FILENAME
    manifest_filename: str = DEFAULT_MANIFEST_FILENAME
    package_manager: str = DEFAULT_PACKAGE_MANAGER
    use_emoji: bool = True

    @field_validator("install_root", mode="after")
    @classmethod
    def _expand_root(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("runtime", "pin_filename", "manifest_filename", "package_manager")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("value must not be empty")
        return value.strip()

    @property
    def catalog_roots(self) -> tuple[Path, ...]:
        """Return the directories scanned for installed versions."""

        return default_roots(self.install_root)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file {path}: {exc}") from exc


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if install_root := env.get(INSTALL_ROOT_ENV_VAR, "").strip():
        overrides["install_root"] = install_root
    if package_manager := env.get(PACKAGE_MANAGER_ENV_VAR, "").strip():
        overrides["package_manager"] = package_manager
    if env.get(NO_EMOJI_ENV_VAR):
        overrides["use_emoji"] = False
    return overrides


def load_config(
    *,
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
) -> NodepinConfig:
    """Build the effective configuration from defaults, TOML and environment.

    Args:
        env: Environment mapping consulted instead of :data:`os.environ`.
        path: Explicit configuration file; otherwise ``NODEPIN_CONFIG`` or the
            per-user default location. A missing file is ignored.

    Returns:
        NodepinConfig: Validated configuration.

    Raises:
        ConfigError: If the file cannot be parsed or a value is invalid.
    """

    environment = env if env is not None else os.environ
    config_path = path or Path(environment.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH).expanduser()
    payload: dict[str, Any] = _read_toml(config_path) if config_path.is_file() else {}
    payload.update(_env_overrides(environment))
    try:
        return NodepinConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid nodepin configuration: {exc}") from exc


__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigError",
    "NodepinConfig",
    "load_config",
]
