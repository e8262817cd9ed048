# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants describing nvm-style installation layouts."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

DEFAULT_INSTALL_ROOT: Final[Path] = Path("~/.nvm")
VERSIONS_SUBDIR: Final[str] = "versions"
BIN_SUBDIR: Final[str] = "bin"
LIB_SUBDIR: Final[str] = "lib"
INCLUDE_SUBDIR: Final[str] = "include"

DEFAULT_RUNTIME: Final[str] = "node"
DEFAULT_FAMILY: Final[str] = "node"
DEFAULT_PIN_FILENAME: Final[str] = ".nvmrc"
DEFAULT_MANIFEST_FILENAME: Final[str] = "package.json"
DEFAULT_PACKAGE_MANAGER: Final[str] = "npm"

NVM_BIN_VAR: Final[str] = "NVM_BIN"
NVM_PATH_VAR: Final[str] = "NVM_PATH"
NVM_INCLUDE_VAR: Final[str] = "NVM_INCLUDE"
PATH_VAR: Final[str] = "PATH"
AUXILIARY_VARIABLES: Final[tuple[str, ...]] = (NVM_BIN_VAR, NVM_PATH_VAR, NVM_INCLUDE_VAR)

# Installed version directories are always full three-part versions.
VERSION_DIR_PATTERN: Final[re.Pattern[str]] = re.compile(r"v\d+\.\d+\.\d+")

# Older runtime families are rewritten to their canonical alias.
FAMILY_ALIASES: Final[dict[str, str]] = {
    "node": "",
    "io.js": "iojs",
    "iojs": "iojs",
}

SPECIFIER_PREFIXES: Final[tuple[str, ...]] = ("v", "node", "iojs")

__all__ = [
    "AUXILIARY_VARIABLES",
    "BIN_SUBDIR",
    "DEFAULT_FAMILY",
    "DEFAULT_INSTALL_ROOT",
    "DEFAULT_MANIFEST_FILENAME",
    "DEFAULT_PACKAGE_MANAGER",
    "DEFAULT_PIN_FILENAME",
    "DEFAULT_RUNTIME",
    "FAMILY_ALIASES",
    "INCLUDE_SUBDIR",
    "LIB_SUBDIR",
    "NVM_BIN_VAR",
    "NVM_INCLUDE_VAR",
    "NVM_PATH_VAR",
    "PATH_VAR",
    "SPECIFIER_PREFIXES",
    "VERSIONS_SUBDIR",
    "VERSION_DIR_PATTERN",
]
