# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve a project's pinned Node.js version and run tools under it."""

from __future__ import annotations

from .catalog import Catalog, CatalogStore, InstalledVersion, default_catalog_store, scan_catalog
from .config import ConfigError, NodepinConfig, load_config
from .environment import EnvironmentOverlay, synthesize_environment
from .launcher import PreparedLaunch, prepare_launch, run_launch, run_shell_command
from .parse_cache import DocumentShape, ParseCache, default_parse_cache, read_parsed
from .pinfile import PinnedVersion, read_pinned_version
from .resolver import InvalidSpecifierError, normalize_specifier, resolve, resolve_from_roots
from .versioning import RuntimeVersion, full_compare, parse_version, partial_match

__all__ = [
    "Catalog",
    "CatalogStore",
    "ConfigError",
    "DocumentShape",
    "EnvironmentOverlay",
    "InstalledVersion",
    "InvalidSpecifierError",
    "NodepinConfig",
    "ParseCache",
    "PinnedVersion",
    "PreparedLaunch",
    "RuntimeVersion",
    "default_catalog_store",
    "default_parse_cache",
    "full_compare",
    "load_config",
    "normalize_specifier",
    "parse_version",
    "partial_match",
    "prepare_launch",
    "read_parsed",
    "read_pinned_version",
    "resolve",
    "resolve_from_roots",
    "run_launch",
    "run_shell_command",
    "scan_catalog",
    "synthesize_environment",
]
