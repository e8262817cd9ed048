# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project manifest helpers backed by the parse cache."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Final

from .constants import DEFAULT_MANIFEST_FILENAME
from .parse_cache import DocumentShape, ParseCache, default_parse_cache
from .pinfile import iter_ancestors

SCRIPTS_KEY: Final[str] = "scripts"
DEPENDENCIES_KEY: Final[str] = "dependencies"
DEV_DEPENDENCIES_KEY: Final[str] = "devDependencies"


def find_project_root(start: Path, manifest: str = DEFAULT_MANIFEST_FILENAME) -> Path | None:
    """Return the nearest directory at or above ``start`` holding ``manifest``."""

    for directory in iter_ancestors(start):
        if (directory / manifest).is_file():
            return directory
    return None


def _manifest(root: Path, manifest: str, cache: ParseCache | None) -> Mapping[str, object]:
    store = cache if cache is not None else default_parse_cache()
    document = store.read(root / manifest, DocumentShape.MAPPING)
    return document if isinstance(document, Mapping) else {}


def project_scripts(
    root: Path,
    *,
    manifest: str = DEFAULT_MANIFEST_FILENAME,
    cache: ParseCache | None = None,
) -> dict[str, str]:
    """Return the ``scripts`` table declared by the manifest under ``root``.

    Non-string script bodies are ignored; a missing or invalid manifest yields
    an empty mapping.
    """

    scripts = _manifest(root, manifest, cache).get(SCRIPTS_KEY)
    if not isinstance(scripts, Mapping):
        return {}
    return {str(name): body for name, body in scripts.items() if isinstance(body, str)}


def project_dependencies(
    root: Path,
    *,
    include_dev: bool = True,
    manifest: str = DEFAULT_MANIFEST_FILENAME,
    cache: ParseCache | None = None,
) -> list[str]:
    """Return sorted unique dependency names declared by the manifest."""

    document = _manifest(root, manifest, cache)
    sections = [DEPENDENCIES_KEY, DEV_DEPENDENCIES_KEY] if include_dev else [DEPENDENCIES_KEY]
    names: set[str] = set()
    for section in sections:
        table = document.get(section)
        if isinstance(table, Mapping):
            names.update(str(name) for name in table)
    return sorted(names)


__all__ = ["find_project_root", "project_dependencies", "project_scripts"]
