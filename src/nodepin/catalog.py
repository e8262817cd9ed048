# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discovery of runtime versions installed beneath nvm-style roots."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from threading import Lock

from .constants import DEFAULT_FAMILY, FAMILY_ALIASES, VERSION_DIR_PATTERN, VERSIONS_SUBDIR

LOGGER = logging.getLogger(__name__)

DirectoryFingerprint = tuple[tuple[Path, int], ...]


@dataclass(frozen=True, slots=True)
class InstalledVersion:
    """Installed runtime version addressed by its display name."""

    name: str
    path: Path
    family: str = DEFAULT_FAMILY


@dataclass(frozen=True, slots=True)
class Catalog:
    """Installed versions in scan order."""

    entries: tuple[InstalledVersion, ...] = ()

    def __iter__(self) -> Iterator[InstalledVersion]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    def names(self) -> list[str]:
        """Return display names in scan order."""

        return [entry.name for entry in self.entries]

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, Path | str]]) -> Catalog:
        """Build a catalog from ``(name, path)`` pairs, preserving order."""

        return cls(tuple(InstalledVersion(name=name, path=Path(path)) for name, path in pairs))


def is_version_name(name: str) -> bool:
    """Return ``True`` when ``name`` looks like an installed version directory."""

    return VERSION_DIR_PATTERN.fullmatch(name) is not None


def display_name(family: str, directory_name: str) -> str:
    """Return the catalog display name for ``directory_name`` within ``family``.

    Args:
        family: Runtime family directory name (``node``, ``io.js``...).
        directory_name: Version directory base name such as ``v3.3.1``.

    Returns:
        str: Bare directory name for the default family, otherwise the
        canonical family alias joined to the directory name.
    """

    alias = FAMILY_ALIASES.get(family, family)
    if not alias:
        return directory_name
    return f"{alias}-{directory_name}"


def default_roots(install_root: Path) -> tuple[Path, ...]:
    """Return the roots scanned for ``install_root``."""

    return (install_root, install_root / VERSIONS_SUBDIR)


def _list_directories(directory: Path) -> list[Path] | None:
    try:
        children = sorted(directory.iterdir(), key=lambda child: child.name)
    except OSError as exc:
        LOGGER.debug("Skipping unreadable directory %s: %s", directory, exc)
        return None
    return [child for child in children if child.is_dir()]


def _mtime_ns(directory: Path) -> int:
    try:
        return directory.stat().st_mtime_ns
    except OSError:
        return -1


def _scan(roots: Sequence[Path]) -> tuple[Catalog, DirectoryFingerprint]:
    entries: list[InstalledVersion] = []
    fingerprint: list[tuple[Path, int]] = []
    for root in roots:
        fingerprint.append((root, _mtime_ns(root)))
        children = _list_directories(root)
        if children is None:
            continue
        for child in children:
            if is_version_name(child.name):
                entries.append(InstalledVersion(name=child.name, path=child))
                continue
            fingerprint.append((child, _mtime_ns(child)))
            grandchildren = _list_directories(child)
            for candidate in grandchildren or ():
                if is_version_name(candidate.name):
                    entries.append(
                        InstalledVersion(
                            name=display_name(child.name, candidate.name),
                            path=candidate,
                            family=child.name,
                        ),
                    )
    return Catalog(tuple(entries)), tuple(fingerprint)


def scan_catalog(roots: Iterable[Path | str]) -> Catalog:
    """Scan ``roots`` for installed runtime versions.

    Each root is listed once. Version-named directories are catalogued
    directly; other directories are treated as runtime families and searched
    one level deeper. Missing or unreadable roots contribute nothing.

    Args:
        roots: Installation roots in traversal order.

    Returns:
        Catalog: Installed versions in scan order.
    """

    catalog, _ = _scan(tuple(Path(root).expanduser() for root in roots))
    return catalog


@dataclass(slots=True)
class CatalogStore:
    """Cache catalog scans while the scanned directories stay unchanged."""

    _entries: dict[tuple[Path, ...], tuple[DirectoryFingerprint, Catalog]] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock)

    def scan(self, roots: Iterable[Path | str]) -> Catalog:
        """Return the catalog for ``roots``, rescanning when a directory changed."""

        key = tuple(Path(root).expanduser() for root in roots)
        with self._lock:
            cached = self._entries.get(key)
        if cached is not None:
            fingerprint, catalog = cached
            if all(_mtime_ns(path) == mtime for path, mtime in fingerprint):
                return catalog
        catalog, fingerprint = _scan(key)
        with self._lock:
            self._entries[key] = (fingerprint, catalog)
        return catalog

    def clear(self) -> None:
        """Drop every cached catalog."""

        with self._lock:
            self._entries.clear()


@lru_cache(maxsize=1)
def default_catalog_store() -> CatalogStore:
    """Return the process-wide catalog store."""

    return CatalogStore()


__all__ = [
    "Catalog",
    "CatalogStore",
    "InstalledVersion",
    "default_catalog_store",
    "default_roots",
    "display_name",
    "is_version_name",
    "scan_catalog",
]
