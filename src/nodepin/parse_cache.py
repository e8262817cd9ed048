# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Modification-time validated cache for small JSON documents.

Entries are keyed by ``(resolved path, shape)`` and reused only while the
file's ``st_mtime_ns`` matches the value recorded when it was parsed. Parse
failures are logged and reported as ``None`` without disturbing the entry
already stored for the key.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Callable
from enum import Enum
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Any, TypeAlias

LOGGER = logging.getLogger(__name__)

Document: TypeAlias = Any
Reader = Callable[[Path], str]
MtimeProbe = Callable[[Path], int]
CacheKey = tuple[Path, "DocumentShape"]


class DocumentShape(Enum):
    """Python shape produced for JSON objects."""

    MAPPING = "mapping"
    PAIRS = "pairs"
    FLAT = "flat"


def _pairs_hook(pairs: list[tuple[str, Any]]) -> list[tuple[str, Any]]:
    return list(pairs)


def _flat_hook(pairs: list[tuple[str, Any]]) -> list[Any]:
    flat: list[Any] = []
    for key, value in pairs:
        flat.extend((key, value))
    return flat


_OBJECT_HOOKS: dict[DocumentShape, Callable[[list[tuple[str, Any]]], Any] | None] = {
    DocumentShape.MAPPING: None,
    DocumentShape.PAIRS: _pairs_hook,
    DocumentShape.FLAT: _flat_hook,
}


def parse_document(text: str, shape: DocumentShape) -> Document:
    """Parse JSON ``text`` producing objects in ``shape``.

    Raises:
        json.JSONDecodeError: If ``text`` is not valid JSON.
    """

    return json.loads(text, object_pairs_hook=_OBJECT_HOOKS[shape])


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _stat_mtime(path: Path) -> int:
    return path.stat().st_mtime_ns


class ParseCache:
    """Process-wide store of parsed documents validated by modification time."""

    def __init__(self, *, reader: Reader | None = None, mtime: MtimeProbe | None = None) -> None:
        """Initialise an empty cache.

        Args:
            reader: Callable returning a file's text; defaults to UTF-8 reads.
            mtime: Callable returning a file's modification time in nanoseconds.
        """

        self._reader = reader or _read_text
        self._mtime = mtime or _stat_mtime
        self._entries: dict[CacheKey, tuple[int, Document]] = {}
        self._key_locks: dict[CacheKey, Lock] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _lock_for(self, key: CacheKey) -> Lock:
        with self._lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = self._key_locks[key] = Lock()
            return lock

    def read(self, path: Path | str, shape: DocumentShape = DocumentShape.MAPPING) -> Document | None:
        """Return the parsed document for ``path`` in ``shape``.

        Args:
            path: JSON file to read.
            shape: Shape produced for JSON objects.

        Returns:
            Document | None: Parsed document, or ``None`` when the file is
            missing, unreadable, or not valid JSON.
        """

        resolved = Path(path).expanduser().resolve()
        key: CacheKey = (resolved, shape)
        with self._lock_for(key):
            try:
                current = self._mtime(resolved)
            except OSError as exc:
                LOGGER.warning("Unable to stat %s: %s", resolved, exc)
                return None
            entry = self._entries.get(key)
            if entry is not None and entry[0] == current:
                return copy.deepcopy(entry[1])
            try:
                document = parse_document(self._reader(resolved), shape)
            except (OSError, UnicodeDecodeError) as exc:
                LOGGER.warning("Unable to read %s: %s", resolved, exc)
                return None
            except json.JSONDecodeError as exc:
                LOGGER.warning("Failed to parse %s: %s", resolved, exc)
                return None
            self._entries[key] = (current, document)
            return copy.deepcopy(document)

    def clear(self) -> None:
        """Drop every cached document."""

        with self._lock:
            self._entries.clear()


@lru_cache(maxsize=1)
def default_parse_cache() -> ParseCache:
    """Return the process-wide parse cache."""

    return ParseCache()


def read_parsed(
    path: Path | str,
    shape: DocumentShape = DocumentShape.MAPPING,
    *,
    cache: ParseCache | None = None,
) -> Document | None:
    """Read ``path`` through ``cache`` (the process-wide cache by default)."""

    target = cache if cache is not None else default_parse_cache()
    return target.read(path, shape)


__all__ = [
    "Document",
    "DocumentShape",
    "ParseCache",
    "default_parse_cache",
    "parse_document",
    "read_parsed",
]
