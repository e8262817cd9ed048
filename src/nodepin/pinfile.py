# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate and read the version-pin file governing a project directory."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from .constants import DEFAULT_PIN_FILENAME

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PinnedVersion:
    """Version specifier read from a pin file."""

    specifier: str
    source: Path


def iter_ancestors(start: Path) -> Iterator[Path]:
    """Yield ``start`` followed by each of its parents up to the filesystem root."""

    current = start.expanduser().resolve()
    yield current
    yield from current.parents


def find_pin_file(start: Path, filename: str = DEFAULT_PIN_FILENAME) -> Path | None:
    """Return the nearest ``filename`` in ``start`` or any ancestor directory."""

    for directory in iter_ancestors(start):
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


def read_pinned_version(start: Path, filename: str = DEFAULT_PIN_FILENAME) -> PinnedVersion | None:
    """Return the version pinned for ``start``.

    Args:
        start: Directory the lookup begins from, usually the working directory.
        filename: Name of the version-pin file.

    Returns:
        PinnedVersion | None: The trimmed first line of the nearest pin file,
        or ``None`` when no pin file exists, it is empty, or it is unreadable.
    """

    pin_file = find_pin_file(start, filename)
    if pin_file is None:
        return None
    try:
        contents = pin_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning("Unable to read version pin %s: %s", pin_file, exc)
        return None
    lines = contents.splitlines()
    specifier = lines[0].strip() if lines else ""
    if not specifier:
        return None
    return PinnedVersion(specifier=specifier, source=pin_file)


__all__ = ["PinnedVersion", "find_pin_file", "iter_ancestors", "read_pinned_version"]
