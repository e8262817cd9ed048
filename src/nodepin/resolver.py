# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Select the installed runtime version that best satisfies a specifier."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from .catalog import Catalog, CatalogStore, InstalledVersion, default_catalog_store
from .constants import SPECIFIER_PREFIXES
from .versioning import Ordering, full_compare, parse_version, partial_match

LOGGER = logging.getLogger(__name__)

# Optional family prefix, optional ``v``, then one to three numeric components.
_SPECIFIER_SHAPE = re.compile(r"(?:(?:node|iojs)-?)?v?\d+(?:\.\d+(?:\.\d+)?)?")


class InvalidSpecifierError(ValueError):
    """Raised when a version specifier cannot be matched against a catalog."""

    def __init__(self, specifier: str) -> None:
        super().__init__(f"Invalid runtime version specifier: {specifier!r}")
        self.specifier = specifier


def is_valid_specifier(specifier: str) -> bool:
    """Return ``True`` when ``specifier`` has a matchable shape."""

    return _SPECIFIER_SHAPE.fullmatch(specifier.strip()) is not None


def normalize_specifier(specifier: str) -> str:
    """Return ``specifier`` in catalog display-name form.

    Args:
        specifier: User supplied version such as ``"16"`` or ``"v16.2.1"``.

    Returns:
        str: The trimmed specifier, prefixed with ``v`` unless it already
        starts with a recognised runtime-family prefix.

    Raises:
        InvalidSpecifierError: If the specifier has no matchable shape.
    """

    text = specifier.strip()
    if _SPECIFIER_SHAPE.fullmatch(text) is None:
        raise InvalidSpecifierError(specifier)
    if text.startswith(SPECIFIER_PREFIXES):
        return text
    return f"v{text}"


def resolve(specifier: str, catalog: Iterable[InstalledVersion]) -> InstalledVersion | None:
    """Select the installed version that best satisfies ``specifier``.

    An entry whose display name equals the normalised specifier wins outright.
    Otherwise the greatest version that partially matches the specifier is
    selected; equal versions keep the entry seen first in ``catalog``.

    Args:
        specifier: Requested version specifier.
        catalog: Installed versions in scan order.

    Returns:
        InstalledVersion | None: Selected entry, or ``None`` when the specifier
        is invalid or no installed version matches.
    """

    try:
        normalized = normalize_specifier(specifier)
    except InvalidSpecifierError as exc:
        LOGGER.debug("%s", exc)
        return None

    entries = tuple(catalog)
    for entry in entries:
        if entry.name == normalized:
            return entry

    requested = parse_version(normalized)
    best: InstalledVersion | None = None
    best_version = None
    for entry in entries:
        candidate = parse_version(entry.name)
        if not partial_match(requested, candidate):
            continue
        if best_version is None or full_compare(candidate, best_version) is Ordering.GREATER:
            best, best_version = entry, candidate
    if best is None:
        LOGGER.debug("No installed version satisfies %s", normalized)
    return best


def resolve_from_roots(
    specifier: str,
    roots: Iterable[Path | str],
    *,
    store: CatalogStore | None = None,
) -> InstalledVersion | None:
    """Scan ``roots`` through ``store`` and resolve ``specifier`` against them."""

    catalog: Catalog = (store if store is not None else default_catalog_store()).scan(roots)
    return resolve(specifier, catalog)


__all__ = [
    "InvalidSpecifierError",
    "is_valid_specifier",
    "normalize_specifier",
    "resolve",
    "resolve_from_roots",
]
