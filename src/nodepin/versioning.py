# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Numeric runtime version model with prefix and strict comparisons."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum

_SEGMENT_SPLIT = re.compile(r"\D+")


class Ordering(IntEnum):
    """Three-way comparison outcome."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


@dataclass(frozen=True, slots=True)
class RuntimeVersion:
    """Ordered sequence of non-negative integer version components."""

    components: tuple[int, ...]

    def __str__(self) -> str:
        return ".".join(str(component) for component in self.components)

    def __len__(self) -> int:
        return len(self.components)


def parse_version(text: str) -> RuntimeVersion:
    """Split ``text`` on non-digit runs and parse each segment as an integer.

    Args:
        text: Raw version text such as ``"v16.3.2"`` or ``"iojs-v3.3.1"``.

    Returns:
        RuntimeVersion: Parsed components; empty when ``text`` holds no digits.
    """

    segments = (segment for segment in _SEGMENT_SPLIT.split(text) if segment)
    return RuntimeVersion(tuple(int(segment) for segment in segments))


def compare_prefix(a: RuntimeVersion, b: RuntimeVersion) -> Ordering:
    """Compare ``a`` and ``b`` over their common prefix only.

    Versions that agree on every component of the shorter one compare
    :attr:`Ordering.EQUAL`, whatever their lengths.
    """

    for left, right in zip(a.components, b.components):
        if left < right:
            return Ordering.LESS
        if left > right:
            return Ordering.GREATER
    return Ordering.EQUAL


def full_compare(a: RuntimeVersion, b: RuntimeVersion) -> Ordering:
    """Compare ``a`` and ``b`` as a strict total order.

    When one version is a prefix of the other the longer version is greater.
    """

    if a.components < b.components:
        return Ordering.LESS
    if a.components > b.components:
        return Ordering.GREATER
    return Ordering.EQUAL


def partial_match(requested: RuntimeVersion, candidate: RuntimeVersion) -> bool:
    """Return ``True`` when ``candidate`` satisfies ``requested``.

    Every component present in ``requested`` must equal the corresponding
    component of ``candidate``; trailing candidate components are ignored.

    Args:
        requested: Possibly partial version taken from a specifier.
        candidate: Installed version being considered.

    Returns:
        bool: Whether the candidate matches the requested prefix.
    """

    if len(requested) > len(candidate):
        return False
    return candidate.components[: len(requested)] == requested.components


__all__ = [
    "Ordering",
    "RuntimeVersion",
    "compare_prefix",
    "full_compare",
    "parse_version",
    "partial_match",
]
