# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the modification-time validated parse cache."""

from __future__ import annotations

import json
import logging
import os
import threading
import time
from pathlib import Path

import pytest

from nodepin.parse_cache import DocumentShape, ParseCache, parse_document, read_parsed


class CountingReader:
    """Reader recording how often file contents were read."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, path: Path) -> str:
        self.calls += 1
        return path.read_text(encoding="utf-8")


def _bump_mtime(path: Path) -> None:
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))


@pytest.fixture
def manifest(tmp_path: Path) -> Path:
    path = tmp_path / "package.json"
    path.write_text(json.dumps({"name": "demo", "scripts": {"test": "jest"}}), encoding="utf-8")
    return path


def test_second_read_uses_cached_document(manifest: Path) -> None:
    reader = CountingReader()
    cache = ParseCache(reader=reader)

    first = cache.read(manifest, DocumentShape.MAPPING)
    second = cache.read(manifest, DocumentShape.MAPPING)

    assert first == second == {"name": "demo", "scripts": {"test": "jest"}}
    assert reader.calls == 1


def test_modified_file_is_reparsed(manifest: Path) -> None:
    reader = CountingReader()
    cache = ParseCache(reader=reader)
    cache.read(manifest)

    manifest.write_text(json.dumps({"name": "renamed"}), encoding="utf-8")
    _bump_mtime(manifest)

    assert cache.read(manifest) == {"name": "renamed"}
    assert reader.calls == 2


def test_shapes_are_cached_independently(manifest: Path) -> None:
    reader = CountingReader()
    cache = ParseCache(reader=reader)

    pairs = cache.read(manifest, DocumentShape.PAIRS)
    flat = cache.read(manifest, DocumentShape.FLAT)
    cache.read(manifest, DocumentShape.PAIRS)

    assert pairs == [("name", "demo"), ("scripts", [("test", "jest")])]
    assert flat == ["name", "demo", "scripts", ["test", "jest"]]
    assert reader.calls == 2
    assert len(cache) == 2


def test_parse_failure_returns_none_and_keeps_previous_entry(
    manifest: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    reader = CountingReader()
    cache = ParseCache(reader=reader)
    cache.read(manifest)
    original_mtime = manifest.stat().st_mtime_ns

    manifest.write_text("{not json", encoding="utf-8")
    _bump_mtime(manifest)
    with caplog.at_level(logging.WARNING, logger="nodepin.parse_cache"):
        assert cache.read(manifest) is None
    assert "Failed to parse" in caplog.text

    manifest.write_text(json.dumps({"name": "demo", "scripts": {"test": "jest"}}), encoding="utf-8")
    os.utime(manifest, ns=(original_mtime, original_mtime))
    calls_before = reader.calls
    assert cache.read(manifest) == {"name": "demo", "scripts": {"test": "jest"}}
    assert reader.calls == calls_before


def test_missing_file_returns_none(tmp_path: Path) -> None:
    cache = ParseCache()

    assert cache.read(tmp_path / "absent.json") is None
    assert len(cache) == 0


def test_returned_documents_do_not_alias_cache(manifest: Path) -> None:
    cache = ParseCache()
    document = cache.read(manifest)
    document["name"] = "mutated"

    assert cache.read(manifest)["name"] == "demo"


def test_injected_mtime_probe_controls_invalidation(manifest: Path) -> None:
    reader = CountingReader()
    stamps = iter([1, 1, 2])
    cache = ParseCache(reader=reader, mtime=lambda _path: next(stamps))

    cache.read(manifest)
    cache.read(manifest)
    cache.read(manifest)

    assert reader.calls == 2


def test_clear_drops_entries(manifest: Path) -> None:
    reader = CountingReader()
    cache = ParseCache(reader=reader)
    cache.read(manifest)

    cache.clear()
    cache.read(manifest)

    assert reader.calls == 2


def test_read_parsed_uses_supplied_cache(manifest: Path) -> None:
    cache = ParseCache()

    assert read_parsed(manifest, DocumentShape.MAPPING, cache=cache)["name"] == "demo"
    assert len(cache) == 1


def test_parse_document_keeps_arrays_and_scalars() -> None:
    assert parse_document('{"a": [1, {"b": null}]}', DocumentShape.FLAT) == ["a", [1, ["b", None]]]


class BlockingReader(CountingReader):
    """Reader that holds the first read open until released."""

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def __call__(self, path: Path) -> str:
        self.entered.set()
        assert self.release.wait(timeout=5)
        return super().__call__(path)


def test_concurrent_reads_of_one_key_parse_once(manifest: Path) -> None:
    reader = BlockingReader()
    cache = ParseCache(reader=reader)
    results: list[object] = []

    def worker() -> None:
        results.append(cache.read(manifest))

    first = threading.Thread(target=worker)
    second = threading.Thread(target=worker)
    first.start()
    assert reader.entered.wait(timeout=5)
    second.start()
    time.sleep(0.05)
    reader.release.set()
    first.join(timeout=5)
    second.join(timeout=5)

    assert reader.calls == 1
    assert results == [{"name": "demo", "scripts": {"test": "jest"}}] * 2


def test_reads_of_other_keys_proceed_while_one_key_is_parsing(manifest: Path, tmp_path: Path) -> None:
    other = tmp_path / "other.json"
    other.write_text('{"name": "other"}', encoding="utf-8")
    release = threading.Event()
    entered = threading.Event()

    def reader(path: Path) -> str:
        if path == manifest.resolve():
            entered.set()
            assert release.wait(timeout=5)
        return path.read_text(encoding="utf-8")

    cache = ParseCache(reader=reader)
    blocked = threading.Thread(target=cache.read, args=(manifest,))
    blocked.start()
    try:
        assert entered.wait(timeout=5)
        assert cache.read(other) == {"name": "other"}
    finally:
        release.set()
        blocked.join(timeout=5)

    assert len(cache) == 2
