# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from nodepin.config import NodepinConfig


def make_version_dir(root: Path, *parts: str) -> Path:
    """Create an installed version directory with an empty ``bin``."""

    directory = root.joinpath(*parts)
    (directory / "bin").mkdir(parents=True)
    return directory


@pytest.fixture
def version_dir() -> Callable[..., Path]:
    """Return the helper that creates installed version directories."""

    return make_version_dir


@pytest.fixture
def install_root(tmp_path: Path) -> Path:
    """Return an nvm-style root holding node and io.js versions."""

    root = tmp_path / "nvm"
    for version in ("v14.0.0", "v16.1.0", "v16.3.2", "v18.0.0"):
        make_version_dir(root, "versions", "node", version)
    make_version_dir(root, "versions", "io.js", "v3.3.1")
    make_version_dir(root, "v0.10.48")
    (root / "alias").mkdir()
    (root / "alias" / "default").write_text("16\n", encoding="utf-8")
    return root


@pytest.fixture
def config_factory(install_root: Path) -> Callable[..., NodepinConfig]:
    """Return a factory building configs bound to ``install_root``."""

    def factory(**overrides: object) -> NodepinConfig:
        payload: dict[str, object] = {"install_root": install_root, "use_emoji": False}
        payload.update(overrides)
        return NodepinConfig.model_validate(payload)

    return factory
