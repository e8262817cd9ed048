# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI tests for nodepin commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from nodepin.cli.app import app


@pytest.fixture
def cli_env(install_root: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("NVM_DIR", str(install_root))
    monkeypatch.setenv("NODEPIN_CONFIG", str(tmp_path / "no-config.toml"))
    monkeypatch.delenv("NODEPIN_PACKAGE_MANAGER", raising=False)
    project = tmp_path / "project"
    project.mkdir()
    (project / ".nvmrc").write_text("16\n", encoding="utf-8")
    (project / "package.json").write_text(
        json.dumps({"name": "demo", "scripts": {"build": "tsc", "test": "jest"}}),
        encoding="utf-8",
    )
    return project


def _write_npm(install_root: Path, body: str) -> None:
    script = install_root / "versions" / "node" / "v16.3.2" / "bin" / "npm"
    script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    script.chmod(0o755)


def test_resolve_prints_selected_version(cli_env: Path, install_root: Path) -> None:
    result = CliRunner().invoke(app, ["--no-emoji", "resolve", "16"])

    assert result.exit_code == 0
    name, path = result.stdout.strip().split("\t")
    assert name == "v16.3.2"
    assert Path(path) == install_root / "versions" / "node" / "v16.3.2"


def test_resolve_without_match_exits_with_failure(cli_env: Path) -> None:
    result = CliRunner().invoke(app, ["--no-emoji", "resolve", "99.0.0"])

    assert result.exit_code == 1
    assert "No installed version matches" in result.stdout


def test_env_prints_overlay(cli_env: Path, install_root: Path) -> None:
    result = CliRunner().invoke(app, ["--root", str(cli_env), "env"])

    assert result.exit_code == 0
    lines = dict(line.split("=", 1) for line in result.stdout.strip().splitlines())
    assert lines["NVM_BIN"] == str(install_root / "versions" / "node" / "v16.3.2" / "bin")
    assert lines["PATH"].startswith(lines["NVM_BIN"])


def test_env_exits_when_pinned_version_missing(cli_env: Path) -> None:
    (cli_env / ".nvmrc").write_text("12\n", encoding="utf-8")

    result = CliRunner().invoke(app, ["--no-emoji", "--root", str(cli_env), "env"])

    assert result.exit_code == 1
    assert "not installed" in result.stdout


def test_versions_lists_catalog(cli_env: Path) -> None:
    result = CliRunner().invoke(app, ["--root", str(cli_env), "versions"])

    assert result.exit_code == 0
    for name in ("v16.3.2", "iojs-v3.3.1", "v0.10.48"):
        assert name in result.stdout


def test_scripts_lists_manifest_scripts(cli_env: Path) -> None:
    result = CliRunner().invoke(app, ["--root", str(cli_env), "scripts"])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["build\ttsc", "test\tjest"]


def test_run_script_uses_pinned_npm(cli_env: Path, install_root: Path) -> None:
    marker = cli_env / "ran.txt"
    _write_npm(install_root, f'echo "$NVM_BIN $*" > "{marker}"')

    result = CliRunner().invoke(app, ["--root", str(cli_env), "run-script", "build"])

    assert result.exit_code == 0
    bin_dir = install_root / "versions" / "node" / "v16.3.2" / "bin"
    assert marker.read_text(encoding="utf-8").strip() == f"{bin_dir} run build"


def test_run_script_rejects_undeclared_script(cli_env: Path) -> None:
    result = CliRunner().invoke(app, ["--no-emoji", "--root", str(cli_env), "run-script", "deploy"])

    assert result.exit_code == 1
    assert "not declared" in result.stdout


def test_run_propagates_exit_status(cli_env: Path, install_root: Path) -> None:
    _write_npm(install_root, "exit 7")

    result = CliRunner().invoke(app, ["--root", str(cli_env), "run", "npm", "--version"])

    assert result.exit_code == 7


def test_config_list_global_passes_flag(cli_env: Path, install_root: Path) -> None:
    marker = cli_env / "args.txt"
    _write_npm(install_root, f'echo "$*" > "{marker}"')

    result = CliRunner().invoke(app, ["--root", str(cli_env), "config", "list", "--global"])

    assert result.exit_code == 0
    assert marker.read_text(encoding="utf-8").strip() == "config list --global"


def test_help_lists_commands(cli_env: Path) -> None:
    result = CliRunner().invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("versions", "resolve", "env", "run-script", "install", "config"):
        assert command in result.stdout
    assert result.stdout.index("--debug") < result.stdout.index("--no-emoji") < result.stdout.index("--root")


def test_invalid_config_file_exits_with_usage_status(cli_env: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_file = tmp_path / "broken.toml"
    config_file.write_text("install_root = ", encoding="utf-8")
    monkeypatch.setenv("NODEPIN_CONFIG", str(config_file))

    result = CliRunner().invoke(app, ["--no-emoji", "resolve", "16"])

    assert result.exit_code == 2
    assert "Invalid TOML" in result.stdout


def test_run_relative_executable_from_project_root(cli_env: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (cli_env / "bin").mkdir()
    marker = cli_env / "tool-ran.txt"
    tool = cli_env / "bin" / "tool"
    tool.write_text(f'#!/bin/sh\necho "$PWD" > "{marker}"\n', encoding="utf-8")
    tool.chmod(0o755)
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(app, ["--root", str(cli_env), "run", "./bin/tool"])

    assert result.exit_code == 0
    assert marker.read_text(encoding="utf-8").strip() == str(cli_env.resolve())


@pytest.mark.parametrize("subcommand", [["get", " "], ["set", "", "value"], ["delete", "  "]])
def test_config_blank_key_exits_with_usage_status(cli_env: Path, subcommand: list[str]) -> None:
    result = CliRunner().invoke(app, ["--no-emoji", "--root", str(cli_env), "config", *subcommand])

    assert result.exit_code == 2
    assert "config key must not be empty" in result.stdout
    assert not isinstance(result.exception, ValueError)
