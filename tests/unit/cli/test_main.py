"""Tests for the rem entry point: version, help, global options, config errors."""

from __future__ import annotations

import logging
from pathlib import Path

from typer.testing import CliRunner

from rem.cli.main import app

runner = CliRunner()


def test_version_flag():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("rem ")


def test_version_command():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "rem" in result.output


def test_help_lists_commands():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for name in ("store", "get", "list", "search", "delete", "clear", "config"):
        assert name in result.output


def test_verbose_enables_debug(tmp_path: Path):
    result = runner.invoke(app, ["--verbose", "list", "--db", str(tmp_path / "v.db")])
    assert result.exit_code == 0
    assert logging.getLogger("rem").level == logging.DEBUG


def test_verbose_uses_debug_mode(tmp_path: Path, monkeypatch):
    calls: list[bool] = []
    monkeypatch.setattr("rem.cli.main.enable_debug_mode", lambda: calls.append(True))
    result = runner.invoke(app, ["-v", "list", "--db", str(tmp_path / "v.db")])
    assert result.exit_code == 0, result.output
    assert calls == [True]


def test_log_level_from_config(isolated_config: Path, tmp_path: Path):
    isolated_config.mkdir(parents=True, exist_ok=True)
    (isolated_config / "config.yaml").write_text("logging:\n  level: error\n", encoding="utf-8")
    result = runner.invoke(app, ["list", "--db", str(tmp_path / "c.db")])
    assert result.exit_code == 0
    assert logging.getLogger("rem").level == logging.ERROR


def test_invalid_config_file_reported(isolated_config: Path):
    isolated_config.mkdir(parents=True, exist_ok=True)
    (isolated_config / "config.yaml").write_text("database: [broken", encoding="utf-8")
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 2
    assert "Invalid configuration" in result.output


def test_database_path_from_config_file(isolated_config: Path, tmp_path: Path):
    target = tmp_path / "configured.db"
    isolated_config.mkdir(parents=True, exist_ok=True)
    (isolated_config / "config.yaml").write_text(
        f"database:\n  path: {target}\n", encoding="utf-8"
    )
    result = runner.invoke(app, ["store"], input=b"configured")
    assert result.exit_code == 0, result.output
    assert target.exists()


def test_unopenable_database(tmp_path: Path):
    blocker = tmp_path / "dir.db"
    blocker.mkdir()
    result = runner.invoke(app, ["list", "--db", str(blocker)])
    assert result.exit_code == 5
