"""Fixtures shared by the CLI tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from rem.cli.main import app


@pytest.fixture
def db(tmp_path: Path) -> str:
    return str(tmp_path / "cli.db")


@pytest.fixture
def rem(db):
    """Invoke the rem CLI against the test database."""
    runner = CliRunner()

    def invoke(*args: str, input: bytes | str | None = None):
        argv = list(args)
        # Subcommands take --db; place it before any "--" separator.
        if "--" in argv:
            split = argv.index("--")
            argv = argv[:split] + ["--db", db] + argv[split:]
        else:
            argv += ["--db", db]
        return runner.invoke(app, argv, input=input)

    return invoke
