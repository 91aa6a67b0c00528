"""Tests for rem logging configuration."""

from __future__ import annotations

import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from rem.logging_config import configure_logging, enable_debug_mode


@pytest.fixture(autouse=True)
def _reset_rem_logger():
    logger = logging.getLogger("rem")
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    yield
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


def _rem_handlers():
    return [h for h in logging.getLogger("rem").handlers if isinstance(h, RichHandler)]


def test_installs_rich_handler():
    handler = configure_logging("INFO")
    assert isinstance(handler, RichHandler)
    assert logging.getLogger("rem").level == logging.INFO


def test_idempotent():
    configure_logging("INFO")
    configure_logging("ERROR")
    assert len(_rem_handlers()) == 1
    assert logging.getLogger("rem").level == logging.ERROR


def test_enable_debug_mode():
    enable_debug_mode()
    assert logging.getLogger("rem").level == logging.DEBUG


def test_records_rendered_to_console():
    console = Console(record=True, width=120)
    logging.getLogger("rem").handlers = []
    configure_logging("WARNING", console=console)
    logging.getLogger("rem.engine").warning("retention failed: locked")
    logging.getLogger("rem.engine").info("hidden")
    text = console.export_text()
    assert "retention failed: locked" in text
    assert "hidden" not in text
