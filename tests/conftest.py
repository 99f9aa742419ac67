"""Shared fixtures for taft tests."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_taft_logger():
    """Undo any handlers or levels a test (or the CLI) installed."""
    yield
    logger = logging.getLogger("taft")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def write(tmp_path):
    """Write a file under ``tmp_path`` and return its path."""

    def _write(relpath: str, text: str):
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
