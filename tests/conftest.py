"""Shared pytest fixtures."""

import logging

import pytest

from tab_matrix.config import reset_config


@pytest.fixture(autouse=True)
def fresh_config(tmp_path, monkeypatch):
    """Give every test a fresh config that ignores any local .env file."""
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo setup_logging calls made by the code under test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
