"""Shared fixtures: keep threshold lookups and logging independent of each test."""

import logging

import pytest

from lift_insights.core.engine.config_loader import reload_model_config


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at an empty directory and drop cached threshold config."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    reload_model_config()
    yield home
    reload_model_config()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handlers installed by CLI invocations."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
