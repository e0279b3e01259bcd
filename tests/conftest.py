"""Shared pytest fixtures."""

import os

import pytest

from promrouter.config import reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep tests independent of the environment and the user config file."""
    for key in list(os.environ):
        if key.startswith("PROMROUTER_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)

    reset_settings()
    yield
    reset_settings()
