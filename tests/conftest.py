"""Pytest configuration and shared fixtures."""

import os
from collections.abc import Generator

import pytest


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Generator[None, None, None]:
    """Keep developer TASKPILOT_* variables and .env files out of the tests."""
    for name in list(os.environ):
        if name.startswith("TASKPILOT_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
