"""Shared test fixtures and configuration."""
import os

import pytest


class FakeClock:
    """Manually advanced epoch-seconds clock for time_fn injection."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run with no user/project config files and no QUOTEGATE_* variables."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("QUOTEGATE_"):
            monkeypatch.delenv(key)
    return tmp_path
