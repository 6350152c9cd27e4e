"""Shared pytest fixtures for roombook tests."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402


@pytest.fixture(autouse=True)
def _clear_booking_env(monkeypatch):
    """Keep a developer's BOOKING_MAX_ATTEMPTS from leaking into tests."""
    monkeypatch.delenv("BOOKING_MAX_ATTEMPTS", raising=False)
