"""Shared test helper functions for roombook tests.

These are NOT fixtures - they are regular functions importable from tests.
"""

from __future__ import annotations

from unittest.mock import MagicMock


def mock_conn() -> tuple[MagicMock, MagicMock]:
    """Return (connection, cursor) mocks wired the way txn() uses them."""
    conn = MagicMock()
    cur = conn.cursor.return_value.__enter__.return_value
    return conn, cur


def mock_txn(cur: MagicMock) -> MagicMock:
    """Return a stand-in for txn() that yields cur."""
    txn = MagicMock()
    txn.return_value.__enter__.return_value = cur
    txn.return_value.__exit__.return_value = False
    return txn
