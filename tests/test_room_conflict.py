"""Unit tests for room conflict detection.

These tests mock the database cursor so they run without Postgres.
"""

from datetime import date
from unittest.mock import MagicMock

import pytest

from roombook.domain.errors import BookingOutcome, DateConflictError, InvalidRangeError
from roombook.domain.room_conflict import (
    assert_no_room_conflict,
    ranges_overlap,
    validate_stay,
)


@pytest.fixture
def cur():
    """Mocked psycopg2 cursor."""
    return MagicMock()


def _no_conflict(cur):
    cur.fetchone.return_value = None


def _with_conflict(cur, reservation_id=99, check_in=date(2025, 3, 10), check_out=date(2025, 3, 15)):
    cur.fetchone.return_value = (reservation_id, check_in, check_out)


# ── ranges_overlap ─────────────────────────────────────────────────────


class TestRangesOverlap:
    def test_partial_overlap_at_tail(self):
        assert ranges_overlap(
            date(2025, 3, 1), date(2025, 3, 5), date(2025, 3, 3), date(2025, 3, 10)
        )

    def test_touching_ranges_do_not_overlap(self):
        """Half-open: departure day == next arrival day is allowed."""
        assert not ranges_overlap(
            date(2025, 3, 1), date(2025, 3, 5), date(2025, 3, 5), date(2025, 3, 10)
        )

    def test_existing_contains_new(self):
        assert ranges_overlap(
            date(2025, 3, 1), date(2025, 3, 10), date(2025, 3, 3), date(2025, 3, 5)
        )

    def test_new_contains_existing(self):
        assert ranges_overlap(
            date(2025, 3, 3), date(2025, 3, 5), date(2025, 3, 1), date(2025, 3, 10)
        )

    def test_overlap_at_head(self):
        """New stay starts before the existing one and ends inside it."""
        assert ranges_overlap(
            date(2025, 3, 5), date(2025, 3, 12), date(2025, 3, 10), date(2025, 3, 15)
        )

    def test_identical_ranges(self):
        assert ranges_overlap(
            date(2025, 3, 1), date(2025, 3, 5), date(2025, 3, 1), date(2025, 3, 5)
        )

    def test_disjoint_ranges(self):
        assert not ranges_overlap(
            date(2025, 3, 1), date(2025, 3, 5), date(2025, 4, 1), date(2025, 4, 5)
        )

    def test_is_symmetric(self):
        a = (date(2025, 3, 1), date(2025, 3, 5))
        b = (date(2025, 3, 4), date(2025, 3, 6))
        assert ranges_overlap(*a, *b) == ranges_overlap(*b, *a)


class TestValidateStay:
    def test_valid_range_passes(self):
        validate_stay(date(2025, 3, 1), date(2025, 3, 2))

    def test_same_day_rejected(self):
        with pytest.raises(InvalidRangeError) as exc_info:
            validate_stay(date(2025, 3, 1), date(2025, 3, 1))
        assert exc_info.value.outcome is BookingOutcome.INVALID_RANGE

    def test_reversed_range_rejected(self):
        with pytest.raises(InvalidRangeError, match="must be before"):
            validate_stay(date(2025, 3, 5), date(2025, 3, 1))


# ── assert_no_room_conflict ────────────────────────────────────────────


class TestAssertNoRoomConflict:
    def test_passes_when_free(self, cur):
        _no_conflict(cur)

        result = assert_no_room_conflict(
            cur, room_id=1, check_in=date(2025, 3, 1), check_out=date(2025, 3, 5)
        )

        assert result is None
        cur.execute.assert_called_once()

    def test_query_uses_general_interval_test(self, cur):
        """Existing check_in < new check_out AND existing check_out > new check_in."""
        _no_conflict(cur)

        assert_no_room_conflict(
            cur, room_id=7, check_in=date(2025, 3, 15), check_out=date(2025, 3, 20)
        )

        query, params = cur.execute.call_args[0]
        assert "check_in < %s" in query
        assert "check_out > %s" in query
        assert "BETWEEN" not in query.upper()
        assert "FOR UPDATE" not in query.upper()
        assert params == (7, date(2025, 3, 20), date(2025, 3, 15))

    def test_invalid_range_raises_before_query(self, cur):
        with pytest.raises(InvalidRangeError):
            assert_no_room_conflict(
                cur, room_id=1, check_in=date(2025, 3, 5), check_out=date(2025, 3, 5)
            )

        cur.execute.assert_not_called()

    def test_raises_with_conflict_details(self, cur):
        _with_conflict(cur, 5, date(2025, 3, 1), date(2025, 3, 10))

        with pytest.raises(DateConflictError) as exc_info:
            assert_no_room_conflict(
                cur, room_id=3, check_in=date(2025, 3, 3), check_out=date(2025, 3, 5)
            )

        err = exc_info.value
        assert err.room_id == 3
        assert err.conflicting_reservation_id == 5
        assert err.existing_check_in == date(2025, 3, 1)
        assert err.existing_check_out == date(2025, 3, 10)
        assert str(err) == "Room already booked for selected dates"
        # Single query: details come from the same row.
        cur.execute.assert_called_once()

    def test_conflict_is_logged_as_warning(self, cur, caplog):
        _with_conflict(cur, 5)

        with caplog.at_level("INFO", logger="roombook.domain.room_conflict"):
            with pytest.raises(DateConflictError):
                assert_no_room_conflict(
                    cur, room_id=3, check_in=date(2025, 3, 12), check_out=date(2025, 3, 14)
                )

        records = [r for r in caplog.records if r.name == "roombook.domain.room_conflict"]
        assert [r.levelname for r in records] == ["WARNING"]
        assert records[0].extra_fields["conflicting_reservation_id"] == 5
