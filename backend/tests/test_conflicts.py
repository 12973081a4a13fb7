# backend/tests/test_conflicts.py

from datetime import date

import pytest

from roombook.services.scheduler import BookingStatus, InvalidTimeValue, find_conflict, is_available

DAY = date(2025, 1, 6)


@pytest.mark.parametrize(
    "start, end, free",
    [
        ("10:00", "11:00", True),    # back to back after
        ("08:00", "09:00", True),    # back to back before
        ("09:30", "10:30", False),
        ("08:30", "09:15", False),
        ("08:00", "11:00", False),   # contains
        ("09:15", "09:45", False),   # contained
        ("09:00", "10:00", False),   # identical
    ],
)
def test_half_open_overlap(make_booking, start, end, free):
    existing = [make_booking()]
    assert is_available(1, DAY, start, end, existing) is free


def test_other_room_or_date_never_conflicts(make_booking):
    existing = [make_booking(room_id=2), make_booking(id="b-2", on_date=date(2025, 1, 7))]
    assert find_conflict(1, DAY, "09:00", "10:00", existing) is None


def test_cancelled_bookings_do_not_block(make_booking):
    existing = [make_booking(status=BookingStatus.CANCELLED)]
    assert is_available(1, DAY, "09:00", "10:00", existing)


def test_confirmed_bookings_block(make_booking):
    existing = [make_booking(status=BookingStatus.CONFIRMED)]
    assert find_conflict(1, DAY, "09:00", "10:00", existing).id == "b-1"


def test_excluded_booking_is_ignored(make_booking):
    existing = [make_booking()]
    assert is_available(1, DAY, "09:00", "10:00", existing, exclude_booking_id="b-1")


def test_mixed_time_formats(make_booking):
    existing = [make_booking(start="09:00:00", end="10:00:00")]
    assert not is_available(1, DAY, "9:30 AM", "10:30 AM", existing)
    assert is_available(1, DAY, "10:00 AM", "11:00 AM", existing)


@pytest.mark.parametrize("start, end", [("119:30", "10:30"), ("09:00", "10:000")])
def test_malformed_times_are_rejected(make_booking, start, end):
    with pytest.raises(InvalidTimeValue):
        is_available(1, DAY, start, end, [make_booking()])
