# backend/roombook/services/scheduler/conflicts.py
"""
Slot conflict checks against a per-room time grid.

Conflict = same room, same date, status != cancelled, and
[start, end) intervals intersect (half-open: 09:00-10:00 and
10:00-11:00 do not conflict).

Read-only. Called once per candidate occurrence; the caller feeds
back bookings it has already accepted.
"""

from datetime import date
from typing import Iterable, Optional

from .config import time_str_to_minutes
from .models import Booking


def find_conflict(
    room_id: int,
    on_date: date,
    start_time: str,
    end_time: str,
    existing_bookings: Iterable[Booking],
    exclude_booking_id: Optional[str] = None,
) -> Optional[Booking]:
    """
    Return the first booking that collides with the candidate slot.

    Args:
        exclude_booking_id: booking to ignore (the one being edited)

    Returns:
        Colliding booking, or None if the slot is free.
    """
    start_min = time_str_to_minutes(start_time)
    end_min = time_str_to_minutes(end_time)

    for booking in existing_bookings:
        if booking.room_id != room_id or booking.date != on_date:
            continue
        if not booking.is_active:
            continue
        if exclude_booking_id is not None and booking.id == exclude_booking_id:
            continue

        if (
            time_str_to_minutes(booking.start_time) < end_min
            and time_str_to_minutes(booking.end_time) > start_min
        ):
            return booking

    return None


def is_available(
    room_id: int,
    on_date: date,
    start_time: str,
    end_time: str,
    existing_bookings: Iterable[Booking],
    exclude_booking_id: Optional[str] = None,
) -> bool:
    """True if no non-cancelled booking overlaps the candidate slot."""
    return find_conflict(
        room_id,
        on_date,
        start_time,
        end_time,
        existing_bookings,
        exclude_booking_id,
    ) is None
