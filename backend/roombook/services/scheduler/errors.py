# backend/roombook/services/scheduler/errors.py
"""
Scheduler error taxonomy.

Fatal (raised before any side effects):
✓ InvalidRule: recurrence configuration is incomplete or inconsistent
✓ InvalidTemplate: booking template cannot be materialized
✓ InvalidTimeValue: time string cannot be normalized to "HH:MM"

Per-occurrence / per-member (collected, never abort a batch):
✓ SlotConflict: occurrence collides with an existing or concurrent booking
✓ InvalidTransition: status change not allowed from the current state

EmptyOccurrenceSet is not raised: it is reported as build outcome "empty".
"""

from datetime import date
from typing import Optional


class SchedulingError(Exception):
    """Base exception for scheduler errors."""


class InvalidRule(SchedulingError, ValueError):
    """Recurrence rule is missing a required field or is out of range."""


class InvalidTemplate(SchedulingError, ValueError):
    """Booking template is invalid (rooms, times, attendees)."""


class InvalidTimeValue(SchedulingError, ValueError):
    """Time string cannot be parsed."""


class SlotConflict(SchedulingError):
    """Occurrence collides with another non-cancelled booking."""

    def __init__(
        self,
        room_id: int,
        on_date: date,
        reason: str = "slot_conflict",
        conflicting_booking_id: Optional[str] = None,
    ):
        self.room_id = room_id
        self.date = on_date
        self.reason = reason
        self.conflicting_booking_id = conflicting_booking_id
        super().__init__(
            f"Room {room_id} is already booked on {on_date.isoformat()} ({reason})"
        )


class InvalidTransition(SchedulingError):
    """Status transition not allowed by the booking state machine."""

    def __init__(self, booking_id: str, status: str, action: str):
        self.booking_id = booking_id
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} booking {booking_id} in status '{status}'")


class BookingNotFound(SchedulingError, LookupError):
    """Booking id is unknown to the repository."""

    def __init__(self, booking_id: str):
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} not found")
