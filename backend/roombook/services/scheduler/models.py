# backend/roombook/services/scheduler/models.py
"""
Plain data passed in and out of the scheduler.

No ORM, no pydantic: callers (routers, stores) convert at the boundary.
"""

from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from .config import SchedulerConfig, normalize_time, time_str_to_minutes
from .errors import InvalidRule, InvalidTemplate, InvalidTimeValue


class RecurrencePattern(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


# Weekday indices: 0 = Sunday .. 6 = Saturday
WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
LAST_WEEK_OF_MONTH = 5


def sunday_weekday(d: date) -> int:
    """Weekday index with Sunday = 0 (date.weekday() has Monday = 0)."""
    return (d.weekday() + 1) % 7


@dataclass(frozen=True)
class RecurrenceRule:
    pattern: RecurrencePattern
    anchor_date: date
    end_date: Optional[date] = None
    weekly_days: Optional[frozenset[int]] = None
    monthly_week_of_month: Optional[int] = None
    monthly_day_of_week: Optional[int] = None

    @property
    def is_nth_weekday(self) -> bool:
        return self.monthly_week_of_month is not None

    def validate(self, config: SchedulerConfig) -> None:
        """Raise InvalidRule if the rule cannot be expanded."""
        try:
            pattern = RecurrencePattern(self.pattern)
        except ValueError:
            raise InvalidRule(f"Unknown recurrence pattern: {self.pattern!r}")

        if self.end_date is None:
            raise InvalidRule("Recurring bookings require an end date")

        min_end = self.anchor_date + timedelta(days=config.min_span_days)
        if self.end_date < min_end:
            raise InvalidRule(
                f"End date must be on or after {min_end.isoformat()} "
                f"(anchor {self.anchor_date.isoformat()})"
            )

        if pattern == RecurrencePattern.WEEKLY and self.weekly_days:
            bad = sorted(d for d in self.weekly_days if not 0 <= d <= 6)
            if bad:
                raise InvalidRule(f"Weekday indices must be 0..6, got {bad}")

        if pattern == RecurrencePattern.MONTHLY:
            week = self.monthly_week_of_month
            dow = self.monthly_day_of_week
            if (week is None) != (dow is None):
                raise InvalidRule(
                    "monthly_week_of_month and monthly_day_of_week must be set together"
                )
            if week is not None and not 1 <= week <= LAST_WEEK_OF_MONTH:
                raise InvalidRule(f"monthly_week_of_month must be 1..5, got {week}")
            if dow is not None and not 0 <= dow <= 6:
                raise InvalidRule(f"monthly_day_of_week must be 0..6, got {dow}")


@dataclass(frozen=True)
class BookingTemplate:
    """Fields shared by every occurrence of a submission."""
    room_ids: tuple[int, ...]
    requester_id: str
    start_time: str
    end_time: str
    event_name: str
    purpose: str = ""
    attendees: int = 1
    visibility: str = "private"
    selected_items: tuple[str, ...] = ()
    admin_notes: Optional[str] = None
    initial_status: BookingStatus = BookingStatus.PENDING

    def normalized(self) -> "BookingTemplate":
        """
        Return a copy with normalized times, or raise InvalidTemplate.

        Duplicate room ids are dropped, keeping the first position.
        """
        if not self.room_ids:
            raise InvalidTemplate("At least one room is required")

        try:
            start = normalize_time(self.start_time)
            end = normalize_time(self.end_time)
        except InvalidTimeValue as e:
            raise InvalidTemplate(str(e))

        if time_str_to_minutes(start) >= time_str_to_minutes(end):
            raise InvalidTemplate(f"Start time {start} must be before end time {end}")

        if self.attendees < 1:
            raise InvalidTemplate(f"Attendees must be >= 1, got {self.attendees}")

        try:
            status = BookingStatus(self.initial_status)
        except ValueError:
            raise InvalidTemplate(f"Unknown status: {self.initial_status!r}")
        if status == BookingStatus.CANCELLED:
            raise InvalidTemplate("New bookings cannot start cancelled")

        return replace(
            self,
            room_ids=tuple(dict.fromkeys(self.room_ids)),
            start_time=start,
            end_time=end,
            initial_status=status,
        )


@dataclass(frozen=True)
class Booking:
    id: str
    room_id: int
    date: date
    start_time: str
    end_time: str
    requester_id: str
    event_name: str
    status: BookingStatus = BookingStatus.PENDING
    purpose: str = ""
    attendees: int = 1
    visibility: str = "private"
    selected_items: tuple[str, ...] = field(default_factory=tuple)
    admin_notes: Optional[str] = None
    booking_group_id: Optional[str] = None
    parent_booking_id: Optional[str] = None
    cancel_reason: Optional[str] = None

    @property
    def is_anchor(self) -> bool:
        return self.booking_group_id is not None and self.parent_booking_id is None

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.CANCELLED

    def sort_key(self) -> tuple:
        """Deterministic processing order: date, start time, room, id."""
        return (self.date, self.start_time, self.room_id, self.id)
