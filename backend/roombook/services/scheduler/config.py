# backend/roombook/services/scheduler/config.py
"""
Scheduler configuration and time helpers.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

from .errors import InvalidTimeValue


_TIME_RE = re.compile(
    r"(?:\d{4}-\d{2}-\d{2}[ T])?"      # optional date prefix
    r"(\d{1,2}):(\d{2})"
    r"(?::(\d{2})(?:\.\d+)?)?"          # optional seconds
    r"\s*([AaPp][Mm])?"
)


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Configuration for the recurring-booking scheduler.

    Attributes:
        horizon_months: Hard ceiling on series length, counted from the anchor date
        max_occurrences: Hard ceiling on dates produced per rule
        min_span_days: Minimum distance between anchor and end date of a recurring rule
        group_mutations_cross_rooms: Group actions reach every room sharing the group id
    """
    horizon_months: int = 6
    max_occurrences: int = 400
    min_span_days: int = 1
    group_mutations_cross_rooms: bool = True

    def __post_init__(self):
        """Validate configuration."""
        if self.horizon_months < 1:
            raise ValueError(f"horizon_months must be >= 1, got {self.horizon_months}")
        if self.max_occurrences < 1:
            raise ValueError(f"max_occurrences must be >= 1, got {self.max_occurrences}")
        if self.min_span_days < 1:
            raise ValueError(f"min_span_days must be >= 1, got {self.min_span_days}")


@lru_cache
def get_scheduler_config() -> SchedulerConfig:
    """Get scheduler configuration (singleton, built from application settings)."""
    from ...config import settings

    return SchedulerConfig(
        horizon_months=settings.scheduler_horizon_months,
        max_occurrences=settings.scheduler_max_occurrences,
        group_mutations_cross_rooms=settings.group_mutations_cross_rooms,
    )


# ── Time helpers ─────────────────────────────────────────────────────────


def normalize_time(value: str) -> str:
    """
    Normalize a time string to 24-hour zero-padded "HH:MM".

    Accepts "9:00", "09:00:00", "2025-01-06 09:00:00", "2025-01-06T09:00", "9:00 PM".
    Anything else raises InvalidTimeValue.
    """
    if not isinstance(value, str):
        raise InvalidTimeValue(f"Time must be a string, got {type(value).__name__}")

    match = _TIME_RE.fullmatch(value.strip())
    if not match:
        raise InvalidTimeValue(f"Unrecognized time: {value!r}")

    hour = int(match.group(1))
    minute = int(match.group(2))
    second = match.group(3)
    meridiem = match.group(4)

    if meridiem:
        if not 1 <= hour <= 12:
            raise InvalidTimeValue(f"Invalid 12-hour time: {value!r}")
        hour = hour % 12
        if meridiem.lower() == "pm":
            hour += 12

    if hour > 23 or minute > 59 or (second is not None and int(second) > 59):
        raise InvalidTimeValue(f"Time out of range: {value!r}")

    return f"{hour:02d}:{minute:02d}"


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hour, minute = normalize_time(value).split(":")
    return int(hour) * 60 + int(minute)
