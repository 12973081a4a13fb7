# backend/roombook/services/scheduler/__init__.py
"""
Recurring-booking scheduler.

Pure module: plain data in, plain data out. No web, database or cache imports.

Occurrence generation → slot conflict checks → series building → mutation policy
"""

from .config import SchedulerConfig, get_scheduler_config, normalize_time
from .errors import (
    BookingNotFound,
    InvalidRule,
    InvalidTemplate,
    InvalidTimeValue,
    InvalidTransition,
    SchedulingError,
    SlotConflict,
)
from .models import (
    Booking,
    BookingStatus,
    BookingTemplate,
    RecurrencePattern,
    RecurrenceRule,
)
from .occurrences import expand_occurrences, generate_occurrences, nth_weekday_of_month
from .conflicts import find_conflict, is_available
from .builder import SeriesBuildResult, SeriesFailure, build_series, build_single
from .mutations import (
    GroupScope,
    MutationAction,
    MutationReport,
    MutationRequest,
    SingleScope,
    apply_transition,
    plan_mutation,
)
from .groups import GroupSummary, summarize_group
from .repository import BookingRepository, InMemoryBookingRepository

__all__ = [
    "SchedulerConfig",
    "get_scheduler_config",
    "normalize_time",
    "SchedulingError",
    "InvalidRule",
    "InvalidTemplate",
    "InvalidTimeValue",
    "InvalidTransition",
    "SlotConflict",
    "BookingNotFound",
    "Booking",
    "BookingStatus",
    "BookingTemplate",
    "RecurrencePattern",
    "RecurrenceRule",
    "generate_occurrences",
    "expand_occurrences",
    "nth_weekday_of_month",
    "find_conflict",
    "is_available",
    "SeriesBuildResult",
    "SeriesFailure",
    "build_series",
    "build_single",
    "GroupScope",
    "MutationAction",
    "MutationReport",
    "MutationRequest",
    "SingleScope",
    "apply_transition",
    "plan_mutation",
    "GroupSummary",
    "summarize_group",
    "BookingRepository",
    "InMemoryBookingRepository",
]
