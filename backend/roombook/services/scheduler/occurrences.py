# backend/roombook/services/scheduler/occurrences.py
"""
Occurrence generation: RecurrenceRule → ordered list of dates.

Contains:
✓ daily / weekly / weekly-on-selected-days / monthly / monthly-nth-weekday
✓ horizon cap (months from anchor) and occurrence-count cap

Does NOT contain:
✗ Conflict checks (conflicts.py)
✗ Booking materialization (builder.py)

Pure: the same rule and config always yield the same dates.
"""

import calendar
from datetime import date, timedelta
from typing import Iterator

from .config import SchedulerConfig, get_scheduler_config
from .models import (
    LAST_WEEK_OF_MONTH,
    RecurrencePattern,
    RecurrenceRule,
    sunday_weekday,
)


def generate_occurrences(
    rule: RecurrenceRule,
    config: SchedulerConfig | None = None,
) -> list[date]:
    """
    Expand a recurrence rule into concrete dates.

    Returns:
        Strictly increasing dates within [anchor_date, effective_end_date].
        Empty list = the rule never lands inside the range.

    Raises:
        InvalidRule: rule is incomplete or out of range
    """
    dates, _ = expand_occurrences(rule, config)
    return dates


def expand_occurrences(
    rule: RecurrenceRule,
    config: SchedulerConfig | None = None,
) -> tuple[list[date], bool]:
    """
    Same as generate_occurrences, plus whether a cap dropped any date.

    The flag is only set when the rule has a date past the horizon or
    past max_occurrences; a rule that lands exactly on a cap is not capped.
    """
    config = config or get_scheduler_config()
    rule.validate(config)

    limit = effective_end_date(rule, config)
    dates: list[date] = []

    # Walk the uncapped rule so one date beyond either cap reveals truncation
    for current in _iter_dates(rule, rule.end_date):
        if current > limit or len(dates) == config.max_occurrences:
            return dates, True
        dates.append(current)
    return dates, False


def effective_end_date(rule: RecurrenceRule, config: SchedulerConfig) -> date:
    """Inclusive upper bound after applying the horizon cap."""
    horizon = add_months_clamped(rule.anchor_date, config.horizon_months)
    return min(rule.end_date, horizon)


def nth_weekday_of_month(
    year: int,
    month: int,
    week_of_month: int,
    day_of_week: int,
) -> date | None:
    """
    Date of the n-th given weekday in a month.

    Args:
        week_of_month: 1..4, or 5 for the last occurrence
        day_of_week: 0 = Sunday .. 6 = Saturday

    Returns:
        None if the month has no such occurrence (e.g. a 4th week that
        would spill into the next month is never rolled over).
    """
    days_in_month = calendar.monthrange(year, month)[1]

    if week_of_month == LAST_WEEK_OF_MONTH:
        last_day = date(year, month, days_in_month)
        days_back = (sunday_weekday(last_day) - day_of_week) % 7
        return last_day - timedelta(days=days_back)

    first_day = date(year, month, 1)
    offset = (day_of_week - sunday_weekday(first_day)) % 7
    offset += (week_of_month - 1) * 7

    if offset >= days_in_month:
        return None
    return first_day + timedelta(days=offset)


def add_months_clamped(d: date, months: int) -> date:
    """Shift by calendar months, clamping the day to the target month length."""
    year, month = _shift_month(d.year, d.month, months)
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


# ── Pattern walkers ──────────────────────────────────────────────────────


def _iter_dates(rule: RecurrenceRule, limit: date) -> Iterator[date]:
    pattern = RecurrencePattern(rule.pattern)

    if pattern == RecurrencePattern.DAILY:
        return _step_days(rule.anchor_date, limit, 1)

    if pattern == RecurrencePattern.WEEKLY:
        if rule.weekly_days:
            return _selected_weekdays(rule.anchor_date, limit, rule.weekly_days)
        return _step_days(rule.anchor_date, limit, 7)

    if rule.is_nth_weekday:
        return _monthly_nth_weekday(
            rule.anchor_date,
            limit,
            rule.monthly_week_of_month,
            rule.monthly_day_of_week,
        )
    return _monthly_same_day(rule.anchor_date, limit)


def _step_days(start: date, limit: date, step: int) -> Iterator[date]:
    current = start
    while current <= limit:
        yield current
        current += timedelta(days=step)


def _selected_weekdays(start: date, limit: date, weekdays: frozenset[int]) -> Iterator[date]:
    # Literal per-day scan: the anchor only counts when its weekday is selected
    for current in _step_days(start, limit, 1):
        if sunday_weekday(current) in weekdays:
            yield current


def _monthly_same_day(start: date, limit: date) -> Iterator[date]:
    for year, month in _months(start, limit):
        if start.day > calendar.monthrange(year, month)[1]:
            continue  # no such day this month, skip rather than clamp
        current = date(year, month, start.day)
        if current > limit:
            return
        yield current


def _monthly_nth_weekday(
    start: date,
    limit: date,
    week_of_month: int,
    day_of_week: int,
) -> Iterator[date]:
    for year, month in _months(start, limit):
        current = nth_weekday_of_month(year, month, week_of_month, day_of_week)
        if current is None or current < start:
            continue
        if current > limit:
            return
        yield current


def _months(start: date, limit: date) -> Iterator[tuple[int, int]]:
    """(year, month) pairs from start's month through limit's month."""
    year, month = start.year, start.month
    while (year, month) <= (limit.year, limit.month):
        yield year, month
        year, month = _shift_month(year, month, 1)


def _shift_month(year: int, month: int, months: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1
