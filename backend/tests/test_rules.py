# backend/tests/test_rules.py

from dataclasses import replace
from datetime import date

import pytest

from roombook.services.scheduler import (
    BookingStatus,
    BookingTemplate,
    InvalidRule,
    InvalidTemplate,
    InvalidTimeValue,
    RecurrencePattern,
    RecurrenceRule,
    SchedulerConfig,
    normalize_time,
)


ANCHOR = date(2025, 1, 6)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"pattern": RecurrencePattern.DAILY, "end_date": None},
        {"pattern": RecurrencePattern.DAILY, "end_date": ANCHOR},
        {"pattern": RecurrencePattern.DAILY, "end_date": date(2025, 1, 1)},
        {"pattern": RecurrencePattern.WEEKLY, "end_date": date(2025, 2, 1), "weekly_days": frozenset({7})},
        {"pattern": RecurrencePattern.MONTHLY, "end_date": date(2025, 6, 1), "monthly_week_of_month": 2},
        {"pattern": RecurrencePattern.MONTHLY, "end_date": date(2025, 6, 1), "monthly_day_of_week": 2},
        {
            "pattern": RecurrencePattern.MONTHLY,
            "end_date": date(2025, 6, 1),
            "monthly_week_of_month": 6,
            "monthly_day_of_week": 2,
        },
        {
            "pattern": RecurrencePattern.MONTHLY,
            "end_date": date(2025, 6, 1),
            "monthly_week_of_month": 1,
            "monthly_day_of_week": 7,
        },
        {"pattern": "yearly", "end_date": date(2025, 6, 1)},
    ],
)
def test_invalid_rules(config, kwargs):
    with pytest.raises(InvalidRule):
        RecurrenceRule(anchor_date=ANCHOR, **kwargs).validate(config)


def test_end_date_one_day_after_anchor_is_valid(config):
    RecurrenceRule(
        pattern=RecurrencePattern.DAILY,
        anchor_date=ANCHOR,
        end_date=date(2025, 1, 7),
    ).validate(config)


def test_scheduler_config_rejects_bad_values():
    with pytest.raises(ValueError):
        SchedulerConfig(horizon_months=0)
    with pytest.raises(ValueError):
        SchedulerConfig(max_occurrences=0)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("9:00", "09:00"),
        ("09:00:00", "09:00"),
        ("2025-01-06 14:30:00", "14:30"),
        ("9:30 PM", "21:30"),
        ("12:00 AM", "00:00"),
        ("12:15 pm", "12:15"),
        ("2025-01-06T08:05", "08:05"),
        ("10:30:59.250", "10:30"),
    ],
)
def test_normalize_time(raw, expected):
    assert normalize_time(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "noon",
        "25:00",
        "10:75",
        "13:00 PM",
        "119:30",
        "10:000",
        "x9:00y",
        "10:30:99",
        "9:00 PMX",
        "06 09:00",
    ],
)
def test_normalize_time_rejects(raw):
    with pytest.raises(InvalidTimeValue):
        normalize_time(raw)


def test_template_normalized():
    t = BookingTemplate(
        room_ids=(2, 1, 2),
        requester_id="u-1",
        start_time="9:00",
        end_time="10:30:00",
        event_name="Standup",
        initial_status="confirmed",
    ).normalized()

    assert t.room_ids == (2, 1)
    assert (t.start_time, t.end_time) == ("09:00", "10:30")
    assert t.initial_status == BookingStatus.CONFIRMED


@pytest.mark.parametrize(
    "changes",
    [
        {"room_ids": ()},
        {"start_time": "10:00", "end_time": "10:00"},
        {"start_time": "11:00", "end_time": "10:00"},
        {"start_time": "later"},
        {"attendees": 0},
        {"initial_status": "cancelled"},
        {"initial_status": "archived"},
    ],
)
def test_template_invalid(template, changes):
    with pytest.raises(InvalidTemplate):
        replace(template, **changes).normalized()
