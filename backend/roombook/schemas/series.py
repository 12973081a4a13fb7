# backend/roombook/schemas/series.py

from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, Field

from ..services.scheduler import GroupSummary, RecurrencePattern, RecurrenceRule
from .bookings import BookingRead, BookingTemplateIn


class RecurrenceRuleIn(BaseModel):
    pattern: Literal["daily", "weekly", "monthly"]
    anchor_date: date
    end_date: Optional[date] = None
    weekly_days: Optional[list[int]] = Field(
        None, description="Weekday indices, 0 = Sunday .. 6 = Saturday"
    )
    monthly_week_of_month: Optional[int] = Field(
        None, description="1..4, or 5 for the last occurrence in the month"
    )
    monthly_day_of_week: Optional[int] = Field(
        None, description="0 = Sunday .. 6 = Saturday"
    )

    def to_rule(self) -> RecurrenceRule:
        return RecurrenceRule(
            pattern=RecurrencePattern(self.pattern),
            anchor_date=self.anchor_date,
            end_date=self.end_date,
            weekly_days=frozenset(self.weekly_days) if self.weekly_days else None,
            monthly_week_of_month=self.monthly_week_of_month,
            monthly_day_of_week=self.monthly_day_of_week,
        )


class SeriesCreate(BookingTemplateIn):
    recurrence: RecurrenceRuleIn


class SeriesPreviewResponse(BaseModel):
    occurrences: list[date]
    count: int
    effective_end_date: date
    truncated: bool
    weekdays: list[str]


class GroupSummaryRead(BaseModel):
    booking_group_id: str
    series_status: str
    total: int
    room_ids: list[int]
    status_counts: dict[str, int]
    anchors: list[BookingRead]
    members: list[BookingRead]

    @classmethod
    def from_summary(cls, summary: GroupSummary) -> "GroupSummaryRead":
        return cls(
            booking_group_id=summary.group_id,
            series_status=summary.series_status,
            total=summary.total,
            room_ids=summary.room_ids,
            status_counts=summary.status_counts,
            anchors=[BookingRead.model_validate(b) for b in summary.anchors],
            members=[BookingRead.model_validate(b) for b in summary.members],
        )
