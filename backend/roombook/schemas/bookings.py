# backend/roombook/schemas/bookings.py

from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

from ..services.scheduler import (
    BookingStatus,
    BookingTemplate,
    InvalidTimeValue,
    MutationReport,
    SeriesBuildResult,
    normalize_time,
)


class BookingTemplateIn(BaseModel):
    room_ids: list[int] = Field(min_length=1)
    requester_id: str
    start_time: str = Field(description="Time in HH:MM format")
    end_time: str = Field(description="Time in HH:MM format")
    event_name: str
    purpose: str = ""
    attendees: int = Field(1, ge=1)
    visibility: Literal["private", "public"] = "private"
    selected_items: list[str] = []
    admin_notes: Optional[str] = None
    status: Literal["pending", "confirmed"] = "pending"

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Normalize to HH:MM (accepts H:MM, HH:MM:SS, h:MM AM/PM)."""
        try:
            return normalize_time(v)
        except InvalidTimeValue as e:
            raise ValueError(str(e))

    def to_template(self) -> BookingTemplate:
        return BookingTemplate(
            room_ids=tuple(self.room_ids),
            requester_id=self.requester_id,
            start_time=self.start_time,
            end_time=self.end_time,
            event_name=self.event_name,
            purpose=self.purpose,
            attendees=self.attendees,
            visibility=self.visibility,
            selected_items=tuple(self.selected_items),
            admin_notes=self.admin_notes,
            initial_status=BookingStatus(self.status),
        )


class BookingCreate(BookingTemplateIn):
    date: date


class BookingRead(BaseModel):
    id: str
    room_id: int
    date: date
    start_time: str
    end_time: str
    status: BookingStatus

    requester_id: str
    event_name: str
    purpose: str
    attendees: int
    visibility: str
    selected_items: list[str]
    admin_notes: Optional[str] = None

    booking_group_id: Optional[str] = None
    parent_booking_id: Optional[str] = None
    cancel_reason: Optional[str] = None

    model_config = {"from_attributes": True}


class BookingFailureRead(BaseModel):
    room_id: int
    date: date
    reason: str
    conflicting_booking_id: Optional[str] = None

    model_config = {"from_attributes": True}


class BookingBatchRead(BaseModel):
    """Result of a one-off or recurring submission."""
    booking_group_id: Optional[str] = None
    outcome: Literal["created", "partial", "conflicted", "empty"]
    requested: int
    created_count: int
    failed_count: int
    truncated: bool = False
    occurrences: list[date]
    created: list[BookingRead]
    failures: list[BookingFailureRead]

    @classmethod
    def from_result(cls, result: SeriesBuildResult) -> "BookingBatchRead":
        return cls(
            booking_group_id=result.group_id,
            outcome=result.outcome,
            requested=result.requested,
            created_count=len(result.created),
            failed_count=len(result.failures),
            truncated=result.truncated,
            occurrences=result.occurrences,
            created=[BookingRead.model_validate(b) for b in result.created],
            failures=[BookingFailureRead.model_validate(f) for f in result.failures],
        )


class BookingActionIn(BaseModel):
    action: Literal["approve", "reject", "cancel"]
    scope: Literal["single", "group"] = "single"
    reason: Optional[str] = None


class SkippedMemberRead(BaseModel):
    booking_id: str
    status: BookingStatus
    reason: str

    model_config = {"from_attributes": True}


class MutationReportRead(BaseModel):
    action: str
    succeeded: int
    skipped_count: int
    changed: list[BookingRead]
    skipped: list[SkippedMemberRead]

    @classmethod
    def from_report(cls, report: MutationReport) -> "MutationReportRead":
        return cls(
            action=report.action.value,
            succeeded=report.succeeded,
            skipped_count=len(report.skipped),
            changed=[BookingRead.model_validate(b) for b in report.changed],
            skipped=[SkippedMemberRead.model_validate(s) for s in report.skipped],
        )
