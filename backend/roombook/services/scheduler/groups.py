# backend/roombook/services/scheduler/groups.py
"""
Series view: members of one booking group, anchor first.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from .models import Booking, BookingStatus

SERIES_ALL_CONFIRMED = "all_confirmed"
SERIES_ALL_CANCELLED = "all_cancelled"
SERIES_PARTIALLY_CONFIRMED = "partially_confirmed"
SERIES_PENDING = "pending"


@dataclass(frozen=True)
class GroupSummary:
    group_id: str
    members: list[Booking]
    anchors: list[Booking]
    room_ids: list[int]
    status_counts: dict[str, int]
    series_status: str

    @property
    def total(self) -> int:
        return len(self.members)


def order_group(members: Iterable[Booking]) -> list[Booking]:
    """Anchors first, then by date and start time."""
    return sorted(
        members,
        key=lambda b: (b.parent_booking_id is not None, b.date, b.start_time, b.room_id, b.id),
    )


def series_status(members: list[Booking]) -> str:
    statuses = [BookingStatus(b.status) for b in members]
    if statuses and all(s == BookingStatus.CONFIRMED for s in statuses):
        return SERIES_ALL_CONFIRMED
    if statuses and all(s == BookingStatus.CANCELLED for s in statuses):
        return SERIES_ALL_CANCELLED
    if any(s == BookingStatus.CONFIRMED for s in statuses):
        return SERIES_PARTIALLY_CONFIRMED
    return SERIES_PENDING


def summarize_group(group_id: str, members: Iterable[Booking]) -> GroupSummary:
    ordered = order_group(members)
    counts = Counter(BookingStatus(b.status).value for b in ordered)
    return GroupSummary(
        group_id=group_id,
        members=ordered,
        anchors=[b for b in ordered if b.parent_booking_id is None],
        room_ids=sorted({b.room_id for b in ordered}),
        status_counts={s.value: counts.get(s.value, 0) for s in BookingStatus},
        series_status=series_status(ordered),
    )
