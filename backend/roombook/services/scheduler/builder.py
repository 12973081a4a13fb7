# backend/roombook/services/scheduler/builder.py
"""
Series builder: template + rule + rooms → linked bookings.

Policy: create everything that is free, report everything that collides.
Every requested (date, room) pair ends in exactly one of
`created` or `failures`.

Linking:
- one booking_group_id per build call, shared across rooms
- the first booking created for a room is that room's anchor
  (parent_booking_id = None); later ones point at it
"""

import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Callable, Iterable, Optional, Sequence

from .config import SchedulerConfig, get_scheduler_config
from .conflicts import find_conflict
from .errors import SlotConflict
from .models import Booking, BookingTemplate, RecurrenceRule
from .occurrences import expand_occurrences

logger = logging.getLogger(__name__)

OUTCOME_CREATED = "created"
OUTCOME_PARTIAL = "partial"
OUTCOME_CONFLICTED = "conflicted"
OUTCOME_EMPTY = "empty"  # EmptyOccurrenceSet: informational, not an error

# Called with each accepted booking; raising SlotConflict rejects it
CreateHook = Callable[[Booking], Optional[Booking]]


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class SeriesFailure:
    room_id: int
    date: date
    reason: str
    conflicting_booking_id: Optional[str] = None


@dataclass
class SeriesBuildResult:
    group_id: Optional[str]
    room_ids: tuple[int, ...]
    occurrences: list[date]
    created: list[Booking] = field(default_factory=list)
    failures: list[SeriesFailure] = field(default_factory=list)
    truncated: bool = False

    @property
    def requested(self) -> int:
        return len(self.occurrences) * len(self.room_ids)

    @property
    def outcome(self) -> str:
        if not self.occurrences:
            return OUTCOME_EMPTY
        if not self.failures:
            return OUTCOME_CREATED
        if self.created:
            return OUTCOME_PARTIAL
        return OUTCOME_CONFLICTED


def build_series(
    template: BookingTemplate,
    rule: RecurrenceRule,
    existing_bookings: Iterable[Booking],
    rooms: Sequence[int] | None = None,
    config: SchedulerConfig | None = None,
    on_create: CreateHook | None = None,
    id_factory: Callable[[], str] = _new_id,
) -> SeriesBuildResult:
    """
    Build a recurring series for one or more rooms.

    Args:
        rooms: overrides template.room_ids
        on_create: persistence hook, see CreateHook
        id_factory: id source for bookings and the group

    Raises:
        InvalidRule / InvalidTemplate: before any booking is materialized
    """
    config = config or get_scheduler_config()
    if rooms is not None:
        template = replace(template, room_ids=tuple(rooms))
    template = template.normalized()

    occurrences, truncated = expand_occurrences(rule, config)
    if truncated:
        logger.info(
            f"Series for rooms {list(template.room_ids)} capped at "
            f"{len(occurrences)} occurrences (requested until {rule.end_date})"
        )

    return _build(
        template,
        occurrences,
        existing_bookings,
        group_id=id_factory(),
        on_create=on_create,
        id_factory=id_factory,
        truncated=truncated,
    )


def build_single(
    template: BookingTemplate,
    on_date: date,
    existing_bookings: Iterable[Booking],
    on_create: CreateHook | None = None,
    id_factory: Callable[[], str] = _new_id,
) -> SeriesBuildResult:
    """
    Build a one-off booking on one date for each template room.

    A group id is only assigned when more than one room is requested.
    """
    template = template.normalized()
    group_id = id_factory() if len(template.room_ids) > 1 else None

    return _build(
        template,
        [on_date],
        existing_bookings,
        group_id=group_id,
        on_create=on_create,
        id_factory=id_factory,
    )


def _build(
    template: BookingTemplate,
    occurrences: list[date],
    existing_bookings: Iterable[Booking],
    group_id: Optional[str],
    on_create: CreateHook | None,
    id_factory: Callable[[], str],
    truncated: bool = False,
) -> SeriesBuildResult:
    result = SeriesBuildResult(
        group_id=group_id,
        room_ids=template.room_ids,
        occurrences=occurrences,
        truncated=truncated,
    )
    if not occurrences:
        logger.info(f"No occurrences for rooms {list(template.room_ids)}, nothing to build")
        return result

    # (room_id, date) → known bookings, grows as occurrences are accepted
    known: dict[tuple[int, date], list[Booking]] = defaultdict(list)
    for booking in existing_bookings:
        known[(booking.room_id, booking.date)].append(booking)

    for room_id in template.room_ids:
        anchor_id: Optional[str] = None

        for on_date in occurrences:
            conflict = find_conflict(
                room_id,
                on_date,
                template.start_time,
                template.end_time,
                known[(room_id, on_date)],
            )
            if conflict is not None:
                result.failures.append(SeriesFailure(
                    room_id=room_id,
                    date=on_date,
                    reason="slot_conflict",
                    conflicting_booking_id=conflict.id,
                ))
                continue

            booking = _materialize(template, room_id, on_date, id_factory(), group_id, anchor_id)

            if on_create is not None:
                try:
                    booking = on_create(booking) or booking
                except SlotConflict as e:
                    logger.warning(f"Storage rejected {room_id}@{on_date}: {e}")
                    result.failures.append(SeriesFailure(
                        room_id=room_id,
                        date=on_date,
                        reason=e.reason,
                        conflicting_booking_id=e.conflicting_booking_id,
                    ))
                    continue

            known[(room_id, on_date)].append(booking)
            result.created.append(booking)
            if anchor_id is None:
                anchor_id = booking.id

    logger.info(
        f"Built group {group_id}: {len(result.created)} of {result.requested} created, "
        f"{len(result.failures)} failed"
    )
    return result


def _materialize(
    template: BookingTemplate,
    room_id: int,
    on_date: date,
    booking_id: str,
    group_id: Optional[str],
    anchor_id: Optional[str],
) -> Booking:
    return Booking(
        id=booking_id,
        room_id=room_id,
        date=on_date,
        start_time=template.start_time,
        end_time=template.end_time,
        requester_id=template.requester_id,
        event_name=template.event_name,
        status=template.initial_status,
        purpose=template.purpose,
        attendees=template.attendees,
        visibility=template.visibility,
        selected_items=tuple(template.selected_items),
        admin_notes=template.admin_notes,
        booking_group_id=group_id,
        parent_booking_id=anchor_id,
    )
