# backend/roombook/services/series.py
"""
Booking series service.

Glue between the pure scheduler and storage/events:

submit:  validate → snapshot existing bookings → build (persisting each
         accepted occurrence) → emit events
mutate:  resolve scope → plan → persist per member → emit events
"""

import logging
from datetime import date
from typing import Optional

from .events import booking_payload, emit_event
from .scheduler import (
    BookingNotFound,
    BookingRepository,
    BookingStatus,
    BookingTemplate,
    GroupScope,
    InvalidTransition,
    MutationAction,
    MutationReport,
    MutationRequest,
    RecurrenceRule,
    SchedulerConfig,
    SeriesBuildResult,
    SingleScope,
    build_series,
    build_single,
    get_scheduler_config,
    plan_mutation,
)
from .scheduler.mutations import MutationScope, SkippedMember
from .scheduler.occurrences import effective_end_date

logger = logging.getLogger(__name__)


def submit_series(
    repo: BookingRepository,
    template: BookingTemplate,
    rule: RecurrenceRule,
    config: SchedulerConfig | None = None,
) -> SeriesBuildResult:
    """
    Create a recurring series.

    Raises:
        InvalidTemplate / InvalidRule: nothing has been written
    """
    config = config or get_scheduler_config()
    template = template.normalized()
    rule.validate(config)

    existing = repo.list_for_rooms(
        template.room_ids,
        rule.anchor_date,
        effective_end_date(rule, config),
    )
    result = build_series(template, rule, existing, config=config, on_create=repo.add)

    logger.info(
        f"Series {result.group_id} ({rule.pattern}) for rooms {list(result.room_ids)}: "
        f"outcome={result.outcome}, {len(result.created)}/{result.requested} created"
    )
    _emit_created(result)
    return result


def submit_single(
    repo: BookingRepository,
    template: BookingTemplate,
    on_date: date,
) -> SeriesBuildResult:
    """Create a one-off booking in each template room."""
    template = template.normalized()
    existing = repo.list_for_rooms(template.room_ids, on_date, on_date)
    result = build_single(template, on_date, existing, on_create=repo.add)

    logger.info(
        f"Single booking on {on_date} for rooms {list(result.room_ids)}: "
        f"{len(result.created)}/{result.requested} created"
    )
    _emit_created(result)
    return result


def resolve_scope(
    repo: BookingRepository,
    booking_id: str,
    apply_to_group: bool,
    config: SchedulerConfig | None = None,
) -> MutationScope:
    """
    Turn "this booking, maybe its group" into an explicit scope.

    Bookings without a group always resolve to SingleScope.
    """
    config = config or get_scheduler_config()
    booking = repo.require(booking_id)

    if apply_to_group and booking.booking_group_id:
        room_id = None if config.group_mutations_cross_rooms else booking.room_id
        return GroupScope(group_id=booking.booking_group_id, room_id=room_id)
    return SingleScope(booking_id=booking_id)


def execute_mutation(
    repo: BookingRepository,
    action: MutationAction,
    booking_id: str,
    apply_to_group: bool = False,
    reason: Optional[str] = None,
    config: SchedulerConfig | None = None,
) -> MutationReport:
    """
    Apply approve / reject / cancel / delete to a booking or its group.

    Raises:
        BookingNotFound: booking_id is unknown
        InvalidTransition: single scope and the action is not allowed, or
            the booking changed status after it was read
    """
    action = MutationAction(action)
    scope = resolve_scope(repo, booking_id, apply_to_group, config)

    if isinstance(scope, GroupScope):
        members = repo.list_group(scope.group_id)
    else:
        members = [repo.require(scope.booking_id)]

    planned = plan_mutation(MutationRequest(action=action, scope=scope, reason=reason), members)
    report = MutationReport(action=action, skipped=list(planned.skipped))
    before = {b.id: BookingStatus(b.status) for b in members}

    for booking in planned.changed:
        try:
            if action == MutationAction.DELETE:
                repo.delete(booking.id)
            else:
                repo.save(booking, expected_status=before[booking.id])
        except BookingNotFound:
            # Removed concurrently; report it and keep going
            report.skipped.append(SkippedMember(
                booking_id=booking.id,
                status=before[booking.id],
                reason="not found",
            ))
            continue
        except InvalidTransition as e:
            # Status changed concurrently; the stored one wins
            if isinstance(scope, SingleScope):
                raise
            report.skipped.append(SkippedMember(
                booking_id=booking.id,
                status=BookingStatus(e.status),
                reason=f"cannot {action.value} from {e.status}",
            ))
            continue

        report.changed.append(booking)
        if action == MutationAction.DELETE:
            emit_event("booking_deleted", booking_payload(booking))
        else:
            emit_event("booking_status_changed", {
                **booking_payload(booking),
                "action": action.value,
                "reason": reason,
            })

    logger.info(
        f"{action.value} on {booking_id} ({type(scope).__name__}): "
        f"{report.succeeded} changed, {len(report.skipped)} skipped"
    )
    return report


def _emit_created(result: SeriesBuildResult) -> None:
    if not result.created:
        return

    if result.group_id and len(result.created) > 1:
        emit_event("booking_series_created", {
            "booking_group_id": result.group_id,
            "room_ids": list(result.room_ids),
            "requester_id": result.created[0].requester_id,
            "created": len(result.created),
            "requested": result.requested,
            "failed_dates": sorted({f.date.isoformat() for f in result.failures}),
        })
        return

    for booking in result.created:
        emit_event("booking_created", booking_payload(booking))
