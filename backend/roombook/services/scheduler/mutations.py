# backend/roombook/services/scheduler/mutations.py
"""
Series mutation policy.

State machine:
    pending   --approve--> confirmed
    pending   --reject---> cancelled
    pending   --cancel---> cancelled
    confirmed --cancel---> cancelled
    any       --delete---> (removed)

Nothing leaves cancelled. Group scope applies the action best-effort
to every member, in ascending date order, and reports who changed.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional, Union

from .errors import InvalidTransition
from .models import Booking, BookingStatus

logger = logging.getLogger(__name__)


class MutationAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    CANCEL = "cancel"
    DELETE = "delete"


TRANSITIONS: dict[MutationAction, dict[BookingStatus, BookingStatus]] = {
    MutationAction.APPROVE: {
        BookingStatus.PENDING: BookingStatus.CONFIRMED,
    },
    MutationAction.REJECT: {
        BookingStatus.PENDING: BookingStatus.CANCELLED,
    },
    MutationAction.CANCEL: {
        BookingStatus.PENDING: BookingStatus.CANCELLED,
        BookingStatus.CONFIRMED: BookingStatus.CANCELLED,
    },
}


@dataclass(frozen=True)
class SingleScope:
    booking_id: str


@dataclass(frozen=True)
class GroupScope:
    group_id: str
    room_id: Optional[int] = None  # restrict to one room of a multi-room group


MutationScope = Union[SingleScope, GroupScope]


@dataclass(frozen=True)
class MutationRequest:
    action: MutationAction
    scope: MutationScope
    reason: Optional[str] = None


@dataclass(frozen=True)
class SkippedMember:
    booking_id: str
    status: BookingStatus
    reason: str


@dataclass
class MutationReport:
    action: MutationAction
    changed: list[Booking] = field(default_factory=list)
    skipped: list[SkippedMember] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.changed)


def apply_transition(
    booking: Booking,
    action: MutationAction,
    reason: Optional[str] = None,
) -> Booking:
    """
    Return the booking after a status action.

    Raises:
        InvalidTransition: action not allowed from the current status
    """
    action = MutationAction(action)
    status = BookingStatus(booking.status)
    target = TRANSITIONS.get(action, {}).get(status)
    if target is None:
        raise InvalidTransition(booking.id, status.value, action.value)

    changes = {"status": target}
    if target == BookingStatus.CANCELLED and reason:
        changes["cancel_reason"] = reason
    return replace(booking, **changes)


def plan_mutation(request: MutationRequest, members: Iterable[Booking]) -> MutationReport:
    """
    Compute the effect of a request on the resolved member list.

    Single scope: an invalid transition raises InvalidTransition.
    Group scope: invalid members are skipped and reported.
    Delete: every member is removed regardless of status.

    Pure: the caller persists report.changed (or deletes them for DELETE).
    """
    action = MutationAction(request.action)
    ordered = sorted(members, key=Booking.sort_key)
    report = MutationReport(action=action)

    if isinstance(request.scope, GroupScope) and request.scope.room_id is not None:
        ordered = [b for b in ordered if b.room_id == request.scope.room_id]

    for booking in ordered:
        if action == MutationAction.DELETE:
            report.changed.append(booking)
            continue

        try:
            report.changed.append(apply_transition(booking, action, request.reason))
        except InvalidTransition as e:
            if isinstance(request.scope, SingleScope):
                raise
            logger.info(f"Group {request.scope.group_id}: skipping {booking.id}: {e}")
            report.skipped.append(SkippedMember(
                booking_id=booking.id,
                status=BookingStatus(booking.status),
                reason=f"cannot {action.value} from {BookingStatus(booking.status).value}",
            ))

    return report
