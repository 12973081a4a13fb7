# backend/roombook/routers/bookings.py
# PATCH = 405 (date/room/time are immutable; cancel and rebook instead)
# DELETE = hard delete, optionally for the whole group

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.bookings import (
    BookingActionIn,
    BookingBatchRead,
    BookingCreate,
    BookingRead,
    MutationReportRead,
)
from ..services.booking_store import SqlBookingRepository, find_missing_rooms
from ..services.scheduler import (
    BookingNotFound,
    InvalidTemplate,
    InvalidTransition,
    MutationAction,
)
from ..services.series import execute_mutation, submit_single

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


def require_rooms(db: Session, room_ids: list[int]) -> None:
    missing = find_missing_rooms(db, room_ids)
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Room not found or inactive: {missing}",
        )


@router.get("/", response_model=list[BookingRead])
def list_bookings(
    room_id: Optional[int] = None,
    group_id: Optional[str] = None,
    status: Optional[Literal["pending", "confirmed", "cancelled"]] = None,
    db: Session = Depends(get_db),
):
    return SqlBookingRepository(db).search(room_id=room_id, group_id=group_id, status=status)


@router.get("/{id}", response_model=BookingRead)
def get_booking(id: str, db: Session = Depends(get_db)):
    obj = SqlBookingRepository(db).get(id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=BookingBatchRead, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
):
    """
    Create a one-off booking in one or more rooms.

    Rooms that are free get a booking; taken rooms are reported in
    `failures`. 409 only when no room could be booked.
    """
    require_rooms(db, data.room_ids)

    try:
        result = submit_single(SqlBookingRepository(db), data.to_template(), data.date)
    except InvalidTemplate as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not result.created:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Slot already booked for this room and time.",
        )
    return BookingBatchRead.from_result(result)


@router.post("/{id}/actions", response_model=MutationReportRead)
def apply_booking_action(
    id: str,
    data: BookingActionIn,
    db: Session = Depends(get_db),
):
    """Approve / reject / cancel a booking, or every member of its group."""
    try:
        report = execute_mutation(
            SqlBookingRepository(db),
            MutationAction(data.action),
            id,
            apply_to_group=data.scope == "group",
            reason=data.reason,
        )
    except BookingNotFound:
        raise HTTPException(status_code=404, detail="Not found")
    except InvalidTransition as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return MutationReportRead.from_report(report)


@router.delete("/{id}", response_model=MutationReportRead)
def delete_booking(
    id: str,
    scope: Literal["single", "group"] = "single",
    db: Session = Depends(get_db),
):
    try:
        report = execute_mutation(
            SqlBookingRepository(db),
            MutationAction.DELETE,
            id,
            apply_to_group=scope == "group",
        )
    except BookingNotFound:
        raise HTTPException(status_code=404, detail="Not found")

    return MutationReportRead.from_report(report)


@router.patch("/{id}")
def patch_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )
