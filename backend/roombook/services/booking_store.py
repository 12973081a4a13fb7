# backend/roombook/services/booking_store.py
"""
SQLAlchemy-backed booking repository.

Rows store date as "YYYY-MM-DD" and times as "HH:MM" text, so range
filters and the unique index work on plain string comparison.

Each add() commits on its own: a uniqueness rejection only rolls back
that one occurrence and is surfaced as SlotConflict.

save() with an expected status is a compare-and-set: a booking whose
status changed since it was read is left alone (InvalidTransition).
"""

import json
import logging
from datetime import date, datetime
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models import Bookings as DBBookings, Rooms as DBRooms
from .scheduler import (
    Booking,
    BookingNotFound,
    BookingRepository,
    BookingStatus,
    InvalidTransition,
    SlotConflict,
)

logger = logging.getLogger(__name__)


def row_to_booking(row: DBBookings) -> Booking:
    try:
        items = json.loads(row.selected_items) if row.selected_items else []
    except json.JSONDecodeError:
        items = []

    return Booking(
        id=row.id,
        room_id=row.room_id,
        date=date.fromisoformat(str(row.date)[:10]),
        start_time=row.start_time,
        end_time=row.end_time,
        requester_id=row.requester_id,
        event_name=row.event_name,
        status=BookingStatus(row.status),
        purpose=row.purpose or "",
        attendees=row.attendees,
        visibility=row.visibility,
        selected_items=tuple(items),
        admin_notes=row.admin_notes,
        booking_group_id=row.booking_group_id,
        parent_booking_id=row.parent_booking_id,
        cancel_reason=row.cancel_reason,
    )


def booking_to_row(booking: Booking) -> DBBookings:
    return DBBookings(
        id=booking.id,
        room_id=booking.room_id,
        requester_id=booking.requester_id,
        date=booking.date.isoformat(),
        start_time=booking.start_time,
        end_time=booking.end_time,
        status=BookingStatus(booking.status).value,
        event_name=booking.event_name,
        purpose=booking.purpose,
        attendees=booking.attendees,
        visibility=booking.visibility,
        selected_items=json.dumps(list(booking.selected_items)),
        admin_notes=booking.admin_notes,
        booking_group_id=booking.booking_group_id,
        parent_booking_id=booking.parent_booking_id,
        cancel_reason=booking.cancel_reason,
    )


def _now_str() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class SqlBookingRepository(BookingRepository):
    def __init__(self, db: Session):
        self.db = db

    def get(self, booking_id: str) -> Optional[Booking]:
        row = self.db.get(DBBookings, booking_id)
        return row_to_booking(row) if row else None

    def list_for_rooms(
        self,
        room_ids: Iterable[int],
        date_from: date,
        date_to: date,
    ) -> list[Booking]:
        rows = (
            self.db.query(DBBookings)
            .filter(
                DBBookings.room_id.in_(list(room_ids)),
                DBBookings.date >= date_from.isoformat(),
                DBBookings.date <= date_to.isoformat(),
                DBBookings.status != BookingStatus.CANCELLED.value,
            )
            .all()
        )
        return [row_to_booking(r) for r in rows]

    def list_group(self, group_id: str) -> list[Booking]:
        rows = (
            self.db.query(DBBookings)
            .filter(DBBookings.booking_group_id == group_id)
            .all()
        )
        return [row_to_booking(r) for r in rows]

    def search(
        self,
        room_id: Optional[int] = None,
        group_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Booking]:
        query = self.db.query(DBBookings)
        if room_id is not None:
            query = query.filter(DBBookings.room_id == room_id)
        if group_id is not None:
            query = query.filter(DBBookings.booking_group_id == group_id)
        if status is not None:
            query = query.filter(DBBookings.status == status)
        rows = query.order_by(DBBookings.date, DBBookings.start_time, DBBookings.room_id).all()
        return [row_to_booking(r) for r in rows]

    def add(self, booking: Booking) -> Booking:
        row = booking_to_row(booking)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(
                f"Unique slot rejected booking room={booking.room_id} "
                f"date={booking.date} {booking.start_time}-{booking.end_time}: {e.orig}"
            )
            raise SlotConflict(booking.room_id, booking.date, reason="storage_conflict") from e
        return booking

    def save(
        self,
        booking: Booking,
        expected_status: Optional[BookingStatus] = None,
    ) -> Booking:
        query = self.db.query(DBBookings).filter(DBBookings.id == booking.id)
        if expected_status is not None:
            query = query.filter(DBBookings.status == BookingStatus(expected_status).value)

        # Single UPDATE ... WHERE: a concurrent status change makes it match no row
        updated = query.update(
            {
                DBBookings.status: BookingStatus(booking.status).value,
                DBBookings.cancel_reason: booking.cancel_reason,
                DBBookings.updated_at: _now_str(),
            },
            synchronize_session=False,
        )
        if updated:
            self.db.commit()
            return booking

        self.db.rollback()
        current = (
            self.db.query(DBBookings.status)
            .filter(DBBookings.id == booking.id)
            .scalar()
        )
        if current is None:
            raise BookingNotFound(booking.id)

        logger.warning(
            f"Stale write on booking {booking.id}: expected {BookingStatus(expected_status).value}, "
            f"found {current}"
        )
        raise InvalidTransition(booking.id, current, "update")

    def delete(self, booking_id: str) -> None:
        row = self.db.get(DBBookings, booking_id)
        if not row:
            raise BookingNotFound(booking_id)
        self.db.delete(row)
        self.db.commit()


def find_missing_rooms(db: Session, room_ids: Iterable[int]) -> list[int]:
    """Room ids that do not exist or are inactive."""
    wanted = set(room_ids)
    found = {
        r.id for r in
        db.query(DBRooms.id)
        .filter(DBRooms.id.in_(list(wanted)), DBRooms.is_active == 1)
        .all()
    }
    return sorted(wanted - found)
