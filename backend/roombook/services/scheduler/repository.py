# backend/roombook/services/scheduler/repository.py
"""
Booking storage contract used by the scheduler services.

Storage is a key-value repository of Booking records. Implementations
must reject a second non-cancelled booking with the same
(room_id, date, start_time, end_time) by raising SlotConflict.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional

from .errors import BookingNotFound, InvalidTransition, SlotConflict
from .models import Booking, BookingStatus


class BookingRepository(ABC):
    """Interface for booking storage."""

    @abstractmethod
    def get(self, booking_id: str) -> Optional[Booking]:
        """Booking by id, or None."""

    @abstractmethod
    def list_for_rooms(
        self,
        room_ids: Iterable[int],
        date_from: date,
        date_to: date,
    ) -> list[Booking]:
        """Bookings for the rooms with date in [date_from, date_to]."""

    @abstractmethod
    def list_group(self, group_id: str) -> list[Booking]:
        """All bookings sharing booking_group_id."""

    @abstractmethod
    def add(self, booking: Booking) -> Booking:
        """
        Persist a new booking.

        Raises:
            SlotConflict: storage-level uniqueness rejection
        """

    @abstractmethod
    def save(
        self,
        booking: Booking,
        expected_status: Optional[BookingStatus] = None,
    ) -> Booking:
        """
        Persist a status change of an existing booking.

        With expected_status the write only happens if the stored status
        still matches it (compare-and-set).

        Raises:
            BookingNotFound: booking is gone
            InvalidTransition: stored status no longer matches expected_status
        """

    @abstractmethod
    def delete(self, booking_id: str) -> None:
        """Remove a booking."""

    def require(self, booking_id: str) -> Booking:
        booking = self.get(booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)
        return booking


class InMemoryBookingRepository(BookingRepository):
    """Dict-backed repository with the same uniqueness rule as the database."""

    def __init__(self, bookings: Iterable[Booking] = ()):
        self._items: dict[str, Booking] = {}
        for booking in bookings:
            self._items[booking.id] = booking

    def get(self, booking_id: str) -> Optional[Booking]:
        return self._items.get(booking_id)

    def list_for_rooms(self, room_ids, date_from, date_to) -> list[Booking]:
        rooms = set(room_ids)
        return [
            b for b in self._items.values()
            if b.room_id in rooms and date_from <= b.date <= date_to
        ]

    def list_group(self, group_id: str) -> list[Booking]:
        return [b for b in self._items.values() if b.booking_group_id == group_id]

    def list_all(self) -> list[Booking]:
        return sorted(self._items.values(), key=Booking.sort_key)

    def add(self, booking: Booking) -> Booking:
        for other in self._items.values():
            if (
                other.status != BookingStatus.CANCELLED
                and (other.room_id, other.date, other.start_time, other.end_time)
                == (booking.room_id, booking.date, booking.start_time, booking.end_time)
            ):
                raise SlotConflict(
                    booking.room_id,
                    booking.date,
                    reason="storage_conflict",
                    conflicting_booking_id=other.id,
                )
        self._items[booking.id] = booking
        return booking

    def save(
        self,
        booking: Booking,
        expected_status: Optional[BookingStatus] = None,
    ) -> Booking:
        current = self._items.get(booking.id)
        if current is None:
            raise BookingNotFound(booking.id)
        if expected_status is not None and current.status != expected_status:
            raise InvalidTransition(booking.id, BookingStatus(current.status).value, "update")
        self._items[booking.id] = booking
        return booking

    def delete(self, booking_id: str) -> None:
        if self._items.pop(booking_id, None) is None:
            raise BookingNotFound(booking_id)
