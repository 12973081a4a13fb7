from .tables import Base, Bookings, Rooms, metadata

__all__ = ["Base", "Bookings", "Rooms", "metadata"]
