from sqlalchemy import Column, ForeignKey, Index, Integer, Text, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Rooms(Base):
    __tablename__ = 'rooms'

    name = Column(Text, nullable=False)
    capacity = Column(Integer, nullable=False, server_default=text('1'))
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)
    display_order = Column(Integer)
    notes = Column(Text)

    bookings = relationship('Bookings', back_populates='room')


class Bookings(Base):
    __tablename__ = 'bookings'
    __table_args__ = (
        # One active booking per exact slot
        Index(
            'uq_bookings_active_slot',
            'room_id', 'date', 'start_time', 'end_time',
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
        Index('ix_bookings_room_date', 'room_id', 'date'),
    )

    id = Column(Text, primary_key=True)
    room_id = Column(ForeignKey('rooms.id', ondelete='CASCADE'), nullable=False)
    requester_id = Column(Text, nullable=False)
    date = Column(Text, nullable=False)  # YYYY-MM-DD
    start_time = Column(Text, nullable=False)  # HH:MM
    end_time = Column(Text, nullable=False)  # HH:MM
    status = Column(Text, nullable=False, server_default=text("'pending'"))
    event_name = Column(Text, nullable=False)
    purpose = Column(Text, nullable=False, server_default=text("''"))
    attendees = Column(Integer, nullable=False, server_default=text('1'))
    visibility = Column(Text, nullable=False, server_default=text("'private'"))
    selected_items = Column(Text, nullable=False, server_default=text("'[]'"))
    admin_notes = Column(Text)
    booking_group_id = Column(Text, index=True)
    parent_booking_id = Column(Text)
    cancel_reason = Column(Text)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))

    room = relationship('Rooms', back_populates='bookings')
