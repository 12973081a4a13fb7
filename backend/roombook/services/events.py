"""
backend/roombook/services/events.py

Event emitter: pushes booking events to a Redis queue for notification
consumers (email, messengers).

Queue:
- events:p2p: instant delivery to the requester / admins
"""

import json
import time
import logging

from ..config import settings
from ..redis_client import redis_client
from .scheduler import Booking

logger = logging.getLogger(__name__)

P2P_QUEUE = "events:p2p"


def emit_event(event_type: str, payload: dict) -> None:
    """
    Emit a p2p event (instant delivery).

    Delivery is best effort: a Redis failure is logged, never raised.
    """
    if not settings.events_enabled:
        return

    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        redis_client.rpush(P2P_QUEUE, json.dumps(event))
        logger.info(f"Event emitted: {event_type} → {P2P_QUEUE}")
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")


def booking_payload(booking: Booking) -> dict:
    return {
        "booking_id": booking.id,
        "room_id": booking.room_id,
        "requester_id": booking.requester_id,
        "date": booking.date.isoformat(),
        "start_time": booking.start_time,
        "end_time": booking.end_time,
        "status": booking.status.value,
        "booking_group_id": booking.booking_group_id,
    }
