# backend/roombook/main.py

import logging

from fastapi import FastAPI
from redis.exceptions import RedisError

from .config import settings
from .redis_client import redis_client
from .routers import bookings, rooms, series

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Room Booking API")

app.include_router(rooms.router)
app.include_router(bookings.router)
app.include_router(series.router)


@app.get("/health")
def health():
    try:
        redis_ok = bool(redis_client.ping())
    except RedisError as e:
        logger.warning(f"Redis ping failed: {e}")
        redis_ok = False
    return {"status": "ok", "redis": redis_ok}
