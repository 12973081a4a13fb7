# backend/roombook/routers/series.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.bookings import BookingBatchRead
from ..schemas.series import (
    GroupSummaryRead,
    RecurrenceRuleIn,
    SeriesCreate,
    SeriesPreviewResponse,
)
from ..services.booking_store import SqlBookingRepository
from ..services.scheduler import (
    InvalidRule,
    InvalidTemplate,
    get_scheduler_config,
    summarize_group,
)
from ..services.scheduler.models import WEEKDAY_NAMES, sunday_weekday
from ..services.scheduler.occurrences import effective_end_date, expand_occurrences
from ..services.series import submit_series
from .bookings import require_rooms

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/series", tags=["series"])


@router.post("/", response_model=BookingBatchRead, status_code=status.HTTP_201_CREATED)
def create_series(
    data: SeriesCreate,
    db: Session = Depends(get_db),
):
    """
    Create a recurring series across one or more rooms.

    ✓ every free (room, date) slot becomes a booking sharing one group id
    ✗ taken slots are skipped and listed in `failures`

    The response is 201 even when nothing could be booked; check `outcome`.
    """
    require_rooms(db, data.room_ids)

    try:
        result = submit_series(
            SqlBookingRepository(db),
            data.to_template(),
            data.recurrence.to_rule(),
        )
    except (InvalidRule, InvalidTemplate) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return BookingBatchRead.from_result(result)


@router.post("/preview", response_model=SeriesPreviewResponse)
def preview_series(data: RecurrenceRuleIn):
    """Dates a rule expands to. Nothing is written."""
    config = get_scheduler_config()
    rule = data.to_rule()

    try:
        dates, truncated = expand_occurrences(rule, config)
    except InvalidRule as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return SeriesPreviewResponse(
        occurrences=dates,
        count=len(dates),
        effective_end_date=effective_end_date(rule, config),
        truncated=truncated,
        weekdays=[WEEKDAY_NAMES[sunday_weekday(d)] for d in dates],
    )


@router.get("/{group_id}", response_model=GroupSummaryRead)
def get_series(group_id: str, db: Session = Depends(get_db)):
    members = SqlBookingRepository(db).list_group(group_id)
    if not members:
        raise HTTPException(status_code=404, detail="Not found")
    return GroupSummaryRead.from_summary(summarize_group(group_id, members))
