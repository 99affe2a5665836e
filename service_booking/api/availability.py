from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from service_booking.api.schemas import SlotSchema
from service_booking.application.use_cases.availability import AvailabilityService
from service_booking.wiring.dependencies import get_availability_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/availability", response_model=list[SlotSchema])
def get_availability(
    date_param: str | None = Query(None, alias="date"),
    service: AvailabilityService = Depends(get_availability_service),
) -> list[SlotSchema]:
    if not date_param:
        raise HTTPException(status_code=400, detail="Date parameter is required")
    try:
        day = date.fromisoformat(date_param)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format, expected YYYY-MM-DD")

    slots = service.get_available_slots(day)
    logger.info("Availability served", extra={"appointment_date": day.isoformat(), "reason": f"{len(slots)} slots"})
    return [SlotSchema.from_slot(slot) for slot in slots]
