from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from service_booking.api.admin_auth import require_admin
from service_booking.api.schemas import (
    BookingCreatedSchema,
    BookingCreateSchema,
    BookingSchema,
    StatusUpdateSchema,
    validation_error_body,
)
from service_booking.application.dto.booking_request import BookingRequest
from service_booking.application.exceptions import (
    ConflictError,
    InternalError,
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from service_booking.application.use_cases.booking import BookingLifecycle
from service_booking.wiring.dependencies import get_booking_lifecycle

router = APIRouter()
logger = logging.getLogger(__name__)

SLOT_TAKEN_MESSAGE = "This time slot is already booked, please choose another"
SLOT_UNVERIFIED_MESSAGE = "We could not confirm this time slot right now, please try again or choose another"
GENERIC_FAILURE_MESSAGE = "Failed to create booking"


@router.post("/bookings", status_code=201, response_model=BookingCreatedSchema, response_model_by_alias=True)
def create_booking(
    body: BookingCreateSchema,
    lifecycle: BookingLifecycle = Depends(get_booking_lifecycle),
):
    request = BookingRequest(
        service_id=body.service_id,
        client_name=body.client_name,
        client_email=body.client_email,
        client_phone=body.client_phone,
        appointment_date=body.appointment_date,
        notes=body.notes,
    )
    try:
        booking = lifecycle.submit_booking(request)
    except ValidationError as e:
        return JSONResponse(status_code=400, content=validation_error_body(e.errors))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        message = SLOT_TAKEN_MESSAGE if type(e) is ConflictError else SLOT_UNVERIFIED_MESSAGE
        raise HTTPException(status_code=409, detail=message)
    except InternalError:
        raise HTTPException(status_code=500, detail=GENERIC_FAILURE_MESSAGE)

    return BookingCreatedSchema(
        **BookingSchema.from_booking(booking).model_dump(),
        calendar_event_created=booking.calendar_event_id is not None,
    )


@router.get("/bookings", response_model=list[BookingSchema], response_model_by_alias=True)
def list_bookings(
    email: str | None = Query(None),
    lifecycle: BookingLifecycle = Depends(get_booking_lifecycle),
):
    if not email:
        # listing every client's bookings is an admin operation
        raise HTTPException(status_code=400, detail="email query parameter is required")
    return [BookingSchema.from_booking(b) for b in lifecycle.get_bookings(email)]


@router.get(
    "/admin/bookings",
    response_model=list[BookingSchema],
    response_model_by_alias=True,
    dependencies=[Depends(require_admin)],
)
def list_all_bookings(lifecycle: BookingLifecycle = Depends(get_booking_lifecycle)):
    return [BookingSchema.from_booking(b) for b in lifecycle.get_bookings()]


@router.get(
    "/bookings/{booking_id}",
    response_model=BookingSchema,
    response_model_by_alias=True,
    dependencies=[Depends(require_admin)],
)
def get_booking(booking_id: int, lifecycle: BookingLifecycle = Depends(get_booking_lifecycle)):
    try:
        return BookingSchema.from_booking(lifecycle.get_booking(booking_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch(
    "/bookings/{booking_id}/status",
    response_model=BookingSchema,
    response_model_by_alias=True,
    dependencies=[Depends(require_admin)],
)
def update_booking_status(
    booking_id: int,
    body: StatusUpdateSchema,
    lifecycle: BookingLifecycle = Depends(get_booking_lifecycle),
):
    try:
        booking = lifecycle.update_status(booking_id, body.status)
    except ValidationError as e:
        return JSONResponse(status_code=400, content=validation_error_body(e.errors, message="Invalid status"))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return BookingSchema.from_booking(booking)
