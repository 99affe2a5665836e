from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from service_booking.domain.entities.booking import Booking, BookingStatus
from service_booking.domain.entities.time_slot import TimeSlot


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SlotSchema(BaseModel):
    time: datetime
    label: str
    disabled: bool

    @classmethod
    def from_slot(cls, slot: TimeSlot) -> "SlotSchema":
        return cls(time=slot.start_time, label=slot.label, disabled=not slot.available)


class BookingCreateSchema(CamelModel):
    # loosely typed on purpose: field checks happen in the booking lifecycle so every error is reported
    service_id: Any = None
    client_name: Any = None
    client_email: Any = None
    client_phone: Any = None
    appointment_date: Any = None
    notes: str | None = None


class BookingSchema(CamelModel):
    id: int
    service_id: int
    client_name: str
    client_email: str
    client_phone: str
    appointment_date: datetime
    notes: str | None = None
    status: BookingStatus
    confirmed: bool
    calendar_event_id: str | None = None
    calendar_event_link: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingSchema":
        return cls(
            id=booking.id,
            service_id=booking.service_id,
            client_name=booking.client_name,
            client_email=booking.client_email,
            client_phone=booking.client_phone,
            appointment_date=booking.appointment_date,
            notes=booking.notes,
            status=booking.status,
            confirmed=booking.confirmed,
            calendar_event_id=booking.calendar_event_id,
            calendar_event_link=booking.calendar_event_link,
            created_at=booking.created_at,
        )


class BookingCreatedSchema(BookingSchema):
    calendar_event_created: bool = False


class StatusUpdateSchema(BaseModel):
    status: str


class FieldErrorSchema(BaseModel):
    field: str
    message: str


class ValidationErrorSchema(BaseModel):
    message: str
    errors: list[FieldErrorSchema] = Field(default_factory=list)


def validation_error_body(errors: dict[str, str], message: str = "Invalid booking data") -> dict[str, Any]:
    return ValidationErrorSchema(
        message=message,
        errors=[FieldErrorSchema(field=field, message=text) for field, text in sorted(errors.items())],
    ).model_dump()


class ServiceSchema(BaseModel):
    id: int
    name: str
    description: str
    category: str
