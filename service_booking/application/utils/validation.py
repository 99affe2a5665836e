from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

from service_booking.application.dto.booking_request import BookingRequest
from service_booking.application.exceptions import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PHONE_LENGTH = 10
MAX_NOTES_LENGTH = 2000


@dataclass(frozen=True)
class ValidBookingRequest:
    service_id: int
    client_name: str
    client_email: str
    client_phone: str
    appointment_date: datetime
    notes: str | None


def parse_appointment_date(value: Any, tz: ZoneInfo) -> datetime | None:
    """Parse an ISO-8601 string (or datetime). Naive values are taken as business-local time."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def validate_booking_request(request: BookingRequest, now: datetime, tz: ZoneInfo) -> ValidBookingRequest:
    """Check every field and raise ValidationError listing all violations."""
    errors: dict[str, str] = {}

    service_id: int | None = None
    if isinstance(request.service_id, bool):
        errors["serviceId"] = "Service is required"
    else:
        try:
            service_id = int(request.service_id)
        except (TypeError, ValueError):
            errors["serviceId"] = "Service is required"

    name = request.client_name.strip() if isinstance(request.client_name, str) else ""
    if not name:
        errors["clientName"] = "Name is required"

    email = request.client_email.strip() if isinstance(request.client_email, str) else ""
    if not EMAIL_RE.match(email):
        errors["clientEmail"] = "Invalid email address"

    phone = request.client_phone.strip() if isinstance(request.client_phone, str) else ""
    if len(phone) < MIN_PHONE_LENGTH:
        errors["clientPhone"] = f"Phone number must be at least {MIN_PHONE_LENGTH} characters"

    appointment_date = parse_appointment_date(request.appointment_date, tz)
    if appointment_date is None:
        errors["appointmentDate"] = "Invalid appointment date"
    elif appointment_date <= now:
        errors["appointmentDate"] = "Appointment date must be in the future"

    notes = request.notes.strip() if isinstance(request.notes, str) else None
    if notes and len(notes) > MAX_NOTES_LENGTH:
        errors["notes"] = f"Notes must be at most {MAX_NOTES_LENGTH} characters"

    if errors:
        raise ValidationError(errors)

    return ValidBookingRequest(
        service_id=service_id,
        client_name=name,
        client_email=email,
        client_phone=phone,
        appointment_date=appointment_date.astimezone(timezone.utc),
        notes=notes or None,
    )
