from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"


# cancelled and confirmed are terminal for the transitions we allow
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.pending: frozenset({BookingStatus.confirmed, BookingStatus.cancelled}),
    BookingStatus.confirmed: frozenset(),
    BookingStatus.cancelled: frozenset(),
}


@dataclass(frozen=True)
class Booking:
    id: int | None
    service_id: int
    client_name: str
    client_email: str
    client_phone: str
    appointment_date: datetime
    notes: str | None = None
    status: BookingStatus = BookingStatus.pending
    confirmed: bool = False
    calendar_event_id: str | None = None
    calendar_event_link: str | None = None
    created_at: datetime | None = None

    def can_transition_to(self, status: BookingStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]
