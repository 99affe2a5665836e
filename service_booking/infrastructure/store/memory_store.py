from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone

from service_booking.application.exceptions import ConflictError, InvalidStatusTransitionError
from service_booking.application.ports.booking_store import BookingStorePort
from service_booking.application.ports.service_catalog import ServiceCatalogPort
from service_booking.domain.entities.booking import Booking, BookingStatus
from service_booking.domain.entities.service import Service


class MemoryBookingStore(BookingStorePort):
    """Process-local store with the same uniqueness rule as the SQL store."""

    def __init__(self) -> None:
        self._bookings: dict[int, Booking] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, booking: Booking) -> Booking:
        with self._lock:
            for existing in self._bookings.values():
                if existing.status is not BookingStatus.cancelled and existing.appointment_date == booking.appointment_date:
                    raise ConflictError("Time slot is already booked")
            stored = replace(booking, id=self._next_id, created_at=booking.created_at or datetime.now(timezone.utc))
            self._bookings[stored.id] = stored
            self._next_id += 1
            return stored

    def get(self, booking_id: int) -> Booking | None:
        return self._bookings.get(booking_id)

    def get_by_email(self, email: str) -> list[Booking]:
        return [b for b in self.list_all() if b.client_email == email]

    def list_all(self) -> list[Booking]:
        with self._lock:
            bookings = list(self._bookings.values())
        return sorted(bookings, key=lambda b: (b.appointment_date, b.id))

    def update_status(self, booking_id: int, status: BookingStatus, expected: BookingStatus) -> Booking | None:
        with self._lock:
            current = self._bookings.get(booking_id)
            if current is None:
                return None
            if current.status is not expected:
                raise InvalidStatusTransitionError(
                    f"Booking {booking_id} is {current.status.value}, not {expected.value}"
                )
            updated = replace(current, status=status, confirmed=current.confirmed or status is BookingStatus.confirmed)
            self._bookings[booking_id] = updated
            return updated


class MemoryServiceCatalog(ServiceCatalogPort):
    def __init__(self, services: list[Service] | None = None) -> None:
        self._services = {s.id: s for s in services or []}

    def get_service(self, service_id: int) -> Service | None:
        return self._services.get(service_id)

    def list_services(self) -> list[Service]:
        return [self._services[k] for k in sorted(self._services)]
