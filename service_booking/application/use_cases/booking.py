from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from service_booking.application.dto.booking_request import BookingRequest
from service_booking.application.exceptions import (
    BookingEngineError,
    InternalError,
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from service_booking.application.ports.booking_store import BookingStorePort
from service_booking.application.ports.service_catalog import ServiceCatalogPort
from service_booking.application.ports.task_scheduler import TaskSchedulerPort
from service_booking.application.use_cases.availability import utc_now
from service_booking.application.use_cases.calendar_gateway import ExternalCalendarGateway
from service_booking.application.use_cases.notifications import NotificationDispatcher
from service_booking.application.utils.validation import validate_booking_request
from service_booking.domain.entities.booking import Booking, BookingStatus


class BookingLifecycle:
    def __init__(
        self,
        store: BookingStorePort,
        catalog: ServiceCatalogPort,
        gateway: ExternalCalendarGateway,
        notifications: NotificationDispatcher,
        scheduler: TaskSchedulerPort,
        timezone: ZoneInfo,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._gateway = gateway
        self._notifications = notifications
        self._scheduler = scheduler
        self._timezone = timezone
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def submit_booking(self, request: BookingRequest) -> Booking:
        """
        Validate, claim the slot on the external calendar, persist, then queue the
        confirmation email.

        Raises ValidationError, NotFoundError or ConflictError before anything is
        written; any other failure surfaces as InternalError.
        """
        try:
            return self._submit(request)
        except BookingEngineError:
            raise
        except Exception as e:
            self._logger.exception("Unexpected error creating booking", extra={"error": str(e)})
            raise InternalError("Failed to create booking") from e

    def _submit(self, request: BookingRequest) -> Booking:
        valid = validate_booking_request(request, now=self._clock(), tz=self._timezone)

        service = self._catalog.get_service(valid.service_id)
        if service is None:
            raise NotFoundError(f"Service {valid.service_id} not found")

        draft = Booking(
            id=None,
            service_id=valid.service_id,
            client_name=valid.client_name,
            client_email=valid.client_email,
            client_phone=valid.client_phone,
            appointment_date=valid.appointment_date,
            notes=valid.notes,
            status=BookingStatus.pending,
            confirmed=False,
        )

        handle = self._gateway.create_event(draft)
        if handle is not None:
            draft = replace(draft, calendar_event_id=handle.event_id, calendar_event_link=handle.html_link)

        try:
            booking = self._store.create(draft)
        except Exception:
            # includes the store-level ConflictError for an already claimed slot
            if handle is not None:
                self._gateway.cancel_event(handle.event_id)
            raise

        self._logger.info(
            "Booking created",
            extra={
                "booking_id": booking.id,
                "service_id": booking.service_id,
                "appointment_date": booking.appointment_date.isoformat(),
                "event_id": booking.calendar_event_id,
            },
        )

        try:
            self._scheduler.submit(self._notifications.send_booking_confirmation, booking, service.name)
        except Exception as e:
            self._logger.exception("Failed to queue booking confirmation", extra={"booking_id": booking.id, "error": str(e)})

        return booking

    def get_booking(self, booking_id: int) -> Booking:
        booking = self._store.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking

    def get_bookings(self, email: str | None = None) -> list[Booking]:
        if email:
            return self._store.get_by_email(email.strip())
        return self._store.list_all()

    def update_status(self, booking_id: int, status: BookingStatus | str) -> Booking:
        try:
            target = BookingStatus(status)
        except ValueError as e:
            raise ValidationError({"status": f"Unknown status {status!r}"}) from e

        current = self.get_booking(booking_id)
        if current.status == target:
            return current
        if not current.can_transition_to(target):
            raise InvalidStatusTransitionError(
                f"Cannot change status from {current.status.value} to {target.value}"
            )

        # a concurrent change since the read above surfaces here as InvalidStatusTransitionError
        updated = self._store.update_status(booking_id, target, expected=current.status)
        if updated is None:
            raise NotFoundError(f"Booking {booking_id} not found")

        self._logger.info("Booking status updated", extra={"booking_id": booking_id, "status": target.value})

        if target is BookingStatus.cancelled and updated.calendar_event_id:
            # frees the slot on the calendar; best-effort, the cancellation itself is committed
            if not self._gateway.cancel_event(updated.calendar_event_id):
                self._logger.warning(
                    "Calendar event not withdrawn for cancelled booking",
                    extra={"booking_id": booking_id, "event_id": updated.calendar_event_id},
                )
        return updated
