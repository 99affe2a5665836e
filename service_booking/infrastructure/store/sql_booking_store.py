from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from service_booking.application.exceptions import ConflictError, InvalidStatusTransitionError
from service_booking.application.ports.booking_store import BookingStorePort
from service_booking.domain.entities.booking import Booking, BookingStatus
from service_booking.infrastructure.store.models import BookingRecord


class SqlBookingStore(BookingStorePort):
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._logger = logging.getLogger(__name__)

    def create(self, booking: Booking) -> Booking:
        record = BookingRecord(
            service_id=booking.service_id,
            client_name=booking.client_name,
            client_email=booking.client_email,
            client_phone=booking.client_phone,
            appointment_date=booking.appointment_date,
            notes=booking.notes,
            status=booking.status.value,
            confirmed=booking.confirmed,
            calendar_event_id=booking.calendar_event_id,
            calendar_event_link=booking.calendar_event_link,
        )
        try:
            with self._session_factory() as session, session.begin():
                session.add(record)
                session.flush()
                session.refresh(record)
                return _to_entity(record)
        except IntegrityError as e:
            self._logger.warning(
                "Booking rejected by uniqueness constraint",
                extra={"service_id": booking.service_id, "appointment_date": booking.appointment_date.isoformat()},
            )
            raise ConflictError("Time slot is already booked") from e

    def get(self, booking_id: int) -> Booking | None:
        with self._session_factory() as session:
            record = session.get(BookingRecord, booking_id)
            return _to_entity(record) if record else None

    def get_by_email(self, email: str) -> list[Booking]:
        with self._session_factory() as session:
            stmt = (
                select(BookingRecord)
                .where(BookingRecord.client_email == email)
                .order_by(BookingRecord.appointment_date, BookingRecord.id)
            )
            return [_to_entity(r) for r in session.scalars(stmt)]

    def list_all(self) -> list[Booking]:
        with self._session_factory() as session:
            stmt = select(BookingRecord).order_by(BookingRecord.appointment_date, BookingRecord.id)
            return [_to_entity(r) for r in session.scalars(stmt)]

    def update_status(self, booking_id: int, status: BookingStatus, expected: BookingStatus) -> Booking | None:
        values: dict = {"status": status.value}
        if status is BookingStatus.confirmed:
            values["confirmed"] = True
        # compare-and-set: the WHERE on the old status makes the check and the write one statement
        stmt = (
            update(BookingRecord)
            .where(BookingRecord.id == booking_id, BookingRecord.status == expected.value)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with self._session_factory() as session, session.begin():
            result = session.execute(stmt)
            record = session.get(BookingRecord, booking_id)
            if record is None:
                return None
            if result.rowcount == 0:
                raise InvalidStatusTransitionError(f"Booking {booking_id} is {record.status}, not {expected.value}")
            return _to_entity(record)


def _to_entity(record: BookingRecord) -> Booking:
    return Booking(
        id=record.id,
        service_id=record.service_id,
        client_name=record.client_name,
        client_email=record.client_email,
        client_phone=record.client_phone,
        appointment_date=record.appointment_date,
        notes=record.notes,
        status=BookingStatus(record.status),
        confirmed=record.confirmed,
        calendar_event_id=record.calendar_event_id,
        calendar_event_link=record.calendar_event_link,
        created_at=record.created_at,
    )
