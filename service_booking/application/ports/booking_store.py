from __future__ import annotations

from abc import ABC, abstractmethod

from service_booking.domain.entities.booking import Booking, BookingStatus


class BookingStorePort(ABC):
    @abstractmethod
    def create(self, booking: Booking) -> Booking:
        """Persist a new booking and return it with its assigned id.

        Raises ConflictError if another active booking holds the same
        appointment_date.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: int) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email: str) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def update_status(self, booking_id: int, status: BookingStatus, expected: BookingStatus) -> Booking | None:
        """Set status only if the stored status is still `expected`, atomically.

        Returns None for an unknown id. Raises InvalidStatusTransitionError when
        the stored status has moved on.
        """
        raise NotImplementedError
