from __future__ import annotations


class BookingEngineError(Exception):
    """Base class for errors raised by the booking engine."""


class ValidationError(BookingEngineError):
    """Raised when a submission has client-correctable field errors."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("Invalid booking data: " + ", ".join(sorted(errors)))
        self.errors = dict(errors)


class NotFoundError(BookingEngineError):
    """Raised when a referenced entity does not exist."""


class ConflictError(BookingEngineError):
    """Raised when the requested time slot is already taken."""


class SlotUnverifiedError(ConflictError):
    """Raised when the conflict check could not complete, so the slot cannot be claimed."""


class InvalidStatusTransitionError(ConflictError):
    """Raised when a booking status change is not allowed from its current status."""


class ServiceDegraded(BookingEngineError):
    """Non-fatal: an external collaborator (calendar, mail) is unreachable."""


class CalendarUnavailableError(ServiceDegraded):
    """Raised when the calendar provider fails (timeouts, network errors, bad responses)."""


class MailTransportError(ServiceDegraded):
    """Raised when the outbound mail transport cannot verify or deliver."""


class InternalError(BookingEngineError):
    """Raised for unexpected failures; details are logged, never shown to clients."""
