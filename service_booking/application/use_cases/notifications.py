from __future__ import annotations

import logging
from zoneinfo import ZoneInfo

from service_booking.application.exceptions import MailTransportError
from service_booking.application.ports.mail_transport import MailTransportPort
from service_booking.application.utils import email_templates
from service_booking.application.utils.formatting import format_appointment
from service_booking.domain.entities.booking import Booking
from service_booking.domain.entities.email import OutboundEmail
from service_booking.domain.entities.quote import QuoteRequest


class NotificationDispatcher:
    """
    Sends transactional email. Every public method is a failure boundary: errors are
    logged and reported through the return value, never raised to the caller.
    Delivery is not idempotent; a retried attempt may produce a duplicate email.
    """

    def __init__(
        self,
        transport: MailTransportPort,
        sender: str,
        business_name: str,
        timezone: ZoneInfo,
        owner_emails: tuple[str, ...] = (),
        subject_prefix: str = "",
        max_attempts: int = 1,
    ) -> None:
        self._transport = transport
        self._sender = sender
        self._business_name = business_name
        self._timezone = timezone
        self._owner_emails = owner_emails
        self._subject_prefix = subject_prefix
        self._max_attempts = max(1, max_attempts)
        self._logger = logging.getLogger(__name__)

    def send_booking_confirmation(self, booking: Booking, service_name: str) -> bool:
        try:
            text, html = email_templates.booking_confirmation(
                booking,
                service_name=service_name,
                appointment_text=format_appointment(booking.appointment_date.astimezone(self._timezone)),
                business_name=self._business_name,
            )
            message = self._message(
                recipients=(booking.client_email,),
                subject=f"Booking Confirmation - {self._business_name}",
                text=text,
                html=html,
            )
        except Exception as e:
            self._logger.exception("Failed to render booking confirmation", extra={"booking_id": booking.id, "error": str(e)})
            return False
        return self._deliver(message, booking_id=booking.id)

    def send_quote_notification(self, quote: QuoteRequest) -> bool:
        try:
            text, html = email_templates.quote_notification(quote, business_name=self._business_name)
            message = self._message(
                recipients=(quote.email,) if quote.email else (),
                subject="New Quote Request",
                text=text,
                html=html,
            )
        except Exception as e:
            self._logger.exception("Failed to render quote notification", extra={"error": str(e)})
            return False
        return self._deliver(message)

    def _message(self, recipients: tuple[str, ...], subject: str, text: str, html: str) -> OutboundEmail:
        # client first, then owners, without duplicates
        all_recipients = tuple(dict.fromkeys(r for r in (*recipients, *self._owner_emails) if r))
        if self._subject_prefix:
            subject = f"{self._subject_prefix} {subject}"
        return OutboundEmail(sender=self._sender, recipients=all_recipients, subject=subject, text=text, html=html)

    def _deliver(self, message: OutboundEmail, booking_id: int | None = None) -> bool:
        if not message.recipients:
            self._logger.warning("Email has no recipients; skipping", extra={"booking_id": booking_id})
            return False

        for attempt in range(1, self._max_attempts + 1):
            try:
                self._transport.verify()
                self._transport.send(message)
                self._logger.info(
                    "Email sent",
                    extra={"booking_id": booking_id, "attempt": attempt, "reason": message.subject},
                )
                return True
            except MailTransportError as e:
                self._logger.warning(
                    "Email delivery failed",
                    extra={"booking_id": booking_id, "attempt": attempt, "error": str(e)},
                )
            except Exception as e:
                self._logger.exception(
                    "Unexpected error sending email",
                    extra={"booking_id": booking_id, "attempt": attempt, "error": str(e)},
                )
                return False

        self._logger.error("Giving up on email", extra={"booking_id": booking_id, "attempt": self._max_attempts})
        return False
