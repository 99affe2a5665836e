from __future__ import annotations

import logging

from service_booking.application.exceptions import MailTransportError
from service_booking.application.ports.mail_transport import MailTransportPort
from service_booking.domain.entities.email import OutboundEmail


class MemoryMailTransport(MailTransportPort):
    """Collects messages instead of sending them. Used in dev and tests."""

    def __init__(self, fail_verify: bool = False, fail_send: bool = False) -> None:
        self.sent: list[OutboundEmail] = []
        self.fail_verify = fail_verify
        self.fail_send = fail_send
        self.send_attempts = 0
        self._logger = logging.getLogger(__name__)

    def verify(self) -> None:
        if self.fail_verify:
            raise MailTransportError("Mail transport unavailable")

    def send(self, message: OutboundEmail) -> None:
        self.send_attempts += 1
        if self.fail_send:
            raise MailTransportError("Mail transport rejected the message")
        self.sent.append(message)
        self._logger.info("Mock email captured", extra={"reason": message.subject})
