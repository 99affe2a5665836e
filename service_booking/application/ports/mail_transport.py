from abc import ABC, abstractmethod

from service_booking.domain.entities.email import OutboundEmail


class MailTransportPort(ABC):
    @abstractmethod
    def verify(self) -> None:
        """Connectivity check. Raises MailTransportError if the transport is unusable."""
        raise NotImplementedError

    @abstractmethod
    def send(self, message: OutboundEmail) -> None:
        raise NotImplementedError
