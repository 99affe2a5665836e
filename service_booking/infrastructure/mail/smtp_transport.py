from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from service_booking.application.exceptions import MailTransportError
from service_booking.application.ports.mail_transport import MailTransportPort
from service_booking.domain.entities.email import MailConfig, OutboundEmail


class SmtpMailTransport(MailTransportPort):
    """SMTP delivery authenticated with an application password. One connection per send."""

    def __init__(self, config: MailConfig) -> None:
        self._config = config
        self._logger = logging.getLogger(__name__)

    def verify(self) -> None:
        server = self._connect()
        try:
            code, _ = server.noop()
            if code != 250:
                raise MailTransportError(f"SMTP server answered NOOP with {code}")
        except (smtplib.SMTPException, OSError) as e:
            raise MailTransportError(f"SMTP verify failed: {e}") from e
        finally:
            self._close(server)

    def send(self, message: OutboundEmail) -> None:
        mime = MIMEMultipart("alternative")
        mime["Subject"] = message.subject
        mime["From"] = formataddr((self._config.from_name, message.sender))
        mime["To"] = ", ".join(message.recipients)
        mime.attach(MIMEText(message.text, "plain", "utf-8"))
        mime.attach(MIMEText(message.html, "html", "utf-8"))

        server = self._connect()
        try:
            refused = server.sendmail(message.sender, list(message.recipients), mime.as_string())
        except (smtplib.SMTPException, OSError) as e:
            self._logger.error("SMTP send failed", extra={"error": str(e)})
            raise MailTransportError(f"SMTP send failed: {e}") from e
        finally:
            self._close(server)

        if refused:
            self._logger.warning("Some recipients were refused", extra={"error": ", ".join(refused)})

    def _connect(self) -> smtplib.SMTP:
        if not self._config.is_configured:
            raise MailTransportError("Mail transport credentials are not configured")
        server = None
        try:
            if self._config.use_tls:
                server = smtplib.SMTP(self._config.host, self._config.port, timeout=self._config.timeout_seconds)
                server.starttls()
            else:
                server = smtplib.SMTP_SSL(self._config.host, self._config.port, timeout=self._config.timeout_seconds)
            server.login(self._config.username or "", self._config.password or "")
            return server
        except (smtplib.SMTPException, OSError) as e:
            if server is not None:
                self._close(server)
            self._logger.error("Failed to connect to SMTP server", extra={"error": str(e)})
            raise MailTransportError(f"SMTP connection failed: {e}") from e

    def _close(self, server: smtplib.SMTP) -> None:
        try:
            server.quit()
        except (smtplib.SMTPException, OSError):
            server.close()
