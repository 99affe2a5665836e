from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MailConfig:
    host: str = "smtp.gmail.com"
    port: int = 587
    use_tls: bool = True
    username: str | None = None
    password: str | None = None
    from_address: str | None = None
    from_name: str = "HandyPro Service"
    timeout_seconds: float = 10.0

    @property
    def is_configured(self) -> bool:
        return bool(self.username and self.password and self.from_address)


@dataclass(frozen=True)
class OutboundEmail:
    sender: str
    recipients: tuple[str, ...]
    subject: str
    text: str
    html: str
