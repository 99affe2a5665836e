from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CalendarConfig:
    client_id: str | None = None
    client_secret: str | None = None
    refresh_token: str | None = None
    calendar_id: str = "primary"
    redirect_uri: str | None = None
    timezone: str = "America/New_York"
    timeout_seconds: float = 10.0
    owner_emails: tuple[str, ...] = ()

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret and self.refresh_token)


@dataclass(frozen=True)
class EventHandle:
    event_id: str
    html_link: str | None = None
