from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any


class CalendarPort(ABC):
    """Raw calendar provider boundary. Implementations raise CalendarUnavailableError on failure."""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def list_events(self, time_min: datetime, time_max: datetime) -> list[dict[str, Any]]:
        """Events overlapping [time_min, time_max), in provider event format."""
        raise NotImplementedError

    @abstractmethod
    def insert_event(self, event: dict[str, Any]) -> dict[str, Any]:
        """Create event. Returns the created event (with at least an "id")."""
        raise NotImplementedError

    @abstractmethod
    def cancel_event(self, event_id: str) -> bool:
        """Cancel calendar event. Returns True if successful."""
        raise NotImplementedError
