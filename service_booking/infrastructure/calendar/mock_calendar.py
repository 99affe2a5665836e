from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any

from service_booking.application.ports.calendar import CalendarPort


class MockCalendar(CalendarPort):
    """In-process calendar used in dev and tests. Events keep the provider's dict shape."""

    def __init__(self, configured: bool = True) -> None:
        self._configured = configured
        self._events: dict[str, dict[str, Any]] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @property
    def is_configured(self) -> bool:
        return self._configured

    @property
    def events(self) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._events.values())

    def add_busy(self, start: datetime, end: datetime, summary: str = "Busy") -> str:
        return self.insert_event(
            {
                "summary": summary,
                "start": {"dateTime": start.isoformat()},
                "end": {"dateTime": end.isoformat()},
            }
        )["id"]

    def list_events(self, time_min: datetime, time_max: datetime) -> list[dict[str, Any]]:
        with self._lock:
            events = list(self._events.values())
        result = []
        for event in events:
            start = datetime.fromisoformat(event["start"]["dateTime"])
            end = datetime.fromisoformat(event["end"]["dateTime"])
            if start < time_max and time_min < end:
                result.append(dict(event))
        return sorted(result, key=lambda e: e["start"]["dateTime"])

    def insert_event(self, event: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            event_id = f"mock_event_{self._next_id}"
            self._next_id += 1
            created = {
                **event,
                "id": event_id,
                "status": "confirmed",
                "htmlLink": f"https://calendar.example.com/event?eid={event_id}",
            }
            self._events[event_id] = created
        self._logger.info("Mock calendar event created", extra={"event_id": event_id})
        return dict(created)

    def cancel_event(self, event_id: str) -> bool:
        with self._lock:
            removed = self._events.pop(event_id, None)
        if removed is not None:
            self._logger.info("Mock calendar event cancelled", extra={"event_id": event_id})
            return True
        return False
