from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from service_booking.application.dto.booking_request import BookingRequest
from service_booking.application.exceptions import CalendarUnavailableError
from service_booking.domain.entities.service import Service
from service_booking.domain.entities.time_slot import AppointmentWindow
from service_booking.infrastructure.calendar.mock_calendar import MockCalendar

TZ = ZoneInfo("America/New_York")
NOW = datetime(2025, 6, 1, 13, 30, tzinfo=TZ)
WINDOW = AppointmentWindow(start_hour=9, end_hour=17, granularity_hours=1, timezone="America/New_York")
SERVICES = [
    Service(id=1, name="General Home Maintenance", description="Repairs", category="General Repairs"),
    Service(id=2, name="Plumbing Repairs", description="Leaks", category="Plumbing"),
]


def fixed_clock() -> datetime:
    return NOW


def make_request(**overrides) -> BookingRequest:
    payload = {
        "service_id": 1,
        "client_name": "Jane Doe",
        "client_email": "jane@example.com",
        "client_phone": "864-555-0100",
        "appointment_date": "2025-06-02T10:00:00-04:00",
        "notes": "Leaky kitchen faucet",
    }
    payload.update(overrides)
    return BookingRequest(**payload)


class FlakyCalendar(MockCalendar):
    """MockCalendar whose list/insert calls can be made to fail like an unreachable provider."""

    def __init__(self, fail_list: bool = False, fail_insert: bool = False, hide_events: bool = False) -> None:
        super().__init__()
        self.fail_list = fail_list
        self.fail_insert = fail_insert
        # simulates a provider that has not yet made a concurrent insert visible
        self.hide_events = hide_events
        self.list_calls = 0

    def list_events(self, time_min, time_max):
        self.list_calls += 1
        if self.fail_list:
            raise CalendarUnavailableError("Calendar request timed out")
        if self.hide_events:
            return []
        return super().list_events(time_min, time_max)

    def insert_event(self, event):
        if self.fail_insert:
            raise CalendarUnavailableError("Calendar API returned 500")
        return super().insert_event(event)
