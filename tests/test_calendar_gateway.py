"""
Tests for the external calendar gateway: degraded reads, the conflict gate, and event creation.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from service_booking.application.exceptions import (
    CalendarUnavailableError,
    ConflictError,
    SlotUnverifiedError,
)
from service_booking.application.use_cases.calendar_gateway import ExternalCalendarGateway
from service_booking.domain.entities.booking import Booking
from service_booking.infrastructure.calendar.mock_calendar import MockCalendar

from tests.helpers import TZ, FlakyCalendar


def _booking(start: datetime, **overrides) -> Booking:
    data = dict(
        id=None,
        service_id=1,
        client_name="Jane Doe",
        client_email="jane@example.com",
        client_phone="864-555-0100",
        appointment_date=start,
        notes="Bring a ladder",
    )
    data.update(overrides)
    return Booking(**data)


def test_unconfigured_calendar_reports_no_busy_time():
    calendar = MockCalendar(configured=False)
    calendar.add_busy(datetime(2025, 6, 2, 9, tzinfo=TZ), datetime(2025, 6, 2, 17, tzinfo=TZ))
    gateway = ExternalCalendarGateway(calendar=calendar, timezone=TZ)

    busy = gateway.get_busy_intervals(datetime(2025, 6, 2, tzinfo=TZ), datetime(2025, 6, 3, tzinfo=TZ))

    assert busy == []


def test_unconfigured_calendar_skips_event_creation():
    calendar = MockCalendar(configured=False)
    gateway = ExternalCalendarGateway(calendar=calendar, timezone=TZ)

    assert gateway.create_event(_booking(datetime(2025, 6, 2, 10, tzinfo=TZ))) is None
    assert calendar.events == []


def test_busy_intervals_are_sorted_and_skip_free_or_cancelled_events(calendar, gateway):
    calendar.add_busy(datetime(2025, 6, 2, 15, tzinfo=TZ), datetime(2025, 6, 2, 16, tzinfo=TZ))
    calendar.add_busy(datetime(2025, 6, 2, 10, tzinfo=TZ), datetime(2025, 6, 2, 11, tzinfo=TZ))
    calendar.insert_event(
        {
            "summary": "Reminder",
            "transparency": "transparent",
            "start": {"dateTime": datetime(2025, 6, 2, 12, tzinfo=TZ).isoformat()},
            "end": {"dateTime": datetime(2025, 6, 2, 13, tzinfo=TZ).isoformat()},
        }
    )

    busy = gateway.get_busy_intervals(datetime(2025, 6, 2, tzinfo=TZ), datetime(2025, 6, 3, tzinfo=TZ))

    assert [(i.start.hour, i.end.hour) for i in busy] == [(10, 11), (15, 16)]


def test_all_day_event_blocks_the_day():
    gateway = ExternalCalendarGateway(calendar=MockCalendar(), timezone=TZ)

    interval = gateway._to_interval({"start": {"date": "2025-06-02"}, "end": {"date": "2025-06-03"}})

    assert interval is not None
    assert interval.contains(datetime(2025, 6, 2, 9, tzinfo=TZ))
    assert not interval.contains(datetime(2025, 6, 3, 9, tzinfo=TZ))


def test_read_failure_propagates_to_caller():
    gateway = ExternalCalendarGateway(calendar=FlakyCalendar(fail_list=True), timezone=TZ)

    with pytest.raises(CalendarUnavailableError):
        gateway.get_busy_intervals(datetime(2025, 6, 2, tzinfo=TZ), datetime(2025, 6, 3, tzinfo=TZ))


def test_create_event_rejects_overlap(calendar, gateway):
    calendar.add_busy(datetime(2025, 6, 2, 10, 30, tzinfo=TZ), datetime(2025, 6, 2, 11, 30, tzinfo=TZ))

    with pytest.raises(ConflictError, match="already booked"):
        gateway.create_event(_booking(datetime(2025, 6, 2, 10, tzinfo=TZ)))

    assert len(calendar.events) == 1


def test_adjacent_event_is_not_a_conflict(calendar, gateway):
    calendar.add_busy(datetime(2025, 6, 2, 9, tzinfo=TZ), datetime(2025, 6, 2, 10, tzinfo=TZ))

    handle = gateway.create_event(_booking(datetime(2025, 6, 2, 10, tzinfo=TZ)))

    assert handle is not None


def test_create_event_builds_invitation(calendar, gateway):
    start = datetime(2025, 6, 2, 10, tzinfo=TZ)

    handle = gateway.create_event(_booking(start))

    assert handle is not None
    assert handle.event_id == "mock_event_1"
    assert handle.html_link
    event = calendar.events[0]
    assert event["summary"] == "Service Appointment - Jane Doe"
    assert "Phone: 864-555-0100" in event["description"]
    assert "Additional Notes: Bring a ladder" in event["description"]
    assert [a["email"] for a in event["attendees"]] == ["jane@example.com", "owner@example.com"]
    assert datetime.fromisoformat(event["start"]["dateTime"]) == start
    assert datetime.fromisoformat(event["end"]["dateTime"]) == start + timedelta(hours=1)
    assert event["start"]["timeZone"] == "America/New_York"


def test_conflict_check_failure_fails_closed():
    calendar = FlakyCalendar(fail_list=True)
    gateway = ExternalCalendarGateway(calendar=calendar, timezone=TZ)

    with pytest.raises(SlotUnverifiedError):
        gateway.create_event(_booking(datetime(2025, 6, 2, 10, tzinfo=TZ)))

    assert calendar.events == []


def test_insert_failure_is_non_fatal():
    calendar = FlakyCalendar(fail_insert=True)
    gateway = ExternalCalendarGateway(calendar=calendar, timezone=TZ)

    assert gateway.create_event(_booking(datetime(2025, 6, 2, 10, tzinfo=TZ))) is None


def test_cancel_event(calendar, gateway):
    handle = gateway.create_event(_booking(datetime(2025, 6, 2, 10, tzinfo=TZ)))

    assert gateway.cancel_event(handle.event_id) is True
    assert calendar.events == []
    assert gateway.cancel_event("missing") is False
