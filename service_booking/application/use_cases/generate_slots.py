from __future__ import annotations

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from service_booking.application.utils.formatting import format_slot_label
from service_booking.domain.entities.time_slot import AppointmentWindow, TimeSlot


def day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Local midnight of day and of the following day."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end


def generate_slots(day: date | datetime, window: AppointmentWindow, now: datetime) -> list[TimeSlot]:
    """
    Candidate appointment starts for a calendar day.

    One slot per granularity step in [start_hour, end_hour), ascending.
    Slots that start strictly before now are marked unavailable.
    """
    if isinstance(day, datetime):
        day = day.date()

    step = window.granularity_hours
    if step <= 0 or window.end_hour <= window.start_hour:
        return []

    tz = ZoneInfo(window.timezone)
    slots: list[TimeSlot] = []
    for hour in range(window.start_hour, window.end_hour, step):
        start = datetime.combine(day, time(hour=hour), tzinfo=tz)
        slots.append(TimeSlot(start_time=start, label=format_slot_label(start), available=start >= now))
    return slots
