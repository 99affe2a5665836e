"""
Tests for turning a calendar day into candidate appointment slots.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from service_booking.application.use_cases.generate_slots import generate_slots
from service_booking.domain.entities.time_slot import AppointmentWindow

from tests.helpers import NOW, TZ, WINDOW


def test_slot_count_matches_window():
    """One slot per hour between start and end hour, end exclusive."""
    slots = generate_slots(date(2025, 6, 3), WINDOW, NOW)

    assert len(slots) == (WINDOW.end_hour - WINDOW.start_hour) // WINDOW.granularity_hours
    assert [s.start_time.hour for s in slots] == list(range(9, 17))


def test_slots_ascending_without_duplicates():
    slots = generate_slots(date(2025, 6, 10), WINDOW, NOW)
    starts = [s.start_time for s in slots]

    assert starts == sorted(starts)
    assert len(set(starts)) == len(starts)


def test_today_mid_window_marks_past_slots_unavailable():
    """Business hours 9-17 with now at 13:30: 09:00-13:00 are past, 14:00-16:00 are open."""
    slots = generate_slots(NOW.date(), WINDOW, NOW)

    assert len(slots) == 8
    past = [s for s in slots if not s.available]
    open_ = [s for s in slots if s.available]
    assert [s.start_time.hour for s in past] == [9, 10, 11, 12, 13]
    assert [s.start_time.hour for s in open_] == [14, 15, 16]
    assert all(s.start_time < NOW for s in past)
    assert all(s.start_time >= NOW for s in open_)


def test_slot_starting_exactly_now_is_available():
    now = datetime(2025, 6, 1, 14, 0, tzinfo=TZ)
    slots = generate_slots(now.date(), WINDOW, now)

    fourteen = next(s for s in slots if s.start_time.hour == 14)
    assert fourteen.available


def test_future_day_all_available_and_past_day_none():
    future = generate_slots(NOW.date() + timedelta(days=1), WINDOW, NOW)
    past = generate_slots(NOW.date() - timedelta(days=1), WINDOW, NOW)

    assert all(s.available for s in future)
    assert not any(s.available for s in past)


def test_time_of_day_of_input_is_ignored():
    day = datetime(2025, 6, 5, 22, 45, tzinfo=TZ)

    assert generate_slots(day, WINDOW, NOW) == generate_slots(day.date(), WINDOW, NOW)


def test_labels_and_timezone():
    slots = generate_slots(date(2025, 6, 5), WINDOW, NOW)

    assert slots[0].label == "9:00 AM"
    assert slots[-1].label == "4:00 PM"
    assert slots[0].start_time.tzinfo == TZ


def test_invalid_window_yields_nothing():
    assert generate_slots(date(2025, 6, 5), AppointmentWindow(start_hour=17, end_hour=9), NOW) == []
    assert generate_slots(date(2025, 6, 5), AppointmentWindow(start_hour=9, end_hour=9), NOW) == []
    assert generate_slots(date(2025, 6, 5), AppointmentWindow(granularity_hours=0), NOW) == []


def test_two_hour_granularity():
    window = AppointmentWindow(start_hour=9, end_hour=17, granularity_hours=2, timezone="America/New_York")
    slots = generate_slots(date(2025, 6, 5), window, NOW)

    assert [s.start_time.hour for s in slots] == [9, 11, 13, 15]


def test_deterministic_for_same_inputs():
    assert generate_slots(NOW.date(), WINDOW, NOW) == generate_slots(NOW.date(), WINDOW, NOW)
