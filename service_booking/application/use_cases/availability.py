from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo

from service_booking.application.exceptions import CalendarUnavailableError
from service_booking.application.use_cases.calendar_gateway import ExternalCalendarGateway
from service_booking.application.use_cases.generate_slots import day_bounds, generate_slots
from service_booking.domain.entities.time_slot import AppointmentWindow, BusyInterval, TimeSlot


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AvailabilityService:
    def __init__(
        self,
        gateway: ExternalCalendarGateway,
        window: AppointmentWindow,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._gateway = gateway
        self._window = window
        self._timezone = ZoneInfo(window.timezone)
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def get_available_slots(self, day: date) -> list[TimeSlot]:
        """
        All business-hour slots for the day, each flagged available or not.

        A slot is unavailable when it is in the past or its start falls inside a busy
        interval. If the calendar cannot be queried, for any reason, the generated slots are
        returned as-is.
        """
        candidates = generate_slots(day, self._window, self._clock())
        range_start, range_end = day_bounds(day, self._timezone)

        try:
            busy = self._gateway.get_busy_intervals(range_start, range_end)
        except CalendarUnavailableError as e:
            self._logger.warning(
                "Busy interval lookup failed; serving unfiltered slots",
                extra={"error": str(e), "reason": "calendar_unavailable"},
            )
            busy = []
        except Exception as e:
            self._logger.exception(
                "Unexpected error reading busy intervals; serving unfiltered slots",
                extra={"error": str(e), "reason": "unexpected"},
            )
            busy = []

        return self._merge(candidates, busy)

    def _merge(self, candidates: list[TimeSlot], busy: list[BusyInterval]) -> list[TimeSlot]:
        by_start: dict[datetime, TimeSlot] = {}
        for slot in candidates:
            available = slot.available and not any(interval.contains(slot.start_time) for interval in busy)
            existing = by_start.get(slot.start_time)
            if existing is None or (existing.available and not available):
                by_start[slot.start_time] = TimeSlot(start_time=slot.start_time, label=slot.label, available=available)
        return [by_start[start] for start in sorted(by_start)]
