from __future__ import annotations

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, TypeVar
from zoneinfo import ZoneInfo

from service_booking.application.exceptions import (
    CalendarUnavailableError,
    ConflictError,
    SlotUnverifiedError,
)
from service_booking.application.ports.calendar import CalendarPort
from service_booking.domain.entities.booking import Booking
from service_booking.domain.entities.calendar import EventHandle
from service_booking.domain.entities.time_slot import BusyInterval

T = TypeVar("T")


class FailurePolicy(str, Enum):
    # provider failure is absorbed; caller proceeds as if the provider were absent
    OPTIMISTIC = "optimistic"
    # provider failure blocks the caller
    PESSIMISTIC = "pessimistic"


class ExternalCalendarGateway:
    """
    Booking-facing wrapper around a CalendarPort.

    Read path (busy intervals, event insert) is optimistic: calendar trouble never makes
    everything unbookable. The conflict re-check before inserting an event is pessimistic:
    an overlap or an indeterminate answer rejects the booking.
    """

    def __init__(
        self,
        calendar: CalendarPort,
        timezone: ZoneInfo,
        duration_minutes: int = 60,
        owner_emails: tuple[str, ...] = (),
    ) -> None:
        self._calendar = calendar
        self._timezone = timezone
        self._duration = timedelta(minutes=duration_minutes)
        self._owner_emails = owner_emails
        self._logger = logging.getLogger(__name__)

    @property
    def is_configured(self) -> bool:
        return self._calendar.is_configured

    @property
    def calendar(self) -> CalendarPort:
        return self._calendar

    def get_busy_intervals(self, range_start: datetime, range_end: datetime) -> list[BusyInterval]:
        """Busy intervals overlapping the range. Raises CalendarUnavailableError if the query fails."""
        if not self._calendar.is_configured:
            return []
        events = self._calendar.list_events(range_start, range_end)
        intervals = [interval for interval in map(self._to_interval, events) if interval is not None]
        return sorted(intervals, key=lambda i: (i.start, i.end))

    def create_event(self, booking: Booking) -> EventHandle | None:
        if not self._calendar.is_configured:
            self._logger.info("Calendar not configured; skipping event", extra={"reason": "unconfigured"})
            return None

        start = booking.appointment_date
        end = start + self._duration

        busy = self._guarded(
            FailurePolicy.PESSIMISTIC,
            "conflict check",
            lambda: self.get_busy_intervals(start, end),
        )
        if any(interval.overlaps(start, end) for interval in busy):
            self._logger.info(
                "Calendar conflict",
                extra={"appointment_date": start.isoformat(), "reason": "overlap"},
            )
            raise ConflictError("Time slot is already booked")

        created = self._guarded(
            FailurePolicy.OPTIMISTIC,
            "event insert",
            lambda: self._calendar.insert_event(self._build_event(booking, start, end)),
        )
        if not created or not created.get("id"):
            return None

        handle = EventHandle(event_id=str(created["id"]), html_link=created.get("htmlLink"))
        self._logger.info("Calendar event created", extra={"event_id": handle.event_id})
        return handle

    def cancel_event(self, event_id: str) -> bool:
        result = self._guarded(FailurePolicy.OPTIMISTIC, "event cancel", lambda: self._calendar.cancel_event(event_id))
        return bool(result)

    def _guarded(self, policy: FailurePolicy, operation: str, call: Callable[[], T]) -> T | None:
        try:
            return call()
        except CalendarUnavailableError as e:
            if policy is FailurePolicy.PESSIMISTIC:
                self._logger.warning(
                    "Calendar %s failed; rejecting", operation, extra={"error": str(e), "reason": policy.value}
                )
                raise SlotUnverifiedError("Unable to verify that the time slot is free") from e
            self._logger.warning(
                "Calendar %s failed; continuing without it", operation, extra={"error": str(e), "reason": policy.value}
            )
            return None

    def _build_event(self, booking: Booking, start: datetime, end: datetime) -> dict[str, Any]:
        description_lines = [
            "Client Details:",
            f"Name: {booking.client_name}",
            f"Email: {booking.client_email}",
            f"Phone: {booking.client_phone}",
        ]
        if booking.notes:
            description_lines += ["", f"Additional Notes: {booking.notes}"]

        attendees = [{"email": booking.client_email}]
        attendees += [{"email": email} for email in self._owner_emails if email != booking.client_email]
        tz_name = str(self._timezone)
        return {
            "summary": f"Service Appointment - {booking.client_name}",
            "description": "\n".join(description_lines),
            "start": {"dateTime": start.astimezone(self._timezone).isoformat(), "timeZone": tz_name},
            "end": {"dateTime": end.astimezone(self._timezone).isoformat(), "timeZone": tz_name},
            "attendees": attendees,
        }

    def _to_interval(self, event: dict[str, Any]) -> BusyInterval | None:
        if event.get("status") == "cancelled" or event.get("transparency") == "transparent":
            return None
        start = self._parse_event_time(event.get("start") or {})
        end = self._parse_event_time(event.get("end") or {})
        if start is None or end is None or end <= start:
            self._logger.debug("Skipping calendar event without usable times", extra={"event_id": event.get("id")})
            return None
        return BusyInterval(start=start, end=end)

    def _parse_event_time(self, value: dict[str, Any]) -> datetime | None:
        try:
            if value.get("dateTime"):
                parsed = datetime.fromisoformat(value["dateTime"].replace("Z", "+00:00"))
                return parsed if parsed.tzinfo else parsed.replace(tzinfo=self._timezone)
            if value.get("date"):
                # all-day events block from local midnight
                return datetime.fromisoformat(value["date"]).replace(tzinfo=self._timezone)
        except (ValueError, TypeError, AttributeError):
            return None
        return None
