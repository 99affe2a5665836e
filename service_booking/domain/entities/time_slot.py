from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AppointmentWindow:
    start_hour: int = 9
    end_hour: int = 17
    granularity_hours: int = 1
    timezone: str = "America/New_York"


@dataclass(frozen=True)
class TimeSlot:
    start_time: datetime
    label: str
    available: bool


@dataclass(frozen=True)
class BusyInterval:
    """Half-open [start, end) interval reported busy by the external calendar."""

    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start < end and start < self.end
