from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class BookingRequest:
    """Raw booking submission. Fields are unvalidated; types may be wrong."""

    service_id: Any
    client_name: Any
    client_email: Any
    client_phone: Any
    appointment_date: Any
    notes: str | None = None
