from __future__ import annotations

from datetime import datetime


def format_slot_label(value: datetime) -> str:
    """'9:00 AM' style label."""
    return value.strftime("%I:%M %p").lstrip("0")


def format_appointment(value: datetime) -> str:
    """'Monday, June 2, 2025 at 9:00 AM' style, in the value's own timezone."""
    return f"{value.strftime('%A, %B')} {value.day}, {value.year} at {format_slot_label(value)}"


def mask_secret(value: str | None) -> str | None:
    if not value:
        return None
    if len(value) <= 10:
        return "*" * len(value)
    return f"{value[:5]}...{value[-5:]}"
