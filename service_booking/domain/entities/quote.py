from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class QuoteRequest:
    name: str
    address: str
    description: str
    service_name: str
    email: str | None = None
    phone: str | None = None
    analysis: str | None = None  # produced upstream, may be absent
