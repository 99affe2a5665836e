from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    id: int
    name: str
    description: str
    category: str
