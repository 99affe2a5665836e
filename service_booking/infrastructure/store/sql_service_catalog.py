from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from service_booking.application.ports.service_catalog import ServiceCatalogPort
from service_booking.domain.entities.service import Service
from service_booking.infrastructure.store.models import ServiceRecord

DEFAULT_SERVICES: tuple[dict[str, str], ...] = (
    {
        "name": "General Home Maintenance",
        "description": (
            "Comprehensive home maintenance and repairs including door repairs, window maintenance, "
            "gutter cleaning, small fixes, and other miscellaneous tasks."
        ),
        "category": "General Repairs",
    },
    {
        "name": "Plumbing Repairs",
        "description": "Expert plumbing services including leak repairs, pipe maintenance, and fixture installations.",
        "category": "Plumbing",
    },
    {
        "name": "Electrical Work",
        "description": "Professional electrical services including wiring, lighting installation, and electrical repairs.",
        "category": "Electrical",
    },
)


class SqlServiceCatalog(ServiceCatalogPort):
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._logger = logging.getLogger(__name__)

    def get_service(self, service_id: int) -> Service | None:
        with self._session_factory() as session:
            record = session.get(ServiceRecord, service_id)
            return _to_entity(record) if record else None

    def list_services(self) -> list[Service]:
        with self._session_factory() as session:
            return [_to_entity(r) for r in session.scalars(select(ServiceRecord).order_by(ServiceRecord.id))]

    def seed_defaults(self) -> int:
        """Insert the default services into an empty table. Returns the number inserted."""
        with self._session_factory() as session, session.begin():
            existing = session.scalar(select(func.count()).select_from(ServiceRecord)) or 0
            if existing:
                return 0
            session.add_all(ServiceRecord(**data) for data in DEFAULT_SERVICES)
        self._logger.info("Seeded default services", extra={"reason": f"{len(DEFAULT_SERVICES)} services"})
        return len(DEFAULT_SERVICES)


def _to_entity(record: ServiceRecord) -> Service:
    return Service(id=record.id, name=record.name, description=record.description, category=record.category)
