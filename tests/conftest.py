"""
Shared fixtures: a fixed clock, in-memory adapters, and a fully wired booking lifecycle.
"""

from __future__ import annotations

import pytest

from service_booking.application.use_cases.availability import AvailabilityService
from service_booking.application.use_cases.booking import BookingLifecycle
from service_booking.application.use_cases.calendar_gateway import ExternalCalendarGateway
from service_booking.application.use_cases.notifications import NotificationDispatcher
from service_booking.infrastructure.calendar.mock_calendar import MockCalendar
from service_booking.infrastructure.mail.memory_transport import MemoryMailTransport
from service_booking.infrastructure.store.memory_store import MemoryBookingStore, MemoryServiceCatalog
from service_booking.infrastructure.tasks.schedulers import QueuedTaskScheduler

from tests.helpers import SERVICES, TZ, WINDOW, fixed_clock


@pytest.fixture
def calendar() -> MockCalendar:
    return MockCalendar()


@pytest.fixture
def gateway(calendar: MockCalendar) -> ExternalCalendarGateway:
    return ExternalCalendarGateway(calendar=calendar, timezone=TZ, owner_emails=("owner@example.com",))


@pytest.fixture
def availability(gateway: ExternalCalendarGateway) -> AvailabilityService:
    return AvailabilityService(gateway=gateway, window=WINDOW, clock=fixed_clock)


@pytest.fixture
def store() -> MemoryBookingStore:
    return MemoryBookingStore()


@pytest.fixture
def catalog() -> MemoryServiceCatalog:
    return MemoryServiceCatalog(SERVICES)


@pytest.fixture
def transport() -> MemoryMailTransport:
    return MemoryMailTransport()


@pytest.fixture
def dispatcher(transport: MemoryMailTransport) -> NotificationDispatcher:
    return NotificationDispatcher(
        transport=transport,
        sender="bookings@example.com",
        business_name="HandyPro Service",
        timezone=TZ,
        owner_emails=("owner@example.com",),
        subject_prefix="[HandyPro]",
        max_attempts=2,
    )


@pytest.fixture
def scheduler() -> QueuedTaskScheduler:
    return QueuedTaskScheduler()


@pytest.fixture
def lifecycle(store, catalog, gateway, dispatcher, scheduler) -> BookingLifecycle:
    return BookingLifecycle(
        store=store,
        catalog=catalog,
        gateway=gateway,
        notifications=dispatcher,
        scheduler=scheduler,
        timezone=TZ,
        clock=fixed_clock,
    )
