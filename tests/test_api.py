"""
HTTP-level tests: routers wired to in-memory adapters through dependency overrides.
"""

from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest
from fastapi import BackgroundTasks
from fastapi.testclient import TestClient

from service_booking.api.bookings import SLOT_TAKEN_MESSAGE, SLOT_UNVERIFIED_MESSAGE
from service_booking.application.use_cases.availability import AvailabilityService
from service_booking.application.use_cases.booking import BookingLifecycle
from service_booking.application.use_cases.calendar_gateway import ExternalCalendarGateway
from service_booking.application.use_cases.notifications import NotificationDispatcher
from service_booking.core.config import settings
from service_booking.infrastructure.mail.memory_transport import MemoryMailTransport
from service_booking.infrastructure.store.memory_store import MemoryBookingStore, MemoryServiceCatalog
from service_booking.infrastructure.tasks.schedulers import BackgroundTaskScheduler
from service_booking.main import app
from service_booking.wiring.dependencies import (
    get_availability_service,
    get_booking_lifecycle,
    get_calendar_gateway,
    get_service_catalog,
)

from tests.helpers import SERVICES, TZ, WINDOW, FlakyCalendar, fixed_clock

ADMIN = {"X-Admin-Token": "test-admin-token"}
PAYLOAD = {
    "serviceId": 1,
    "clientName": "Jane Doe",
    "clientEmail": "jane@example.com",
    "clientPhone": "864-555-0100",
    "appointmentDate": "2025-06-02T10:00:00-04:00",
    "notes": "Leaky kitchen faucet",
}


@pytest.fixture
def api(monkeypatch):
    calendar = FlakyCalendar()
    store = MemoryBookingStore()
    catalog = MemoryServiceCatalog(SERVICES)
    transport = MemoryMailTransport()
    gateway = ExternalCalendarGateway(calendar=calendar, timezone=TZ)
    dispatcher = NotificationDispatcher(
        transport=transport, sender="bookings@example.com", business_name="HandyPro Service", timezone=TZ
    )

    def lifecycle(background_tasks: BackgroundTasks) -> BookingLifecycle:
        return BookingLifecycle(
            store=store,
            catalog=catalog,
            gateway=gateway,
            notifications=dispatcher,
            scheduler=BackgroundTaskScheduler(background_tasks),
            timezone=TZ,
            clock=fixed_clock,
        )

    app.dependency_overrides[get_availability_service] = lambda: AvailabilityService(
        gateway=gateway, window=WINDOW, clock=fixed_clock
    )
    app.dependency_overrides[get_booking_lifecycle] = lifecycle
    app.dependency_overrides[get_calendar_gateway] = lambda: gateway
    app.dependency_overrides[get_service_catalog] = lambda: catalog
    monkeypatch.setattr(settings, "ADMIN_API_TOKEN", "test-admin-token")

    yield SimpleNamespace(client=TestClient(app), calendar=calendar, store=store, transport=transport)

    app.dependency_overrides.clear()


def test_health(api):
    assert api.client.get("/health").json() == {"status": "ok"}


def test_availability_lists_every_slot_with_disabled_flag(api):
    api.calendar.add_busy(datetime(2025, 6, 2, 10, tzinfo=TZ), datetime(2025, 6, 2, 11, tzinfo=TZ))

    response = api.client.get("/availability", params={"date": "2025-06-02"})

    assert response.status_code == 200
    slots = response.json()
    assert len(slots) == 8
    assert slots[0] == {"time": "2025-06-02T09:00:00-04:00", "label": "9:00 AM", "disabled": False}
    assert [s["label"] for s in slots if s["disabled"]] == ["10:00 AM"]


@pytest.mark.parametrize("params", [{}, {"date": "06/02/2025"}])
def test_availability_requires_valid_date(api, params):
    assert api.client.get("/availability", params=params).status_code == 400


def test_availability_survives_calendar_outage(api):
    api.calendar.fail_list = True

    slots = api.client.get("/availability", params={"date": "2025-06-02"}).json()

    assert len(slots) == 8
    assert not any(s["disabled"] for s in slots)


def test_create_booking(api):
    response = api.client.post("/bookings", json=PAYLOAD)

    assert response.status_code == 201
    body = response.json()
    assert body["id"] == 1
    assert body["serviceId"] == 1
    assert body["status"] == "pending"
    assert body["confirmed"] is False
    assert body["calendarEventCreated"] is True
    assert body["calendarEventId"] == "mock_event_1"
    # background task ran once the response was produced
    assert api.transport.sent[0].recipients == ("jane@example.com",)


def test_create_booking_reports_all_field_errors(api):
    response = api.client.post(
        "/bookings", json={**PAYLOAD, "clientEmail": "nope", "clientPhone": "555", "appointmentDate": ""}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid booking data"
    assert [e["field"] for e in body["errors"]] == ["appointmentDate", "clientEmail", "clientPhone"]
    assert api.store.list_all() == []


def test_malformed_body_is_400(api):
    response = api.client.post("/bookings", json=["not", "an", "object"])

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request"


def test_create_booking_unknown_service(api):
    assert api.client.post("/bookings", json={**PAYLOAD, "serviceId": 99}).status_code == 404


def test_create_booking_taken_slot(api):
    api.client.post("/bookings", json=PAYLOAD)

    response = api.client.post("/bookings", json={**PAYLOAD, "clientEmail": "john@example.com"})

    assert response.status_code == 409
    assert response.json()["detail"] == SLOT_TAKEN_MESSAGE


def test_create_booking_when_calendar_cannot_be_checked(api):
    api.calendar.fail_list = True

    response = api.client.post("/bookings", json=PAYLOAD)

    assert response.status_code == 409
    assert response.json()["detail"] == SLOT_UNVERIFIED_MESSAGE
    assert api.store.list_all() == []


def test_list_bookings_by_email(api):
    api.client.post("/bookings", json=PAYLOAD)
    api.client.post(
        "/bookings", json={**PAYLOAD, "clientEmail": "john@example.com", "appointmentDate": "2025-06-02T11:00:00-04:00"}
    )

    response = api.client.get("/bookings", params={"email": "jane@example.com"})

    assert response.status_code == 200
    assert [b["clientEmail"] for b in response.json()] == ["jane@example.com"]
    assert api.client.get("/bookings").status_code == 400


def test_admin_routes_require_token(api):
    api.client.post("/bookings", json=PAYLOAD)

    assert api.client.get("/admin/bookings").status_code == 403
    assert api.client.get("/admin/bookings", headers={"X-Admin-Token": "wrong"}).status_code == 403
    assert api.client.get("/bookings/1").status_code == 403

    response = api.client.get("/admin/bookings", headers=ADMIN)
    assert response.status_code == 200
    assert len(response.json()) == 1
    assert api.client.get("/bookings/1", headers=ADMIN).json()["clientName"] == "Jane Doe"
    assert api.client.get("/bookings/2", headers=ADMIN).status_code == 404


def test_status_update_flow(api):
    api.client.post("/bookings", json=PAYLOAD)

    confirmed = api.client.patch("/bookings/1/status", json={"status": "confirmed"}, headers=ADMIN)
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "confirmed"
    assert confirmed.json()["confirmed"] is True

    assert api.client.patch("/bookings/1/status", json={"status": "cancelled"}, headers=ADMIN).status_code == 409
    assert api.client.patch("/bookings/1/status", json={"status": "archived"}, headers=ADMIN).status_code == 400
    assert api.client.patch("/bookings/9/status", json={"status": "confirmed"}, headers=ADMIN).status_code == 404


def test_services(api):
    services = api.client.get("/services").json()

    assert [s["name"] for s in services] == ["General Home Maintenance", "Plumbing Repairs"]
    assert api.client.get("/services/2").json()["category"] == "Plumbing"
    assert api.client.get("/services/99").status_code == 404


def test_calendar_diagnostics(api):
    body = api.client.get("/calendar/diagnostics", headers=ADMIN).json()

    assert body["configuration"]["configured"] is True
    assert body["status"]["hasErrors"] is False

    api.calendar.fail_list = True
    body = api.client.get("/calendar/diagnostics", headers=ADMIN).json()
    assert body["status"]["hasErrors"] is True


def test_oauth_routes_need_google_client(api):
    assert api.client.get("/calendar/auth-url", headers=ADMIN).status_code == 400
    assert api.client.get("/calendar/callback").status_code == 400
