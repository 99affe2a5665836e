from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query

from service_booking.api.admin_auth import require_admin
from service_booking.application.exceptions import CalendarUnavailableError
from service_booking.application.use_cases.calendar_gateway import ExternalCalendarGateway
from service_booking.application.utils.formatting import mask_secret
from service_booking.infrastructure.calendar.google_calendar_client import GoogleCalendarClient
from service_booking.wiring.dependencies import get_calendar_gateway

router = APIRouter(prefix="/calendar")
logger = logging.getLogger(__name__)


def _google_client(gateway: ExternalCalendarGateway) -> GoogleCalendarClient:
    client = gateway.calendar
    if not isinstance(client, GoogleCalendarClient):
        raise HTTPException(status_code=400, detail="Google Calendar is not in use")
    if not (client.config.client_id and client.config.client_secret):
        raise HTTPException(status_code=400, detail="Client ID and/or Client Secret are missing")
    return client


@router.get("/diagnostics", dependencies=[Depends(require_admin)])
def diagnostics(gateway: ExternalCalendarGateway = Depends(get_calendar_gateway)) -> dict:
    now = datetime.now(timezone.utc)
    has_errors = False
    error_message = None
    if gateway.is_configured:
        try:
            gateway.get_busy_intervals(now, now + timedelta(hours=1))
        except CalendarUnavailableError as e:
            has_errors = True
            error_message = "Calendar provider request failed"
            logger.warning("Calendar diagnostics check failed", extra={"error": str(e)})

    client = gateway.calendar
    configuration: dict = {"provider": type(client).__name__, "configured": gateway.is_configured}
    if isinstance(client, GoogleCalendarClient):
        configuration.update(
            {
                "clientConfigured": bool(client.config.client_id),
                "clientSecretConfigured": bool(client.config.client_secret),
                "refreshTokenConfigured": bool(client.refresh_token),
                "clientId": mask_secret(client.config.client_id),
                "refreshToken": mask_secret(client.refresh_token),
                "calendarId": client.config.calendar_id,
            }
        )

    return {
        "configuration": configuration,
        "status": {
            "hasErrors": has_errors,
            # invalid_grant and friends: a new refresh token is needed
            "needsTokenRefresh": has_errors and configuration.get("clientSecretConfigured", False),
            "errorMessage": error_message,
            "lastChecked": now.isoformat(),
        },
    }


@router.get("/auth-url", dependencies=[Depends(require_admin)])
def auth_url(gateway: ExternalCalendarGateway = Depends(get_calendar_gateway)) -> dict:
    return {"authUrl": _google_client(gateway).authorization_url()}


@router.get("/callback")
def oauth_callback(
    code: str | None = Query(None),
    gateway: ExternalCalendarGateway = Depends(get_calendar_gateway),
) -> dict:
    if not code:
        raise HTTPException(status_code=400, detail="No authorization code received from Google")

    client = _google_client(gateway)
    try:
        tokens = client.exchange_code(code)
    except CalendarUnavailableError as e:
        logger.error("Authorization code exchange failed", extra={"error": str(e)})
        raise HTTPException(status_code=502, detail="Could not exchange authorization code")

    refresh_token = tokens.get("refresh_token")
    if not refresh_token:
        return {
            "tokenUpdated": False,
            "message": (
                "No refresh token was issued. Remove the application's access in your Google account "
                "permissions and authorize again."
            ),
        }

    logger.info("Refresh token updated; persist it as GOOGLE_CALENDAR_REFRESH_TOKEN to survive restarts")
    return {
        "tokenUpdated": True,
        "refreshToken": refresh_token,
        "message": "Save this value as GOOGLE_CALENDAR_REFRESH_TOKEN so it persists across restarts.",
    }
