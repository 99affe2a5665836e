from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable
from urllib.parse import quote

import httpx
from google.auth import exceptions as google_auth_exceptions
from google.auth.transport import Request as AuthRequest
from google.auth.transport.requests import Request as RequestsAuthRequest
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error
from requests import RequestException

from service_booking.application.exceptions import CalendarUnavailableError
from service_booking.application.ports.calendar import CalendarPort
from service_booking.domain.entities.calendar import CalendarConfig

TOKEN_URL = "https://oauth2.googleapis.com/token"
AUTH_URL = "https://accounts.google.com/o/oauth2/auth"
API_BASE_URL = "https://www.googleapis.com/calendar/v3"
SCOPES = ["https://www.googleapis.com/auth/calendar"]


class GoogleCalendarClient(CalendarPort):
    """
    Google Calendar v3 over REST.

    OAuth is handled by google-auth: user Credentials built from the long-lived
    refresh token are refreshed on demand and their bearer token is attached to
    httpx requests. The consent URL and code exchange go through an oauthlib Flow.
    """

    def __init__(
        self,
        config: CalendarConfig,
        http_client: httpx.Client | None = None,
        api_base_url: str = API_BASE_URL,
        auth_request: AuthRequest | None = None,
        flow_factory: Callable[[CalendarConfig], Flow] | None = None,
    ) -> None:
        self._config = config
        self._api_base_url = api_base_url.rstrip("/")
        self._client = http_client or httpx.Client(timeout=config.timeout_seconds)
        self._auth_request = auth_request or RequestsAuthRequest()
        self._flow_factory = flow_factory or build_flow
        self._credentials = self._build_credentials(config.refresh_token)
        # Credentials.refresh mutates the object; one refresh at a time
        self._credentials_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @property
    def is_configured(self) -> bool:
        return bool(self._config.client_id and self._config.client_secret and self._credentials.refresh_token)

    @property
    def config(self) -> CalendarConfig:
        return self._config

    @property
    def refresh_token(self) -> str | None:
        return self._credentials.refresh_token

    def update_refresh_token(self, refresh_token: str) -> None:
        """Swap in a newly issued refresh token; the current access token is dropped with the old credentials."""
        with self._credentials_lock:
            self._credentials = self._build_credentials(refresh_token)
        self._logger.info("Calendar refresh token updated")

    def list_events(self, time_min: datetime, time_max: datetime) -> list[dict[str, Any]]:
        params = {
            "timeMin": _rfc3339(time_min),
            "timeMax": _rfc3339(time_max),
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        items: list[dict[str, Any]] = []
        page_token: str | None = None
        while True:
            if page_token:
                params["pageToken"] = page_token
            data = self._request("GET", self._events_url(), params=params)
            items.extend(data.get("items", []))
            page_token = data.get("nextPageToken")
            if not page_token:
                return items

    def insert_event(self, event: dict[str, Any]) -> dict[str, Any]:
        data = self._request("POST", self._events_url(), params={"sendUpdates": "all"}, json=event)
        if not data.get("id"):
            raise CalendarUnavailableError("No event ID returned from Google Calendar API")
        return data

    def cancel_event(self, event_id: str) -> bool:
        self._request("DELETE", f"{self._events_url()}/{quote(event_id, safe='')}", params={"sendUpdates": "all"})
        self._logger.info("Calendar event cancelled", extra={"event_id": event_id})
        return True

    def authorization_url(self, state: str | None = None) -> str:
        flow = self._flow_factory(self._config)
        url, _ = flow.authorization_url(
            access_type="offline",
            # force the consent screen so a refresh token is always issued
            prompt="consent",
            state=state,
        )
        return url

    def exchange_code(self, code: str) -> dict[str, Any]:
        """Trade an authorization code for tokens. Installs the refresh token when one is returned."""
        flow = self._flow_factory(self._config)
        try:
            flow.fetch_token(code=code)
        except (OAuth2Error, RequestException, ValueError) as e:
            self._logger.error("Authorization code exchange failed", extra={"error": str(e)})
            raise CalendarUnavailableError(f"Authorization code exchange failed: {e}") from e

        credentials = flow.credentials
        if credentials.refresh_token:
            self.update_refresh_token(credentials.refresh_token)
        return {
            "access_token": credentials.token,
            "refresh_token": credentials.refresh_token,
            "expiry": credentials.expiry.isoformat() if credentials.expiry else None,
        }

    def _build_credentials(self, refresh_token: str | None) -> Credentials:
        return Credentials(
            token=None,
            refresh_token=refresh_token,
            token_uri=TOKEN_URL,
            client_id=self._config.client_id,
            client_secret=self._config.client_secret,
            scopes=SCOPES,
        )

    def _events_url(self) -> str:
        return f"{self._api_base_url}/calendars/{quote(self._config.calendar_id, safe='')}/events"

    def _bearer_token(self) -> str:
        with self._credentials_lock:
            if not self._credentials.valid:
                try:
                    self._credentials.refresh(self._auth_request)
                except google_auth_exceptions.GoogleAuthError as e:
                    # RefreshError with invalid_grant means the refresh token was revoked or expired
                    self._logger.error("Calendar token refresh failed", extra={"error": str(e)})
                    raise CalendarUnavailableError(f"Token refresh failed: {e}") from e
            return self._credentials.token

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        if not self.is_configured:
            raise CalendarUnavailableError("Google Calendar credentials are not configured")

        headers = {"Authorization": f"Bearer {self._bearer_token()}"}
        try:
            response = self._client.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            self._logger.error("Calendar request timed out", extra={"error": str(e), "reason": method})
            raise CalendarUnavailableError(f"Calendar request timed out: {e}") from e
        except httpx.HTTPError as e:
            self._logger.error("Calendar request failed", extra={"error": str(e), "reason": method})
            raise CalendarUnavailableError(f"Calendar request failed: {e}") from e

        if response.status_code >= 400:
            error = _error_summary(response)
            self._logger.error(
                "Calendar API error",
                extra={"status": response.status_code, "error": error, "reason": method},
            )
            raise CalendarUnavailableError(f"Calendar API returned {response.status_code}: {error}")

        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise CalendarUnavailableError("Calendar API returned invalid JSON") from e


def build_flow(config: CalendarConfig) -> Flow:
    client_config = {
        "web": {
            "client_id": config.client_id or "",
            "client_secret": config.client_secret or "",
            "redirect_uris": [config.redirect_uri] if config.redirect_uri else [],
            "auth_uri": AUTH_URL,
            "token_uri": TOKEN_URL,
        }
    }
    # the code is exchanged in a later request by a fresh Flow, so no PKCE verifier
    return Flow.from_client_config(
        client_config,
        scopes=SCOPES,
        redirect_uri=config.redirect_uri,
        autogenerate_code_verifier=False,
    )


def _rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _error_summary(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return str(error.get("message") or error.get("status") or error)
    if error:
        return f"{error}: {body.get('error_description', '')}".strip(": ")
    return response.text[:200]
