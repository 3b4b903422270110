"""
Google Calendar Service
Exchanges the stored refresh token for an access token and creates calendar events
"""
import base64
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from claryon.core.config import settings
from claryon.schemas.appointment import _as_utc

logger = logging.getLogger(__name__)

# Every booking occupies exactly one hour on the calendar
EVENT_DURATION = timedelta(hours=1)


class CalendarError(Exception):
    """Base class for failures talking to the calendar provider."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class CalendarConfigurationError(CalendarError):
    """Client id, client secret, refresh token or calendar id is missing."""


class TokenExchangeError(CalendarError):
    """The OAuth token endpoint refused the refresh token."""


class CalendarEventError(CalendarError):
    """The events.insert call failed."""


@dataclass
class CalendarEventDraft:
    summary: str
    description: str
    start: datetime
    attendees: List[str] = field(default_factory=list)
    request_conference: bool = False
    conference_request_id: Optional[str] = None
    event_id: Optional[str] = None

    @property
    def end(self) -> datetime:
        return self.start + EVENT_DURATION


@dataclass
class CreatedEvent:
    id: str
    html_link: Optional[str] = None
    meet_link: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CreatedEvent":
        return cls(
            id=data["id"],
            html_link=data.get("htmlLink"),
            meet_link=data.get("hangoutLink"),
        )


def calendar_event_key(appointment_id: str) -> str:
    """
    Deterministic Google event id for an appointment.

    Event ids may only use the base32hex alphabet (a-v, 0-9) and must be at
    least 5 characters long.
    """
    encoded = base64.b32hexencode(appointment_id.encode("utf-8")).decode("ascii")
    return "appt" + encoded.rstrip("=").lower()


def build_event_payload(draft: CalendarEventDraft, timezone_name: str = "UTC") -> Dict[str, Any]:
    """Turn a draft into the JSON body expected by events.insert."""
    start = _as_utc(draft.start)
    end = start + EVENT_DURATION

    payload: Dict[str, Any] = {
        "summary": draft.summary,
        "description": draft.description,
        "start": {"dateTime": start.isoformat(), "timeZone": timezone_name},
        "end": {"dateTime": end.isoformat(), "timeZone": timezone_name},
        "attendees": [{"email": email} for email in dict.fromkeys(draft.attendees) if email],
    }

    if draft.event_id:
        payload["id"] = draft.event_id

    if draft.request_conference:
        payload["conferenceData"] = {
            "createRequest": {
                "requestId": draft.conference_request_id or f"meet-{uuid.uuid4().hex}",
                "conferenceSolutionKey": {"type": "hangoutsMeet"},
            }
        }

    return payload


def _google_error(response: requests.Response) -> tuple[Optional[str], Any]:
    """Pull the structured error message and details out of a Google error body."""
    try:
        body = response.json()
    except ValueError:
        return None, None

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("message"), error.get("errors")
    if isinstance(error, str):
        # The token endpoint answers with {"error": "...", "error_description": "..."}
        return body.get("error_description") or error, None
    return None, None


class GoogleCalendarService:
    """
    Thin client for the two Google calls a booking needs.

    Built per pipeline run; the access token is never cached between requests.
    """

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        refresh_token: Optional[str],
        calendar_id: Optional[str],
        timezone_name: str = "UTC",
        token_url: str = "https://oauth2.googleapis.com/token",
        api_base: str = "https://www.googleapis.com/calendar/v3",
        timeout: int = 15,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.calendar_id = calendar_id
        self.timezone_name = timezone_name
        self.token_url = token_url
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "GoogleCalendarService":
        return cls(
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            refresh_token=settings.GOOGLE_REFRESH_TOKEN,
            calendar_id=settings.GOOGLE_CALENDAR_ID,
            timezone_name=settings.GOOGLE_CALENDAR_TIMEZONE,
            token_url=settings.GOOGLE_TOKEN_URL,
            api_base=settings.GOOGLE_CALENDAR_API_BASE,
            timeout=settings.GOOGLE_HTTP_TIMEOUT_SECONDS,
        )

    def _events_url(self) -> str:
        if not self.calendar_id:
            raise CalendarConfigurationError("GOOGLE_CALENDAR_ID is not configured.")
        return f"{self.api_base}/calendars/{quote(self.calendar_id, safe='')}/events"

    def get_access_token(self) -> str:
        """
        Exchange the refresh token for a short-lived access token.

        Raises:
            CalendarConfigurationError: a credential is missing
            TokenExchangeError: the provider rejected the exchange
        """
        if not self.client_id or not self.client_secret or not self.refresh_token:
            raise CalendarConfigurationError(
                "Google Cloud credentials (client ID, client secret, or refresh token) "
                "are not configured for token refresh."
            )

        logger.info("[Calendar] Requesting Google API access token")
        try:
            response = requests.post(
                self.token_url,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "refresh_token": self.refresh_token,
                    "grant_type": "refresh_token",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TokenExchangeError(f"Failed to reach Google token endpoint: {e}") from e

        if not response.ok:
            logger.error(f"[Calendar] Token endpoint returned {response.status_code}: {response.text}")
            raise TokenExchangeError(
                f"Failed to refresh Google access token: {response.status_code} - {response.text}",
                status_code=response.status_code,
                details=response.text,
            )

        try:
            access_token = response.json().get("access_token")
        except ValueError:
            access_token = None
        if not access_token:
            raise TokenExchangeError("No access_token found in Google's response.", status_code=response.status_code)

        logger.info("[Calendar] Obtained Google API access token")
        return access_token

    def create_event(self, access_token: str, draft: CalendarEventDraft) -> CreatedEvent:
        """
        Insert one event on the configured calendar.

        Raises:
            CalendarConfigurationError: no calendar id
            CalendarEventError: the provider call failed
        """
        url = self._events_url()
        payload = build_event_payload(draft, self.timezone_name)
        params = {"conferenceDataVersion": 1} if draft.request_conference else None

        logger.info(f"[Calendar] Creating event on calendar {self.calendar_id}")
        try:
            response = requests.post(
                url,
                json=payload,
                params=params,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise CalendarEventError(f"Failed to reach Google Calendar API: {e}") from e

        if response.status_code == 409 and draft.event_id:
            logger.info(f"[Calendar] Event {draft.event_id} already exists, reusing it")
            return self.get_event(access_token, draft.event_id)

        if not response.ok:
            message, details = _google_error(response)
            logger.error(f"[Calendar] events.insert returned {response.status_code}: {response.text}")
            raise CalendarEventError(
                f"Google API Error: {message}" if message else "Failed to create Google Calendar event.",
                status_code=response.status_code,
                details=details,
            )

        event = CreatedEvent.from_api(response.json())
        logger.info(f"[Calendar] Created Google Calendar event {event.id}")
        return event

    def get_event(self, access_token: str, event_id: str) -> CreatedEvent:
        """Fetch an existing event, used when a keyed insert reports a conflict."""
        try:
            response = requests.get(
                f"{self._events_url()}/{quote(event_id, safe='')}",
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise CalendarEventError(f"Failed to reach Google Calendar API: {e}") from e

        if not response.ok:
            message, details = _google_error(response)
            raise CalendarEventError(
                f"Google API Error: {message}" if message else f"Failed to fetch Google Calendar event {event_id}.",
                status_code=response.status_code,
                details=details,
            )
        return CreatedEvent.from_api(response.json())
