"""Provider "add event" deep links and download file names."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional, Union
from urllib.parse import urlencode

from eventcal.calendar.document import event_end, validate_event
from eventcal.calendar.ics import format_ics_datetime, to_utc
from eventcal.config import CalendarConfig
from eventcal.errors import ConfigurationError
from eventcal.models.event import CalendarEvent, CalendarProvider

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"
OUTLOOK_COMPOSE_URL = "https://outlook.live.com/calendar/0/deeplink/compose"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9]")


def format_iso_instant(dt: datetime) -> str:
    """UTC ISO-8601 with milliseconds, e.g. 2026-03-03T19:00:00.000Z."""
    return to_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def google_calendar_url(event: CalendarEvent, config: Optional[CalendarConfig] = None) -> str:
    config = config or CalendarConfig()
    validate_event(event)
    dates = f"{format_ics_datetime(event.start_time)}/{format_ics_datetime(event_end(event, config))}"
    params = {
        "action": "TEMPLATE",
        "text": event.title,
        "dates": dates,
        "details": event.description or "",
        "location": event.location or "",
    }
    return f"{GOOGLE_CALENDAR_URL}?{urlencode(params)}"


def outlook_calendar_url(event: CalendarEvent, config: Optional[CalendarConfig] = None) -> str:
    config = config or CalendarConfig()
    validate_event(event)
    params = {
        "path": "/calendar/action/compose",
        "rru": "addevent",
        "subject": event.title,
        "startdt": format_iso_instant(event.start_time),
        "enddt": format_iso_instant(event_end(event, config)),
        "body": event.description or "",
        "location": event.location or "",
    }
    return f"{OUTLOOK_COMPOSE_URL}?{urlencode(params)}"


_BUILDERS = {
    CalendarProvider.GOOGLE: google_calendar_url,
    CalendarProvider.OUTLOOK: outlook_calendar_url,
}


def build_provider_url(
    event: CalendarEvent,
    provider: Union[CalendarProvider, str],
    config: Optional[CalendarConfig] = None,
) -> str:
    """Deep link opening the provider's "add event" composer pre-filled with the event.

    Raises:
        ConfigurationError: If the provider is not supported.
        ValidationError: If the event has no title or an end not after its start.
    """
    try:
        provider = CalendarProvider(provider)
    except ValueError:
        raise ConfigurationError(f"Unsupported calendar provider: {provider!r}") from None
    return _BUILDERS[provider](event, config)


def build_file_name(event: CalendarEvent) -> str:
    """Download name: every non-alphanumeric character of the title becomes '_'."""
    return _UNSAFE_FILENAME_CHARS.sub("_", event.title) + ".ics"


def build_feed_file_name(username: str) -> str:
    return f"{_UNSAFE_FILENAME_CHARS.sub('_', username)}-schedule.ics"
