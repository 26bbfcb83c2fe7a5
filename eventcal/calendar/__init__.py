"""iCalendar documents, feeds and provider links for eventcal."""

from eventcal.calendar.document import (
    Venue,
    build_calendar,
    build_document,
    build_feed,
    build_venue_feed,
)
from eventcal.calendar.ics import escape_text, format_ics_datetime, format_trigger, serialize
from eventcal.calendar.links import (
    build_feed_file_name,
    build_file_name,
    build_provider_url,
    google_calendar_url,
    outlook_calendar_url,
)

__all__ = [
    "Venue",
    "build_calendar",
    "build_document",
    "build_feed",
    "build_venue_feed",
    "escape_text",
    "format_ics_datetime",
    "format_trigger",
    "serialize",
    "build_feed_file_name",
    "build_file_name",
    "build_provider_url",
    "google_calendar_url",
    "outlook_calendar_url",
]
