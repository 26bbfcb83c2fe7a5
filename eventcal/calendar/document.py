"""Build iCalendar documents for single events, feeds and venue schedules."""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from eventcal.calendar.ics import (
    Component,
    format_ics_datetime,
    format_trigger,
    has_line_break,
    serialize,
    to_utc,
)
from eventcal.config import CalendarConfig
from eventcal.errors import ValidationError
from eventcal.models.constants import UNCATEGORIZED_VALUES
from eventcal.models.event import CalendarEvent

logger = logging.getLogger(__name__)


class Venue(BaseModel):
    """Owner of a public schedule feed."""

    username: str = Field(..., description="Public handle, used in the feed file name")
    name: Optional[str] = Field(None, description="Venue display name")
    address: Optional[str] = Field(None, description="Fallback location for events without one")


def validate_event(event: CalendarEvent) -> None:
    """Reject events that cannot be rendered as a valid VEVENT.

    Raises:
        ValidationError: If the title is empty, the end is not after the start,
            a reminder offset is negative or the URL spans several lines.
    """
    if not event.title or not event.title.strip():
        raise ValidationError("Event title is required")
    if event.url is not None and has_line_break(event.url):
        raise ValidationError("Event url must not contain line breaks")
    if event.reminder_minutes and any(m < 0 for m in event.reminder_minutes):
        raise ValidationError(f"Reminder offsets must be non-negative, got {event.reminder_minutes}")
    if event.end_time is not None:
        if (event.start_time.tzinfo is None) != (event.end_time.tzinfo is None):
            raise ValidationError("start_time and end_time must both be naive or both timezone-aware")
        if event.end_time <= event.start_time:
            raise ValidationError("end_time must be after start_time")


def event_end(event: CalendarEvent, config: CalendarConfig) -> datetime:
    """Explicit end, or start plus the configured default duration."""
    if event.end_time is not None:
        return event.end_time
    return event.start_time + timedelta(minutes=config.default_duration_minutes)


def event_uid(event: CalendarEvent, config: CalendarConfig) -> str:
    """Stable UID: `<id>@<domain>`, or a digest of the event's fields if it has no id."""
    if event.id:
        return f"{event.id}@{config.uid_domain}"
    start = format_ics_datetime(event.start_time)
    base = f"{event.title}|{start}|{event.location or ''}"
    digest = hashlib.sha1(base.encode("utf-8")).hexdigest()[:12]
    return f"{start}-{digest}@{config.uid_domain}"


def reminder_minutes_for(event: CalendarEvent, config: CalendarConfig) -> List[int]:
    if event.reminder_minutes is None:
        return list(config.default_reminder_minutes)
    return list(event.reminder_minutes)


def build_alarm(minutes: int, title: str) -> Component:
    return (
        Component("VALARM")
        .add("ACTION", "DISPLAY")
        .add_text("DESCRIPTION", f"Reminder: {title}")
        .add("TRIGGER", format_trigger(minutes))
    )


def build_vevent(
    event: CalendarEvent,
    config: CalendarConfig,
    now: datetime,
    fallback_location: Optional[str] = None,
) -> Component:
    """VEVENT component for one event; the event must already be validated."""
    vevent = (
        Component("VEVENT")
        .add_text("UID", event_uid(event, config))
        .add("DTSTAMP", format_ics_datetime(now))
        .add("DTSTART", format_ics_datetime(event.start_time))
        .add("DTEND", format_ics_datetime(event_end(event, config)))
        .add_text("SUMMARY", event.title)
    )
    if event.description:
        vevent.add_text("DESCRIPTION", event.description)
    location = event.location or fallback_location
    if location:
        vevent.add_text("LOCATION", location)
    if event.url:
        vevent.add("URL", event.url)
    if event.category and event.category.strip().lower() not in UNCATEGORIZED_VALUES:
        vevent.add_text("CATEGORIES", event.category)
    vevent.add("STATUS", "CONFIRMED")
    vevent.add("TRANSP", "OPAQUE")
    for minutes in reminder_minutes_for(event, config):
        vevent.add_component(build_alarm(minutes, event.title))
    return vevent


def build_calendar(
    events: Iterable[CalendarEvent],
    calendar_name: Optional[str] = None,
    config: Optional[CalendarConfig] = None,
    now: Optional[datetime] = None,
    fallback_location: Optional[str] = None,
) -> Component:
    """VCALENDAR component holding one VEVENT per event, in the order given.

    Every event is validated before any component is built.
    """
    config = config or CalendarConfig()
    events = list(events)
    for event in events:
        validate_event(event)
    now = now or datetime.now(timezone.utc)

    calendar = (
        Component("VCALENDAR")
        .add("VERSION", "2.0")
        .add("PRODID", config.product_id)
        .add("CALSCALE", "GREGORIAN")
        .add("METHOD", "PUBLISH")
        .add_text("X-WR-CALNAME", calendar_name or config.calendar_name)
    )
    for event in events:
        calendar.add_component(build_vevent(event, config, now, fallback_location))
    return calendar


def build_document(
    event: CalendarEvent,
    calendar_name: Optional[str] = None,
    config: Optional[CalendarConfig] = None,
    now: Optional[datetime] = None,
) -> str:
    """iCalendar document for a single event (direct download).

    Args:
        event: Event to render.
        calendar_name: X-WR-CALNAME; defaults to `config.calendar_name`.
        config: Calendar settings; defaults to `CalendarConfig()`.
        now: DTSTAMP; defaults to the current UTC time.

    Raises:
        ValidationError: If the event has no title or an end not after its start.
    """
    content = serialize(build_calendar([event], calendar_name, config, now))
    logger.debug(f"Built calendar document for event {event.id}: {event.title[:50]}")
    return content


def build_feed(
    events: Iterable[CalendarEvent],
    calendar_name: Optional[str] = None,
    config: Optional[CalendarConfig] = None,
    now: Optional[datetime] = None,
    fallback_location: Optional[str] = None,
) -> str:
    """Subscribable feed aggregating many events under one calendar.

    Events are ordered by start time. Series parents are skipped because
    their materialized occurrences are already part of the feed.
    """
    selected = sorted(
        (e for e in events if not e.is_series_parent),
        key=lambda e: to_utc(e.start_time),
    )
    content = serialize(build_calendar(selected, calendar_name, config, now, fallback_location))
    logger.debug(f"Built calendar feed '{calendar_name}' with {len(selected)} events")
    return content


def venue_calendar_name(venue: Venue) -> str:
    return f"{venue.name or venue.username}'s Schedule"


def build_venue_feed(
    venue: Venue,
    events: Iterable[CalendarEvent],
    config: Optional[CalendarConfig] = None,
    now: Optional[datetime] = None,
) -> str:
    """Public schedule feed of a venue; its address fills in missing locations."""
    return build_feed(
        events,
        calendar_name=venue_calendar_name(venue),
        config=config,
        now=now,
        fallback_location=venue.address,
    )
