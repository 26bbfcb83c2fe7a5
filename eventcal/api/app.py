"""FastAPI web application for eventcal.

Stateless endpoints over the core: the calling service persists whatever it
needs; nothing is stored here.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from eventcal import __version__
from eventcal.calendar.document import Venue, build_document, build_feed, build_venue_feed
from eventcal.calendar.links import (
    build_feed_file_name,
    build_file_name,
    google_calendar_url,
    outlook_calendar_url,
)
from eventcal.calendar.response import ics_download_response, ics_feed_response
from eventcal.config import load_config
from eventcal.errors import EventCalError
from eventcal.models.event import CalendarEvent, Occurrence
from eventcal.models.recurrence import parse_rule
from eventcal.recurrence.describe import describe
from eventcal.recurrence.expand import expand
from eventcal.recurrence.materialize import mark_series_parent, materialize_series
from eventcal.recurrence.rrule_export import rule_to_rrule

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="eventcal API",
    description="Expands recurring events and renders them as iCalendar documents and feeds",
    version=__version__,
)

config = load_config()


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


# Request models
class ExpandRequest(_ApiModel):
    """Template timing plus a rule in the flat wire shape."""
    start_time: datetime
    end_time: Optional[datetime] = None
    rule: Dict[str, Any]


class DescribeRequest(_ApiModel):
    rule: Dict[str, Any]
    start_time: Optional[datetime] = None


class SeriesRequest(_ApiModel):
    event: CalendarEvent
    rule: Dict[str, Any]


class DocumentRequest(_ApiModel):
    event: CalendarEvent
    calendar_name: Optional[str] = None


class FeedRequest(_ApiModel):
    events: List[CalendarEvent] = Field(default_factory=list)
    calendar_name: Optional[str] = None
    venue: Optional[Venue] = None


class LinksRequest(_ApiModel):
    event: CalendarEvent


# Response models
class ExpandResponse(_ApiModel):
    occurrences: List[Occurrence]
    count: int
    description: str


class DescribeResponse(_ApiModel):
    description: str
    rrule: str


class SeriesResponse(_ApiModel):
    parent: CalendarEvent
    occurrences: List[CalendarEvent]


class LinksResponse(_ApiModel):
    google: str
    outlook: str
    file_name: str


def _bad_request(action: str, e: EventCalError) -> HTTPException:
    logger.error(f"Failed to {action}: {type(e).__name__}: {str(e)}")
    return HTTPException(status_code=400, detail=str(e))


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.post("/recurrence/expand", response_model=ExpandResponse)
async def expand_recurrence(request: ExpandRequest):
    """Expand a rule into concrete occurrences."""
    try:
        rule = parse_rule(request.rule)
        occurrences = expand(request.start_time, request.end_time, rule)
        return ExpandResponse(
            occurrences=occurrences,
            count=len(occurrences),
            description=describe(rule, request.start_time),
        )
    except EventCalError as e:
        raise _bad_request("expand recurrence", e)


@app.post("/recurrence/describe", response_model=DescribeResponse)
async def describe_recurrence(request: DescribeRequest):
    """Preview text and RRULE for a rule."""
    try:
        rule = parse_rule(request.rule)
        return DescribeResponse(
            description=describe(rule, request.start_time),
            rrule=rule_to_rrule(rule, request.start_time),
        )
    except EventCalError as e:
        raise _bad_request("describe recurrence", e)


@app.post("/recurrence/materialize", response_model=SeriesResponse)
async def materialize_recurrence(request: SeriesRequest):
    """Series parent plus one child event per occurrence, ready to persist."""
    try:
        children = materialize_series(request.event, request.rule)
        return SeriesResponse(parent=mark_series_parent(request.event), occurrences=children)
    except EventCalError as e:
        raise _bad_request("materialize series", e)


@app.post("/calendar/ics", response_class=Response)
async def download_ics(request: DocumentRequest):
    """Single-event .ics download."""
    try:
        content = build_document(request.event, request.calendar_name, config=config)
    except EventCalError as e:
        raise _bad_request("build calendar document", e)
    return ics_download_response(content, build_file_name(request.event))


@app.post("/calendar/feed", response_class=Response)
async def calendar_feed(request: FeedRequest):
    """Multi-event feed; a venue names the calendar and fills in missing locations."""
    try:
        if request.venue is not None:
            content = build_venue_feed(request.venue, request.events, config=config)
            filename = build_feed_file_name(request.venue.username)
        else:
            content = build_feed(request.events, request.calendar_name, config=config)
            filename = build_feed_file_name(request.calendar_name or config.calendar_name)
    except EventCalError as e:
        raise _bad_request("build calendar feed", e)
    return ics_feed_response(content, filename, config)


@app.post("/calendar/links", response_model=LinksResponse)
async def calendar_links(request: LinksRequest):
    """Provider deep links and download file name for an event."""
    try:
        return LinksResponse(
            google=google_calendar_url(request.event, config),
            outlook=outlook_calendar_url(request.event, config),
            file_name=build_file_name(request.event),
        )
    except EventCalError as e:
        raise _bad_request("build calendar links", e)
