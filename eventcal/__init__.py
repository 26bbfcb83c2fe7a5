"""eventcal: recurring event expansion and iCalendar feeds."""

from eventcal.calendar import (
    build_document,
    build_feed,
    build_file_name,
    build_provider_url,
    build_venue_feed,
)
from eventcal.config import CalendarConfig, load_config
from eventcal.errors import ConfigurationError, EventCalError, ValidationError
from eventcal.models import CalendarEvent, CalendarProvider, Occurrence, parse_rule
from eventcal.recurrence import OccurrenceSeries, describe, expand, materialize_series

__version__ = "0.1.0"

__all__ = [
    "build_document",
    "build_feed",
    "build_file_name",
    "build_provider_url",
    "build_venue_feed",
    "CalendarConfig",
    "load_config",
    "ConfigurationError",
    "EventCalError",
    "ValidationError",
    "CalendarEvent",
    "CalendarProvider",
    "Occurrence",
    "parse_rule",
    "OccurrenceSeries",
    "describe",
    "expand",
    "materialize_series",
]
