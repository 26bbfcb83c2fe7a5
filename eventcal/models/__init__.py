"""Data models for eventcal."""

from eventcal.models.event import CalendarEvent, CalendarProvider, Occurrence
from eventcal.models.recurrence import (
    DailyRule,
    EndAfter,
    EndType,
    EndUntil,
    MonthlyRule,
    RecurrenceFrequency,
    RecurrenceRule,
    Weekday,
    WeeklyRule,
    parse_rule,
    weekday_of,
)

__all__ = [
    "CalendarEvent",
    "CalendarProvider",
    "Occurrence",
    "DailyRule",
    "WeeklyRule",
    "MonthlyRule",
    "RecurrenceRule",
    "RecurrenceFrequency",
    "EndAfter",
    "EndUntil",
    "EndType",
    "Weekday",
    "parse_rule",
    "weekday_of",
]
