"""Event data models for eventcal."""

from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CalendarProvider(str, Enum):
    """Web calendar clients with an "add event" deep link."""
    GOOGLE = "google"
    OUTLOOK = "outlook"


class Occurrence(BaseModel):
    """One concrete, dated instance of a recurring event."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    start_time: datetime = Field(..., description="Occurrence start")
    end_time: Optional[datetime] = Field(None, description="Occurrence end (absent if the template has none)")

    @property
    def duration(self) -> Optional[timedelta]:
        if self.end_time is None:
            return None
        return self.end_time - self.start_time


class CalendarEvent(BaseModel):
    """Event fields consumed by the calendar document builders.

    Field names also accept the camelCase spelling used by the web layer
    (`startTime`, `reminderMinutes`, ...).
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: Optional[str] = Field(None, description="Stable identifier, used for the UID")
    title: str = Field(..., description="Event title")
    description: Optional[str] = Field(None, description="Event description")
    start_time: datetime = Field(..., description="Event start")
    end_time: Optional[datetime] = Field(None, description="Event end (default duration applies if absent)")
    location: Optional[str] = Field(None, description="Event location")
    category: Optional[str] = Field(None, description="Event category ('other' means uncategorized)")
    url: Optional[str] = Field(None, description="Public event page")
    reminder_minutes: Optional[List[int]] = Field(
        None,
        description="Minutes before start for each reminder; None applies the configured default",
    )

    # Recurrence linkage (optional)
    series_id: Optional[str] = Field(None, description="If generated from a recurring series, the series id")
    is_series_parent: bool = Field(False, description="Whether this is the template of a recurring series")

    @field_validator("reminder_minutes")
    @classmethod
    def _validate_reminder_minutes(cls, v):
        if v is None:
            return None
        # Deduplicate but preserve order; offsets are range-checked by the builders
        seen = set()
        out: List[int] = []
        for minutes in v:
            if minutes not in seen:
                seen.add(minutes)
                out.append(minutes)
        return out

    def with_occurrence(self, occurrence: Occurrence) -> "CalendarEvent":
        """Copy of this event moved to the occurrence's start/end."""
        return self.model_copy(update={"start_time": occurrence.start_time, "end_time": occurrence.end_time})
