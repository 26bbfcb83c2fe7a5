"""Configuration for eventcal.

The core functions never read the environment themselves: they take a
`CalendarConfig` argument. Only the service layer calls `load_config()`,
which reads `EVENTCAL_*` variables (optionally from a `.env` file).
"""

import os
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from eventcal.errors import ConfigurationError
from eventcal.models.constants import (
    DEFAULT_CALENDAR_NAME,
    DEFAULT_EVENT_DURATION_MINUTES,
    DEFAULT_PRODUCT_ID,
    DEFAULT_REMINDER_MINUTES,
    DEFAULT_UID_DOMAIN,
    FEED_CACHE_MAX_AGE_SECONDS,
)


class CalendarConfig(BaseModel):
    """Settings shared by document builders and provider links."""

    model_config = ConfigDict(frozen=True)

    product_id: str = Field(DEFAULT_PRODUCT_ID, description="PRODID of generated calendars")
    uid_domain: str = Field(DEFAULT_UID_DOMAIN, description="Domain suffix of generated UIDs")
    calendar_name: str = Field(DEFAULT_CALENDAR_NAME, description="X-WR-CALNAME when none is given")
    default_reminder_minutes: List[int] = Field(
        default_factory=lambda: list(DEFAULT_REMINDER_MINUTES),
        description="Reminders applied to events that do not specify any",
    )
    default_duration_minutes: int = Field(
        DEFAULT_EVENT_DURATION_MINUTES, ge=1, description="Duration assumed when an event has no end"
    )
    feed_cache_max_age: int = Field(
        FEED_CACHE_MAX_AGE_SECONDS, ge=0, description="Cache-Control max-age for feed responses"
    )

    @field_validator("default_reminder_minutes")
    @classmethod
    def _validate_reminders(cls, v):
        if any(m < 0 for m in v):
            raise ValueError("reminder offsets must be non-negative")
        return v

    @field_validator("product_id", "uid_domain")
    @classmethod
    def _validate_single_line(cls, v):
        if "\r" in v or "\n" in v:
            raise ValueError("must not contain line breaks")
        return v


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def _parse_reminders(raw: str) -> List[int]:
    """Parse a comma separated minutes list; an empty string means no reminders."""
    return [_parse_int("EVENTCAL_DEFAULT_REMINDERS", part) for part in raw.split(",") if part.strip()]


def load_config(environ: Optional[Mapping[str, str]] = None) -> CalendarConfig:
    """Build a CalendarConfig from environment variables.

    Args:
        environ: Mapping to read from. Defaults to `os.environ` after loading `.env`.

    Returns:
        CalendarConfig with unset variables left at their defaults.

    Raises:
        ConfigurationError: If a variable holds a malformed value.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    values: dict = {}
    if "EVENTCAL_PRODUCT_ID" in environ:
        values["product_id"] = environ["EVENTCAL_PRODUCT_ID"]
    if "EVENTCAL_UID_DOMAIN" in environ:
        values["uid_domain"] = environ["EVENTCAL_UID_DOMAIN"]
    if "EVENTCAL_CALENDAR_NAME" in environ:
        values["calendar_name"] = environ["EVENTCAL_CALENDAR_NAME"]
    if "EVENTCAL_DEFAULT_REMINDERS" in environ:
        values["default_reminder_minutes"] = _parse_reminders(environ["EVENTCAL_DEFAULT_REMINDERS"])
    if "EVENTCAL_DEFAULT_DURATION_MINUTES" in environ:
        values["default_duration_minutes"] = _parse_int(
            "EVENTCAL_DEFAULT_DURATION_MINUTES", environ["EVENTCAL_DEFAULT_DURATION_MINUTES"]
        )
    if "EVENTCAL_FEED_CACHE_MAX_AGE" in environ:
        values["feed_cache_max_age"] = _parse_int(
            "EVENTCAL_FEED_CACHE_MAX_AGE", environ["EVENTCAL_FEED_CACHE_MAX_AGE"]
        )

    try:
        return CalendarConfig(**values)
    except ValueError as e:
        # pydantic.ValidationError is a ValueError
        raise ConfigurationError(f"Invalid calendar configuration: {e}") from e
