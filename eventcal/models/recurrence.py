"""Recurrence rule models for eventcal.

A rule is a tagged union over the supported frequencies. Each variant only
carries the fields that make sense for it, so a daily rule cannot hold a
weekday set and a weekly rule always resolves its weekday set.

The web layer submits rules in a flat camelCase shape
(`frequency, interval, daysOfWeek, dayOfMonth, endType, endAfterCount,
endUntilDate`); `parse_rule` converts that shape into the typed union.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Annotated, Any, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from eventcal.errors import ConfigurationError, ValidationError
from eventcal.models.constants import MAX_OCCURRENCES


class RecurrenceFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class EndType(str, Enum):
    AFTER = "after"
    UNTIL = "until"


class Weekday(IntEnum):
    """Day of week, Sunday-first (Sunday=0 .. Saturday=6)."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()


def weekday_of(d: date) -> Weekday:
    # Python weekday: Monday=0 ... Sunday=6
    return Weekday((d.weekday() + 1) % 7)


_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class EndAfter(BaseModel):
    """Stop after a number of occurrences (still capped at MAX_OCCURRENCES)."""

    model_config = _MODEL_CONFIG

    type: Literal["after"] = "after"
    count: int = Field(..., ge=1, description="Number of occurrences requested")


class EndUntil(BaseModel):
    """Stop after the last occurrence starting on or before `until`."""

    model_config = _MODEL_CONFIG

    type: Literal["until"] = "until"
    until: date = Field(..., description="Last date (inclusive) an occurrence may start on")


EndCondition = Annotated[Union[EndAfter, EndUntil], Field(discriminator="type")]


class _RuleBase(BaseModel):
    model_config = _MODEL_CONFIG

    interval: int = Field(1, ge=1, description="Every N units (days/weeks/months)")
    end: EndCondition

    @property
    def occurrence_limit(self) -> int:
        """Maximum number of occurrences this rule may produce."""
        if isinstance(self.end, EndAfter):
            return min(self.end.count, MAX_OCCURRENCES)
        return MAX_OCCURRENCES

    @property
    def until(self) -> Optional[date]:
        return self.end.until if isinstance(self.end, EndUntil) else None


class DailyRule(_RuleBase):
    frequency: Literal["daily"] = "daily"


class WeeklyRule(_RuleBase):
    frequency: Literal["weekly"] = "weekly"
    days_of_week: List[Weekday] = Field(
        default_factory=list,
        description="Weekdays on which it occurs; empty means the weekday of the start time",
    )

    @field_validator("days_of_week")
    @classmethod
    def _validate_days_of_week(cls, v):
        # Deduplicate and sort ascending (Sunday first)
        return sorted(set(v))

    def resolved_days(self, start: date) -> List[Weekday]:
        return list(self.days_of_week) or [weekday_of(start)]


class MonthlyRule(_RuleBase):
    frequency: Literal["monthly"] = "monthly"
    day_of_month: Optional[int] = Field(
        None, ge=1, le=31, description="Day of month; clamped to the last day of short months"
    )

    def resolved_day(self, start: date) -> int:
        return self.day_of_month or start.day


RecurrenceRule = Annotated[Union[DailyRule, WeeklyRule, MonthlyRule], Field(discriminator="frequency")]

RULE_TYPES = (DailyRule, WeeklyRule, MonthlyRule)

_RULE_ADAPTER: TypeAdapter = TypeAdapter(RecurrenceRule)

_FREQUENCIES = {f.value for f in RecurrenceFrequency}


def _get(data: Mapping[str, Any], snake: str, camel: str) -> Any:
    value = data.get(snake)
    return data.get(camel) if value is None else value


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _format_errors(e: PydanticValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def _parse_end(data: Mapping[str, Any]) -> Any:
    if data.get("end") is not None:
        return data["end"]

    end_type = _enum_value(_get(data, "end_type", "endType"))
    if end_type == EndType.AFTER.value:
        count = _get(data, "end_after_count", "endAfterCount")
        if count is None:
            raise ValidationError("endAfterCount is required when endType is 'after'")
        return {"type": "after", "count": count}
    if end_type == EndType.UNTIL.value:
        until = _get(data, "end_until_date", "endUntilDate")
        if until is None:
            raise ValidationError("endUntilDate is required when endType is 'until'")
        if isinstance(until, datetime):
            until = until.date()
        return {"type": "until", "until": until}
    raise ValidationError(f"endType must be 'after' or 'until', got {end_type!r}")


def parse_rule(data: Union[Mapping[str, Any], DailyRule, WeeklyRule, MonthlyRule]) -> RecurrenceRule:
    """Build a typed rule from the flat wire shape.

    Args:
        data: Mapping with camelCase or snake_case keys, or an existing rule.

    Returns:
        DailyRule, WeeklyRule or MonthlyRule.

    Raises:
        ConfigurationError: If `frequency` is missing or unsupported.
        ValidationError: If any other field is missing or out of range.
    """
    if isinstance(data, RULE_TYPES):
        return data

    frequency = _enum_value(data.get("frequency"))
    if frequency not in _FREQUENCIES:
        raise ConfigurationError(f"Unsupported recurrence frequency: {frequency!r}")

    interval = data.get("interval")
    payload: dict = {
        "frequency": frequency,
        "interval": 1 if interval is None else interval,
        "end": _parse_end(data),
    }
    # Fields for other frequencies are ignored
    if frequency == RecurrenceFrequency.WEEKLY.value:
        payload["days_of_week"] = _get(data, "days_of_week", "daysOfWeek") or []
    elif frequency == RecurrenceFrequency.MONTHLY.value:
        payload["day_of_month"] = _get(data, "day_of_month", "dayOfMonth")

    try:
        return _RULE_ADAPTER.validate_python(payload)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid recurrence rule: {_format_errors(e)}") from e
