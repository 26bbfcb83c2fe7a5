"""Export recurrence rules to iCalendar RRULE strings (export-only)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Mapping, Optional, Union

from eventcal.models.recurrence import (
    EndAfter,
    EndUntil,
    MonthlyRule,
    RecurrenceRule,
    Weekday,
    WeeklyRule,
    parse_rule,
)


_WD_MAP: dict[Weekday, str] = {
    Weekday.SUNDAY: "SU",
    Weekday.MONDAY: "MO",
    Weekday.TUESDAY: "TU",
    Weekday.WEDNESDAY: "WE",
    Weekday.THURSDAY: "TH",
    Weekday.FRIDAY: "FR",
    Weekday.SATURDAY: "SA",
}


def _by_month_day(day: int) -> List[str]:
    # Days past 28 do not exist in every month; pick the last existing day of
    # 28..day so short months clamp instead of being skipped.
    if day <= 28:
        return [f"BYMONTHDAY={day}"]
    days = ",".join(str(d) for d in range(28, day + 1))
    return [f"BYMONTHDAY={days}", "BYSETPOS=-1"]


def rule_to_rrule(
    rule: Union[RecurrenceRule, Mapping[str, Any]], start_time: Optional[datetime] = None
) -> str:
    """Convert a rule to an RRULE (without the leading 'RRULE:' prefix).

    Args:
        rule: Typed rule or flat wire shape.
        start_time: Series start; needed to spell out weekday and day-of-month
            defaults. Without it, those defaults are left to DTSTART.
    """
    rule = parse_rule(rule)
    parts: List[str] = [f"FREQ={rule.frequency.upper()}"]
    if rule.interval != 1:
        parts.append(f"INTERVAL={rule.interval}")

    if isinstance(rule, WeeklyRule):
        days = rule.resolved_days(start_time) if start_time is not None else list(rule.days_of_week)
        if days:
            parts.append("BYDAY=" + ",".join(_WD_MAP[d] for d in days))
        parts.append("WKST=SU")
    elif isinstance(rule, MonthlyRule):
        day = rule.resolved_day(start_time) if start_time is not None else rule.day_of_month
        if day:
            parts.extend(_by_month_day(day))

    if isinstance(rule.end, EndAfter):
        parts.append(f"COUNT={rule.occurrence_limit}")
    elif isinstance(rule.end, EndUntil):
        # Keep date-only to avoid timezone drift; end of day in UTC.
        parts.append(f"UNTIL={rule.end.until.strftime('%Y%m%d')}T235959Z")
    return ";".join(parts)
