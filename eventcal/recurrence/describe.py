"""Human-readable one-line summaries of recurrence rules (UI preview text)."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Mapping, Optional, Union

from eventcal.models.recurrence import (
    DailyRule,
    EndAfter,
    EndUntil,
    RecurrenceRule,
    Weekday,
    WeeklyRule,
    parse_rule,
)


def ordinal(n: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', 23 -> '23rd'."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def format_until(d: date) -> str:
    """Mar 24, 2026"""
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def _every(interval: int, unit: str) -> str:
    return f"every {unit}" if interval == 1 else f"every {interval} {unit}s"


def _day_names(days: List[Weekday]) -> str:
    return ", ".join(d.label for d in days)


def _frequency_clause(rule: RecurrenceRule, start_time: Optional[datetime]) -> str:
    if isinstance(rule, DailyRule):
        return _every(rule.interval, "day")

    if isinstance(rule, WeeklyRule):
        days = rule.resolved_days(start_time) if start_time is not None else list(rule.days_of_week)
        if not days:
            return _every(rule.interval, "week")
        if rule.interval == 1:
            return f"every {_day_names(days)}"
        return f"every {rule.interval} weeks on {_day_names(days)}"

    # MonthlyRule
    day = rule.resolved_day(start_time) if start_time is not None else rule.day_of_month
    base = _every(rule.interval, "month")
    return f"{base} on the {ordinal(day)}" if day else base


def _end_clause(rule: RecurrenceRule) -> str:
    if isinstance(rule.end, EndAfter):
        count = rule.occurrence_limit
        return f", {count} time" if count == 1 else f", {count} times"
    if isinstance(rule.end, EndUntil):
        return f" until {format_until(rule.end.until)}"
    return ""


def describe(rule: Union[RecurrenceRule, Mapping[str, Any]], start_time: Optional[datetime] = None) -> str:
    """Summarize a rule, e.g. 'Repeats every 2 weeks on Monday, Friday, 6 times'.

    When `start_time` is given, the weekday and day-of-month defaults are
    resolved the same way the expander resolves them. Counts above the
    occurrence ceiling are reported as the ceiling.
    """
    rule = parse_rule(rule)
    return f"Repeats {_frequency_clause(rule, start_time)}{_end_clause(rule)}"
