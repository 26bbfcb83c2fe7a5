"""Expand recurrence rules into concrete occurrences.

`OccurrenceSeries` is a lazy, finite iterable: every `iter()` starts over from
the first occurrence, and iteration stops at the rule's end condition or after
MAX_OCCURRENCES items, whichever comes first. `expand()` materializes it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from itertools import islice
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from dateutil.relativedelta import relativedelta

from eventcal.errors import ConfigurationError, ValidationError
from eventcal.models.event import Occurrence
from eventcal.models.recurrence import (
    DailyRule,
    MonthlyRule,
    RecurrenceRule,
    WeeklyRule,
    parse_rule,
    weekday_of,
)

logger = logging.getLogger(__name__)


def _daily_starts(start: datetime, rule: DailyRule) -> Iterator[datetime]:
    step = timedelta(days=rule.interval)
    current = start
    while True:
        yield current
        current = current + step


def _weekly_starts(start: datetime, rule: WeeklyRule) -> Iterator[datetime]:
    # Weeks start on Sunday; offsets are relative to the start's weekday so the
    # time of day is carried over unchanged.
    days = rule.resolved_days(start)
    start_dow = weekday_of(start)
    week = 0
    while True:
        for dow in days:
            candidate = start + timedelta(days=week * 7 + (dow - start_dow))
            if candidate < start:
                continue
            yield candidate
        week += rule.interval


def _monthly_starts(start: datetime, rule: MonthlyRule) -> Iterator[datetime]:
    # relativedelta(day=N) clamps to the last day of short months. Each
    # candidate is computed from the start so one clamped month never shifts
    # the ones after it.
    day = rule.resolved_day(start)
    n = 0
    while True:
        yield start + relativedelta(months=n * rule.interval, day=day)
        n += 1


_STARTS: Dict[type, Callable[[datetime, Any], Iterator[datetime]]] = {
    DailyRule: _daily_starts,
    WeeklyRule: _weekly_starts,
    MonthlyRule: _monthly_starts,
}


class OccurrenceSeries:
    """Lazy, restartable sequence of occurrences for one rule."""

    def __init__(
        self,
        start_time: datetime,
        end_time: Optional[datetime],
        rule: Union[RecurrenceRule, Mapping[str, Any]],
    ):
        """Validate inputs up front.

        Args:
            start_time: Start of the first (template) event.
            end_time: End of the template event, or None.
            rule: Typed rule, or the flat wire shape accepted by `parse_rule`.

        Raises:
            ValidationError: If the rule is invalid or end_time is before start_time.
            ConfigurationError: If the rule's frequency is unsupported.
        """
        rule = parse_rule(rule)
        if type(rule) not in _STARTS:
            raise ConfigurationError(f"Unsupported recurrence rule type: {type(rule).__name__}")

        duration: Optional[timedelta] = None
        if end_time is not None:
            if (start_time.tzinfo is None) != (end_time.tzinfo is None):
                raise ValidationError("start_time and end_time must both be naive or both timezone-aware")
            if end_time < start_time:
                raise ValidationError("end_time must not be before start_time")
            if end_time > start_time:
                duration = end_time - start_time

        self.start_time = start_time
        self.rule = rule
        self.duration = duration

    @property
    def limit(self) -> int:
        return self.rule.occurrence_limit

    def starts(self) -> Iterator[datetime]:
        """Occurrence start times, honoring the until date and the count limit."""
        until = self.rule.until
        candidates = _STARTS[type(self.rule)](self.start_time, self.rule)
        for candidate in islice(candidates, self.limit):
            if until is not None and candidate.date() > until:
                return
            yield candidate

    def __iter__(self) -> Iterator[Occurrence]:
        for start in self.starts():
            end = start + self.duration if self.duration is not None else None
            yield Occurrence(start_time=start, end_time=end)

    def __repr__(self) -> str:
        return f"OccurrenceSeries(start_time={self.start_time!r}, rule={self.rule!r})"


def expand(
    start_time: datetime,
    end_time: Optional[datetime],
    rule: Union[RecurrenceRule, Mapping[str, Any]],
) -> List[Occurrence]:
    """Expand a rule into its list of occurrences.

    Args:
        start_time: Start of the template event.
        end_time: End of the template event, or None.
        rule: Typed rule or flat wire shape.

    Returns:
        Occurrences in chronological order, at most MAX_OCCURRENCES of them.
    """
    series = OccurrenceSeries(start_time, end_time, rule)
    occurrences = list(series)
    logger.debug(
        f"Expanded {series.rule.frequency} rule (interval={series.rule.interval}) "
        f"into {len(occurrences)} occurrences from {start_time.isoformat()}"
    )
    return occurrences
