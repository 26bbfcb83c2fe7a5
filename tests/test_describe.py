"""Tests for recurrence preview text and its agreement with expansion."""

import calendar
import pytest
from datetime import date, datetime

from eventcal.models.recurrence import (
    DailyRule,
    EndAfter,
    EndUntil,
    MonthlyRule,
    Weekday,
    WeeklyRule,
    weekday_of,
)
from eventcal.recurrence.describe import describe, format_until, ordinal
from eventcal.recurrence.expand import expand


class TestOrdinal:
    @pytest.mark.parametrize(
        "n, expected",
        [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (12, "12th"),
         (13, "13th"), (21, "21st"), (22, "22nd"), (23, "23rd"), (30, "30th"), (31, "31st")],
    )
    def test_ordinal(self, n, expected):
        assert ordinal(n) == expected

    def test_format_until(self):
        assert format_until(date(2026, 3, 24)) == "Mar 24, 2026"
        assert format_until(date(2026, 1, 5)) == "Jan 5, 2026"


class TestDescribe:
    """describe() wording per frequency and end condition."""

    def test_daily(self):
        assert describe(DailyRule(end=EndAfter(count=3))) == "Repeats every day, 3 times"

    def test_daily_interval_until(self):
        rule = DailyRule(interval=2, end=EndUntil(until=date(2026, 3, 24)))
        assert describe(rule) == "Repeats every 2 days until Mar 24, 2026"

    def test_weekly_named_days(self):
        rule = WeeklyRule(days_of_week=[Weekday.WEDNESDAY, Weekday.MONDAY], end=EndAfter(count=5))
        assert describe(rule) == "Repeats every Monday, Wednesday, 5 times"

    def test_weekly_interval_named_day(self):
        rule = WeeklyRule(interval=2, days_of_week=[Weekday.TUESDAY], end=EndAfter(count=4))
        assert describe(rule) == "Repeats every 2 weeks on Tuesday, 4 times"

    def test_weekly_without_days_or_start(self):
        assert describe(WeeklyRule(end=EndAfter(count=4))) == "Repeats every week, 4 times"
        assert describe(WeeklyRule(interval=3, end=EndAfter(count=4))) == "Repeats every 3 weeks, 4 times"

    def test_weekly_default_day_from_start(self, weekly_rule_data):
        """With a start time, the default weekday is named like the expander resolves it."""
        start = datetime(2026, 3, 3, 19, 0)
        assert describe(weekly_rule_data, start) == "Repeats every Tuesday, 4 times"

    def test_monthly_on_day(self):
        rule = MonthlyRule(day_of_month=3, end=EndAfter(count=3))
        assert describe(rule) == "Repeats every month on the 3rd, 3 times"

    def test_monthly_interval_without_day(self):
        rule = MonthlyRule(interval=3, end=EndUntil(until=date(2026, 12, 1)))
        assert describe(rule) == "Repeats every 3 months until Dec 1, 2026"

    def test_monthly_default_day_from_start(self):
        rule = MonthlyRule(end=EndAfter(count=2))
        assert describe(rule, datetime(2026, 1, 31, 9, 0)) == "Repeats every month on the 31st, 2 times"

    def test_single_time(self):
        assert describe(DailyRule(end=EndAfter(count=1))) == "Repeats every day, 1 time"

    def test_count_reported_at_ceiling(self):
        """Counts above the ceiling are described as the number actually generated."""
        assert describe(DailyRule(end=EndAfter(count=100))) == "Repeats every day, 52 times"

    def test_accepts_wire_shape(self):
        data = {"frequency": "daily", "interval": 1, "endType": "after", "endAfterCount": 2}
        assert describe(data) == "Repeats every day, 2 times"


class TestDescribeMatchesExpansion:
    """The preview names the days the expander actually produces."""

    def test_weekly_days_agree(self):
        start = datetime(2026, 3, 4, 10, 0)
        rule = WeeklyRule(
            days_of_week=[Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY],
            end=EndAfter(count=9),
        )
        occurrences = expand(start, None, rule)
        produced = {weekday_of(o.start_time) for o in occurrences}

        assert produced == {Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY}
        assert describe(rule, start) == "Repeats every Monday, Wednesday, Friday, 9 times"
        assert len(occurrences) == 9

    def test_weekly_default_day_agrees(self):
        start = datetime(2026, 3, 7, 8, 0)
        rule = WeeklyRule(end=EndAfter(count=3))
        occurrences = expand(start, None, rule)

        assert {weekday_of(o.start_time) for o in occurrences} == {Weekday.SATURDAY}
        assert "Saturday" in describe(rule, start)

    def test_monthly_clamping_agrees(self):
        start = datetime(2026, 1, 31, 9, 0)
        rule = MonthlyRule(day_of_month=31, end=EndAfter(count=6))
        occurrences = expand(start, None, rule)

        assert describe(rule, start).startswith("Repeats every month on the 31st")
        for o in occurrences:
            last_day = calendar.monthrange(o.start_time.year, o.start_time.month)[1]
            assert o.start_time.day == min(31, last_day)

    def test_count_agrees(self):
        rule = DailyRule(end=EndAfter(count=75))
        occurrences = expand(datetime(2026, 3, 3, 9, 0), None, rule)

        assert describe(rule).endswith(f", {len(occurrences)} times")
