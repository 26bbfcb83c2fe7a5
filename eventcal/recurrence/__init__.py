"""Recurrence expansion, description and export for eventcal."""

from eventcal.recurrence.describe import describe
from eventcal.recurrence.expand import OccurrenceSeries, expand
from eventcal.recurrence.materialize import mark_series_parent, materialize_series
from eventcal.recurrence.rrule_export import rule_to_rrule

__all__ = [
    "describe",
    "expand",
    "OccurrenceSeries",
    "materialize_series",
    "mark_series_parent",
    "rule_to_rrule",
]
