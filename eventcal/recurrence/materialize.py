"""Materialize a recurring series into concrete child events.

The caller persists the template (marked as series parent) and every child as
separate rows; children reference the template through `series_id`.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Union

from eventcal.errors import ValidationError
from eventcal.models.event import CalendarEvent
from eventcal.models.recurrence import RecurrenceRule
from eventcal.recurrence.expand import OccurrenceSeries

logger = logging.getLogger(__name__)


def mark_series_parent(template: CalendarEvent) -> CalendarEvent:
    """Copy of the template flagged as the parent of a recurring series."""
    return template.model_copy(update={"is_series_parent": True, "series_id": None})


def materialize_series(
    template: CalendarEvent,
    rule: Union[RecurrenceRule, Mapping[str, Any]],
) -> List[CalendarEvent]:
    """Create one child event per occurrence of the rule.

    Children copy every template field except timing and identity: each gets
    the occurrence's start/end, `series_id=template.id` and the deterministic
    id `<template.id>-<n>` (1-based), so regenerating a series yields the same
    UIDs in calendar feeds.

    Raises:
        ValidationError: If the template has no id, an empty title, or the rule is invalid.
    """
    if not template.id:
        raise ValidationError("A series template needs an id to link its occurrences")
    if not template.title or not template.title.strip():
        raise ValidationError("Event title is required")

    series = OccurrenceSeries(template.start_time, template.end_time, rule)
    children: List[CalendarEvent] = []
    for n, occurrence in enumerate(series, start=1):
        children.append(
            template.with_occurrence(occurrence).model_copy(
                update={
                    "id": f"{template.id}-{n}",
                    "series_id": template.id,
                    "is_series_parent": False,
                }
            )
        )
    logger.debug(f"Materialized {len(children)} occurrences for series {template.id}: {template.title[:50]}")
    return children
