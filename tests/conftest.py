"""Pytest fixtures and configuration for eventcal tests."""

import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient

from eventcal.config import CalendarConfig
from eventcal.models.event import CalendarEvent


@pytest.fixture
def calendar_config():
    """Default calendar configuration (independent of the environment)."""
    return CalendarConfig()


@pytest.fixture
def fixed_now():
    """Deterministic DTSTAMP for document tests."""
    return datetime(2026, 2, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_event_base():
    """Base event data for creating test events.

    Returns a dict with default event attributes that can be overridden.
    """
    return {
        "id": "evt-123",
        "title": "Trivia Night!",
        "description": "Win, lose, or draw — prizes for 1st place.",
        "start_time": datetime(2026, 3, 3, 19, 0, 0),
        "end_time": datetime(2026, 3, 3, 21, 0, 0),
        "location": "The Anchor; Main St, Springfield",
        "category": "social",
        "url": None,
        "reminder_minutes": [60, 1440],
    }


@pytest.fixture
def sample_event(sample_event_base):
    """Create a sample CalendarEvent for testing."""
    return CalendarEvent(**sample_event_base)


@pytest.fixture
def weekly_rule_data():
    """Flat wire-shape weekly rule, as submitted by the event form."""
    return {
        "frequency": "weekly",
        "interval": 1,
        "daysOfWeek": [],
        "endType": "after",
        "endAfterCount": 4,
    }


@pytest.fixture
def test_client(monkeypatch, calendar_config):
    """FastAPI test client using the default configuration."""
    from eventcal.api import app as app_module

    monkeypatch.setattr(app_module, "config", calendar_config)
    with TestClient(app_module.app) as client:
        yield client
