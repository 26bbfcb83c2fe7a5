"""Integration tests for API endpoints.

These tests verify API endpoints work correctly end-to-end.
"""


EVENT_JSON = {
    "id": "evt-123",
    "title": "Trivia Night!",
    "description": "Win, lose, or draw",
    "startTime": "2026-03-03T19:00:00",
    "endTime": "2026-03-03T21:00:00",
    "location": "The Anchor",
    "reminderMinutes": [60],
}

WEEKLY_RULE = {
    "frequency": "weekly",
    "interval": 1,
    "daysOfWeek": [],
    "endType": "after",
    "endAfterCount": 4,
}


class TestHealth:
    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestRecurrenceEndpoints:
    """Expansion, description and materialization."""

    def test_expand(self, test_client):
        response = test_client.post(
            "/recurrence/expand",
            json={"startTime": "2026-03-03T19:00:00", "endTime": "2026-03-03T21:00:00", "rule": WEEKLY_RULE},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 4
        assert data["description"] == "Repeats every Tuesday, 4 times"
        assert [o["startTime"] for o in data["occurrences"]] == [
            "2026-03-03T19:00:00",
            "2026-03-10T19:00:00",
            "2026-03-17T19:00:00",
            "2026-03-24T19:00:00",
        ]
        assert data["occurrences"][0]["endTime"] == "2026-03-03T21:00:00"

    def test_expand_unknown_frequency(self, test_client):
        response = test_client.post(
            "/recurrence/expand",
            json={"startTime": "2026-03-03T19:00:00", "rule": {**WEEKLY_RULE, "frequency": "yearly"}},
        )
        assert response.status_code == 400
        assert "frequency" in response.json()["detail"]

    def test_expand_missing_count(self, test_client):
        rule = {k: v for k, v in WEEKLY_RULE.items() if k != "endAfterCount"}
        response = test_client.post("/recurrence/expand", json={"startTime": "2026-03-03T19:00:00", "rule": rule})
        assert response.status_code == 400
        assert "endAfterCount" in response.json()["detail"]

    def test_describe(self, test_client):
        response = test_client.post(
            "/recurrence/describe",
            json={"rule": WEEKLY_RULE, "startTime": "2026-03-03T19:00:00"},
        )
        assert response.status_code == 200
        assert response.json() == {
            "description": "Repeats every Tuesday, 4 times",
            "rrule": "FREQ=WEEKLY;BYDAY=TU;WKST=SU;COUNT=4",
        }

    def test_materialize(self, test_client):
        response = test_client.post("/recurrence/materialize", json={"event": EVENT_JSON, "rule": WEEKLY_RULE})

        assert response.status_code == 200
        data = response.json()
        assert data["parent"]["isSeriesParent"] is True
        assert [c["id"] for c in data["occurrences"]] == ["evt-123-1", "evt-123-2", "evt-123-3", "evt-123-4"]
        assert all(c["seriesId"] == "evt-123" for c in data["occurrences"])


class TestCalendarEndpoints:
    """Documents, feeds and links."""

    def test_ics_download(self, test_client):
        response = test_client.post("/calendar/ics", json={"event": EVENT_JSON})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/calendar")
        assert response.headers["content-disposition"] == 'attachment; filename="Trivia_Night_.ics"'
        assert "BEGIN:VEVENT\r\n" in response.text
        assert "DESCRIPTION:Win\\, lose\\, or draw\r\n" in response.text
        assert "TRIGGER:-PT1H\r\n" in response.text

    def test_ics_missing_title(self, test_client):
        response = test_client.post("/calendar/ics", json={"event": {**EVENT_JSON, "title": ""}})
        assert response.status_code == 400

    def test_ics_negative_reminder(self, test_client):
        response = test_client.post("/calendar/ics", json={"event": {**EVENT_JSON, "reminderMinutes": [-10]}})
        assert response.status_code == 400
        assert "non-negative" in response.json()["detail"]

    def test_ics_url_with_line_break(self, test_client):
        event = {**EVENT_JSON, "url": "https://x.test/e\r\nBEGIN:VEVENT\r\nSUMMARY:Injected"}
        response = test_client.post("/calendar/ics", json={"event": event})
        assert response.status_code == 400

    def test_feed_id_with_line_break(self, test_client):
        event = {**EVENT_JSON, "id": "evt-1\nSTATUS:CANCELLED"}
        response = test_client.post("/calendar/feed", json={"events": [event]})

        assert response.status_code == 200
        assert "\r\nSTATUS:CANCELLED\r\n" not in response.text
        assert "UID:evt-1\\nSTATUS:CANCELLED@" in response.text

    def test_ics_malformed_event(self, test_client):
        response = test_client.post("/calendar/ics", json={"event": {**EVENT_JSON, "startTime": "soon"}})
        assert response.status_code == 422

    def test_venue_feed(self, test_client):
        response = test_client.post(
            "/calendar/feed",
            json={
                "venue": {"username": "anchor", "name": "The Anchor", "address": "1 Main St"},
                "events": [
                    {**EVENT_JSON, "id": "evt-2", "startTime": "2026-03-10T19:00:00", "endTime": None},
                    {**EVENT_JSON, "location": None},
                ],
            },
        )

        assert response.status_code == 200
        assert response.headers["cache-control"] == "public, max-age=3600"
        assert response.headers["content-disposition"] == 'inline; filename="anchor-schedule.ics"'
        assert response.headers["access-control-allow-origin"] == "*"
        assert "X-WR-CALNAME:The Anchor's Schedule\r\n" in response.text
        assert response.text.count("BEGIN:VEVENT") == 2
        assert "LOCATION:1 Main St\r\n" in response.text

    def test_named_feed(self, test_client):
        response = test_client.post("/calendar/feed", json={"calendarName": "Open Mics", "events": [EVENT_JSON]})

        assert response.status_code == 200
        assert "X-WR-CALNAME:Open Mics\r\n" in response.text
        assert response.headers["content-disposition"] == 'inline; filename="Open_Mics-schedule.ics"'

    def test_links(self, test_client):
        response = test_client.post("/calendar/links", json={"event": EVENT_JSON})

        assert response.status_code == 200
        data = response.json()
        assert data["google"].startswith("https://calendar.google.com/calendar/render?action=TEMPLATE")
        assert data["outlook"].startswith("https://outlook.live.com/calendar/0/deeplink/compose?")
        assert data["fileName"] == "Trivia_Night_.ics"
