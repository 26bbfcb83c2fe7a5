"""HTTP responses carrying iCalendar documents."""

from typing import Optional

from fastapi.responses import Response

from eventcal.config import CalendarConfig

ICS_MEDIA_TYPE = "text/calendar; charset=utf-8"


def ics_download_response(content: str, filename: str) -> Response:
    """One-off .ics download (browser saves the file)."""
    return Response(
        content=content.encode("utf-8"),
        media_type=ICS_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def ics_feed_response(content: str, filename: str, config: Optional[CalendarConfig] = None) -> Response:
    """Subscribable feed (webcal:// or https://), cacheable by calendar clients."""
    config = config or CalendarConfig()
    return Response(
        content=content.encode("utf-8"),
        media_type=ICS_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'inline; filename="{filename}"',
            "Cache-Control": f"public, max-age={config.feed_cache_max_age}",
            "Access-Control-Allow-Origin": "*",
        },
    )
