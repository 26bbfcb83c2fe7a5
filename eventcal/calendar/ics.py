"""Structured iCalendar (RFC 5545) components and their text serialization.

Documents are assembled as `Component` trees of `Property` records and turned
into text by `serialize()` only. Escaping of TEXT values and line folding are
applied there, and nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, List

from eventcal.errors import ValidationError
from eventcal.models.constants import ICS_LINE_LIMIT_OCTETS, MINUTES_PER_DAY, MINUTES_PER_HOUR

CRLF = "\r\n"


def escape_text(text: str) -> str:
    """Escape a TEXT value.

    Backslash goes first so the backslashes added for `;`, `,` and newlines
    are not escaped again.
    """
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\r", "\\n")
        .replace("\n", "\\n")
    )


def has_line_break(value: str) -> bool:
    return "\r" in value or "\n" in value


def to_utc(dt: datetime) -> datetime:
    """Aware UTC datetime; naive datetimes are taken to already be UTC."""
    if not isinstance(dt, datetime):
        raise ValidationError(f"Expected a datetime, got {type(dt).__name__}")
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_ics_datetime(dt: datetime) -> str:
    """UTC date-time in the compact form, e.g. 20260303T190000Z."""
    return to_utc(dt).strftime("%Y%m%dT%H%M%SZ")


def format_trigger(minutes: int) -> str:
    """Alarm trigger relative to the event start, in the largest whole unit.

    1440 -> -P1D, 60 -> -PT1H, 15 -> -PT15M, 0 -> PT0M
    """
    if minutes < 0:
        raise ValidationError(f"Reminder offset must be non-negative, got {minutes}")
    if minutes == 0:
        return "PT0M"
    if minutes % MINUTES_PER_DAY == 0:
        return f"-P{minutes // MINUTES_PER_DAY}D"
    if minutes % MINUTES_PER_HOUR == 0:
        return f"-PT{minutes // MINUTES_PER_HOUR}H"
    return f"-PT{minutes}M"


def fold_line(line: str, limit: int = ICS_LINE_LIMIT_OCTETS) -> List[str]:
    """Split a content line into physical lines of at most `limit` octets.

    Continuation lines start with a single space. Multi-byte UTF-8 characters
    are never split.
    """
    out: List[str] = []
    current = ""
    size = 0
    for ch in line:
        n = len(ch.encode("utf-8"))
        if size + n > limit:
            out.append(current)
            current = " "
            size = 1
        current += ch
        size += n
    out.append(current)
    return out


@dataclass(frozen=True)
class Property:
    """One content line: NAME;PARAM=VALUE:value."""

    name: str
    value: str
    escape: bool = False
    params: tuple = ()

    def content_line(self) -> str:
        """Unfolded line text.

        Raises:
            ValidationError: If a raw (unescaped) value contains a line break.
        """
        if self.escape:
            value = escape_text(self.value)
        elif has_line_break(self.value):
            raise ValidationError(f"{self.name} value must not contain line breaks")
        else:
            value = self.value
        params = "".join(f";{k}={v}" for k, v in self.params)
        return f"{self.name}{params}:{value}"


@dataclass
class Component:
    """A BEGIN/END block holding properties and nested components."""

    name: str
    properties: List[Property] = field(default_factory=list)
    components: List["Component"] = field(default_factory=list)

    def add(self, name: str, value: str, **params: str) -> "Component":
        """Add a property whose value is already in wire form."""
        self.properties.append(Property(name, value, escape=False, params=tuple(params.items())))
        return self

    def add_text(self, name: str, text: str, **params: str) -> "Component":
        """Add a TEXT property; it is escaped on serialization."""
        self.properties.append(Property(name, text, escape=True, params=tuple(params.items())))
        return self

    def add_component(self, component: "Component") -> "Component":
        self.components.append(component)
        return self

    def get(self, name: str) -> List[Property]:
        return [p for p in self.properties if p.name == name]

    def content_lines(self) -> Iterator[str]:
        yield f"BEGIN:{self.name}"
        for prop in self.properties:
            yield prop.content_line()
        for child in self.components:
            yield from child.content_lines()
        yield f"END:{self.name}"


def serialize(component: Component) -> str:
    """Render a component tree as iCalendar text (CRLF, folded, trailing CRLF)."""
    physical: List[str] = []
    for line in component.content_lines():
        physical.extend(fold_line(line))
    return CRLF.join(physical) + CRLF
