"""
Event store protocol and the query semantics shared by every backend.

A store answers two questions: "save this event" and "which events match this
search term and/or day?". Both backends (in-memory and MongoDB) implement the
same filter rules:

- **search**: case-insensitive *literal* substring match against the title,
  description, any people entry, any tag entry, or the address (OR).
- **date**: the given day expanded to ``[00:00:00, 23:59:59.999999]`` UTC,
  inclusive on both ends. A malformed date string is ignored.
- Both filters combine with AND; results are sorted by event date, newest
  first.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, date, datetime, time
from typing import Protocol, runtime_checkable

from timelinemap.core.contracts.event import Event, as_utc
from timelinemap.core.settings import get_logger

logger = get_logger("timelinemap.store")


@runtime_checkable
class EventStore(Protocol):
    """Persistence boundary for events (insert-only, no update or delete)."""

    def insert(self, event: Event) -> Event:
        """Persist ``event`` and return it with its store-assigned id."""
        ...

    def insert_many(self, events: Iterable[Event]) -> list[Event]:
        """Persist several events; used for seeding."""
        ...

    def find(self, search: str | None = None, date: str | None = None) -> list[Event]:
        """Return matching events sorted by date descending."""
        ...

    def count(self) -> int:
        """Return the number of stored events."""
        ...


def parse_day(value: str | None) -> date | None:
    """Parse a ``YYYY-MM-DD`` (or full ISO-8601) filter into a UTC calendar day.

    Returns ``None`` for empty or malformed input so callers simply skip the
    date filter.
    """
    if value is None or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        logger.warning("Invalid date format received for filtering: %r", value)
        return None
    return as_utc(parsed).date()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Return the inclusive ``[start, end]`` UTC datetimes covering ``day``."""
    start = datetime.combine(day, time.min, tzinfo=UTC)
    end = datetime.combine(day, time.max, tzinfo=UTC)
    return start, end


def matches_search(event: Event, term: str) -> bool:
    """Return True if ``term`` occurs (case-insensitively) in any searchable field."""
    needle = term.casefold()
    haystack = [event.title, event.description, event.location.address, *event.people, *event.tags]
    return any(needle in value.casefold() for value in haystack)


def sort_newest_first(events: Iterable[Event]) -> list[Event]:
    return sorted(events, key=lambda e: e.date, reverse=True)


__all__ = ["EventStore", "day_bounds", "matches_search", "parse_day", "sort_newest_first"]
