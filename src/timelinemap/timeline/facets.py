"""Facet derivation: distinct people, tags and days across an event set.

Facets populate the filter dropdowns and the timeline. They are a pure
function of the event sequence and are recomputed whenever it changes.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from timelinemap.core.contracts.event import Event
from timelinemap.core.contracts.timeline import Facets


def unique_values(values: Iterable[str]) -> list[str]:
    """Return distinct non-empty strings sorted lexicographically."""
    return sorted({value for value in values if value})


def unique_people(events: Sequence[Event]) -> list[str]:
    return unique_values(person for event in events for person in event.people)


def unique_tags(events: Sequence[Event]) -> list[str]:
    return unique_values(tag for event in events for tag in event.tags)


def unique_dates(events: Sequence[Event]) -> list[date]:
    """Return the distinct UTC days on which at least one event occurs, ascending."""
    return sorted({event.day for event in events})


def derive_facets(events: Sequence[Event]) -> Facets:
    return Facets(
        people=unique_people(events),
        tags=unique_tags(events),
        dates=unique_dates(events),
    )


__all__ = ["derive_facets", "unique_dates", "unique_people", "unique_tags", "unique_values"]
