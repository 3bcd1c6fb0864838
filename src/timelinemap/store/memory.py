"""
In-memory event store.

A volatile, process-local implementation of :class:`EventStore`. If the
server restarts, every event is lost; this backend exists for development,
tests and demos. For anything durable, set ``STORE_BACKEND=mongo``.

Ids are generated as ObjectId hex strings so that event JSON looks identical
whichever backend produced it.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

from bson import ObjectId

from timelinemap.core.contracts.event import Event
from timelinemap.store.base import day_bounds, matches_search, parse_day, sort_newest_first


class InMemoryEventStore:
    """A list-backed store guarded by a lock for threadpool request handlers."""

    def __init__(self) -> None:
        self._events: list[Event] = []
        self._lock = threading.Lock()

    def insert(self, event: Event) -> Event:
        """Assign an id and keep a private deep copy of ``event``."""
        stored = event.model_copy(update={"id": str(ObjectId())}, deep=True)
        with self._lock:
            self._events.append(stored)
        return stored.model_copy(deep=True)

    def insert_many(self, events: Iterable[Event]) -> list[Event]:
        return [self.insert(event) for event in events]

    def find(self, search: str | None = None, date: str | None = None) -> list[Event]:
        """Filter by search term and/or day, newest first (see ``store.base``)."""
        with self._lock:
            candidates = list(self._events)

        if search:
            candidates = [e for e in candidates if matches_search(e, search)]

        day = parse_day(date)
        if day is not None:
            start, end = day_bounds(day)
            candidates = [e for e in candidates if start <= e.date <= end]

        return [e.model_copy(deep=True) for e in sort_newest_first(candidates)]

    def count(self) -> int:
        with self._lock:
            return len(self._events)

    def clear(self) -> None:
        """Drop every stored event (test helper)."""
        with self._lock:
            self._events.clear()


__all__ = ["InMemoryEventStore"]
