"""
Filter engine and timeline state.

`apply_filters` is the single matching rule for the map/timeline view. An
event is kept iff every active criterion holds:

- **date**: the event's UTC day equals the selected day (if one is selected)
- **title**: the title contains the text filter, case-insensitively
- **people**: the event lists the selected person (exact match)
- **tags**: the event lists the selected tag (exact match)

Input order is preserved, and filtering is idempotent.

`TimelineState` bundles the loaded events, the current `FilterSpec` and the
selected timeline day into one immutable value. Every transition returns a
new state; derived views (`facets`, `visible_events`, `day_events`) are
computed from the state's own inputs on access, so none of them can go stale.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import date

from timelinemap.core.contracts.event import Event
from timelinemap.core.contracts.timeline import Facets, FilterSpec
from timelinemap.timeline.facets import derive_facets


def matches(event: Event, spec: FilterSpec, selected_date: date | None = None) -> bool:
    """Return True if ``event`` satisfies ``spec`` and the selected timeline day."""
    day = selected_date if selected_date is not None else spec.date
    if day is not None and event.day != day:
        return False
    if spec.title and spec.title.casefold() not in event.title.casefold():
        return False
    if spec.people and spec.people not in event.people:
        return False
    if spec.tags and spec.tags not in event.tags:
        return False
    return True


def apply_filters(
    events: Sequence[Event],
    spec: FilterSpec,
    selected_date: date | None = None,
) -> list[Event]:
    """Return the events matching ``spec`` (and ``selected_date``), order preserved.

    ``selected_date`` is the day picked on the timeline; when omitted, the
    spec's own ``date`` field is used instead.
    """
    return [event for event in events if matches(event, spec, selected_date)]


def events_on_date(events: Sequence[Event], selected_date: date | None) -> list[Event]:
    """Restrict ``events`` to the selected day; empty when no day is selected."""
    if selected_date is None:
        return []
    return [event for event in events if event.day == selected_date]


@dataclass(frozen=True)
class TimelineState:
    """Immutable container for the timeline view's inputs."""

    events: tuple[Event, ...] = ()
    filters: FilterSpec = field(default_factory=FilterSpec)
    selected_date: date | None = None

    # ----- Transitions -------------------------------------------------------
    def with_events(self, events: Sequence[Event]) -> TimelineState:
        return replace(self, events=tuple(events))

    def with_filters(self, filters: FilterSpec) -> TimelineState:
        return replace(self, filters=filters)

    def clear_filters(self) -> TimelineState:
        return replace(self, filters=FilterSpec())

    def select_date(self, day: date | None) -> TimelineState:
        """Select ``day`` on the timeline; selecting the current day clears it."""
        if day is not None and day == self.selected_date:
            return replace(self, selected_date=None)
        return replace(self, selected_date=day)

    # ----- Derived views -----------------------------------------------------
    @property
    def facets(self) -> Facets:
        return derive_facets(self.events)

    @property
    def visible_events(self) -> list[Event]:
        """Events shown on the map: all filters plus the selected day."""
        return apply_filters(self.events, self.filters, self.selected_date)

    @property
    def day_events(self) -> list[Event]:
        """Events listed for the selected day (empty when none is selected)."""
        return events_on_date(self.visible_events, self.selected_date)


__all__ = ["TimelineState", "apply_filters", "events_on_date", "matches"]
