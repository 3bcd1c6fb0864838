"""Tests for the filter engine and `TimelineState` transitions."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime

import pytest

from timelinemap.core.contracts.event import Event
from timelinemap.core.contracts.timeline import FilterSpec
from timelinemap.store.seed import DEMO_EVENTS
from timelinemap.timeline.filters import (
    TimelineState,
    apply_filters,
    events_on_date,
    matches,
)

JULY_15 = date(2024, 7, 15)


def _titles(events: list[Event]) -> list[str]:
    return [e.title for e in events]


@pytest.fixture  # type: ignore[misc]
def events() -> list[Event]:
    return list(DEMO_EVENTS)


def test_empty_spec_keeps_everything_in_order(events: list[Event]) -> None:
    assert apply_filters(events, FilterSpec()) == events


def test_date_match_ignores_time_of_day(make_event: Callable[..., Event]) -> None:
    event = make_event(when=datetime(2024, 7, 15, 14, 0, tzinfo=UTC))
    assert matches(event, FilterSpec(date=JULY_15))
    assert not matches(event, FilterSpec(date=date(2024, 7, 16)))


def test_person_filter_keeps_input_order(events: list[Event]) -> None:
    result = apply_filters(events, FilterSpec(people="Alice"))
    assert _titles(result) == ["Team Meeting @ Apple Park", "Central Park Picnic"]


def test_person_and_tag_are_exact_matches(events: list[Event]) -> None:
    assert apply_filters(events, FilterSpec(people="alice")) == []
    assert apply_filters(events, FilterSpec(tags="soc")) == []
    assert len(apply_filters(events, FilterSpec(tags="social"))) == 2


def test_title_is_case_insensitive_substring(events: list[Event]) -> None:
    result = apply_filters(events, FilterSpec(title="PARK"))
    assert _titles(result) == ["Team Meeting @ Apple Park", "Central Park Picnic"]


def test_criteria_combine_with_and(events: list[Event]) -> None:
    spec = FilterSpec(title="park", people="Charlie", tags="social")
    assert _titles(apply_filters(events, spec)) == ["Central Park Picnic"]
    assert apply_filters(events, spec.model_copy(update={"date": JULY_15})) == []


def test_filtering_is_idempotent(events: list[Event]) -> None:
    spec = FilterSpec(people="Bob")
    once = apply_filters(events, spec)
    assert apply_filters(once, spec) == once


def test_selected_date_overrides_spec_date(events: list[Event]) -> None:
    spec = FilterSpec(date=date(2024, 7, 17))
    result = apply_filters(events, spec, selected_date=date(2024, 7, 16))
    assert _titles(result) == ["Conference Talk @ Moscone Center"]


def test_events_on_date_without_selection_is_empty(events: list[Event]) -> None:
    assert events_on_date(events, None) == []
    assert len(events_on_date(events, JULY_15)) == 2


def test_filter_spec_is_empty() -> None:
    assert FilterSpec().is_empty()
    assert not FilterSpec(title="x").is_empty()
    assert not FilterSpec(date=JULY_15).is_empty()


class TestTimelineState:
    def test_default_state_shows_everything(self, events: list[Event]) -> None:
        state = TimelineState().with_events(events)

        assert state.visible_events == events
        assert state.day_events == []
        assert state.facets.dates == [JULY_15, date(2024, 7, 16), date(2024, 7, 17)]

    def test_selecting_a_day_narrows_map_and_lists_day_events(
        self, events: list[Event]
    ) -> None:
        state = TimelineState().with_events(events).select_date(JULY_15)

        assert _titles(state.visible_events) == [
            "Team Meeting @ Apple Park",
            "Project Launch Party @ Eiffel Tower",
        ]
        assert state.day_events == state.visible_events

    def test_selecting_the_same_day_again_clears_it(self, events: list[Event]) -> None:
        state = TimelineState().with_events(events).select_date(JULY_15).select_date(JULY_15)
        assert state.selected_date is None
        assert state.visible_events == events

    def test_day_events_respect_other_filters(self, events: list[Event]) -> None:
        state = (
            TimelineState()
            .with_events(events)
            .with_filters(FilterSpec(people="Bob"))
            .select_date(JULY_15)
        )
        assert _titles(state.day_events) == ["Team Meeting @ Apple Park"]

    def test_transitions_do_not_mutate(self, events: list[Event]) -> None:
        base = TimelineState().with_events(events)
        filtered = base.with_filters(FilterSpec(tags="work"))

        assert base.filters.is_empty()
        assert len(filtered.visible_events) == 1
        assert filtered.clear_filters().visible_events == events

    def test_facets_follow_loaded_events_not_filters(self, events: list[Event]) -> None:
        state = TimelineState().with_events(events).with_filters(FilterSpec(people="Eve"))
        assert state.facets.people == ["Alice", "Bob", "Charlie", "Dana", "Eve"]
        assert state.with_events(events[:1]).facets.people == ["Alice", "Bob"]
