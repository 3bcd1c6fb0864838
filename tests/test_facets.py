"""Tests for facet derivation over event sets."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime

from timelinemap.core.contracts.event import Event
from timelinemap.store.seed import DEMO_EVENTS
from timelinemap.timeline.facets import (
    derive_facets,
    unique_dates,
    unique_people,
    unique_tags,
    unique_values,
)


def test_empty_event_set_has_empty_facets() -> None:
    facets = derive_facets([])
    assert facets.people == [] and facets.tags == [] and facets.dates == []


def test_events_without_people_contribute_nothing(make_event: Callable[..., Event]) -> None:
    events = [make_event(people=[]), make_event(people=["Zoe", "Adam"])]
    assert unique_people(events) == ["Adam", "Zoe"]


def test_values_are_distinct_and_sorted(make_event: Callable[..., Event]) -> None:
    events = [
        make_event(tags=["work", "planning", "work"]),
        make_event(tags=["social", "planning"]),
    ]
    assert unique_tags(events) == ["planning", "social", "work"]


def test_unique_values_drops_empty_strings() -> None:
    assert unique_values(["b", "", "a", "b"]) == ["a", "b"]


def test_two_events_same_day_and_one_next_day(make_event: Callable[..., Event]) -> None:
    events = [
        make_event(when=datetime(2024, 7, 16, 9, 0, tzinfo=UTC)),
        make_event(when=datetime(2024, 7, 15, 10, 0, tzinfo=UTC)),
        make_event(when=datetime(2024, 7, 15, 18, 30, tzinfo=UTC)),
    ]
    assert unique_dates(events) == [date(2024, 7, 15), date(2024, 7, 16)]


def test_days_are_taken_in_utc(make_event: Callable[..., Event]) -> None:
    from datetime import timedelta, timezone

    pacific = timezone(timedelta(hours=-7))
    late_evening = make_event(when=datetime(2024, 7, 15, 20, 0, tzinfo=pacific))
    assert unique_dates([late_evening]) == [date(2024, 7, 16)]


def test_demo_data_facets() -> None:
    facets = derive_facets(list(DEMO_EVENTS))

    assert facets.people == ["Alice", "Bob", "Charlie", "Dana", "Eve"]
    assert facets.tags == [
        "celebration",
        "conference",
        "nyc",
        "paris",
        "park",
        "planning",
        "sf",
        "social",
        "tech",
        "work",
    ]
    assert facets.dates == [date(2024, 7, 15), date(2024, 7, 16), date(2024, 7, 17)]
