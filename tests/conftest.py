"""Shared fixtures: event factory, stub geocoder, and an isolated API client.

Nothing here touches the network or a real MongoDB; the API client runs
against an in-memory store and writes uploads under `tmp_path`.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from timelinemap.api.app import create_app
from timelinemap.core.contracts.event import Event, Location
from timelinemap.core.contracts.geocode import GeocodeCandidate
from timelinemap.core.errors import GeocoderError, GeocoderNotFound
from timelinemap.core.settings import Settings
from timelinemap.store.memory import InMemoryEventStore


class StubGeocoder:
    """Stand-in for `GeocoderClient` that records queries and returns canned data."""

    def __init__(
        self,
        candidates: list[GeocodeCandidate] | None = None,
        error: GeocoderError | None = None,
    ) -> None:
        self.candidates = candidates or []
        self.error = error
        self.calls: list[tuple[str, int]] = []

    def resolve(self, query: str, *, limit: int = 5) -> list[GeocodeCandidate]:
        self.calls.append((query, limit))
        if self.error is not None:
            raise self.error
        return self.candidates[:limit]

    def locate(self, query: str) -> GeocodeCandidate:
        found = self.resolve(query, limit=1)
        if not found:
            raise GeocoderNotFound(f"No results found for {query!r}.")
        return found[0]


CUPERTINO = GeocodeCandidate(
    display_name="1 Infinite Loop, Cupertino, CA, USA",
    longitude=-122.03,
    latitude=37.33,
    place_id="42",
)


@pytest.fixture  # type: ignore[misc]
def make_event() -> Callable[..., Event]:
    """Factory building valid events with overridable fields."""

    def _make(
        title: str = "Standup",
        when: datetime | None = None,
        people: list[str] | None = None,
        tags: list[str] | None = None,
        address: str = "1 Infinite Loop, Cupertino",
        description: str = "",
        **extra: Any,
    ) -> Event:
        return Event(
            title=title,
            description=description,
            people=people or [],
            date=when or datetime(2024, 7, 15, 10, 0, tzinfo=UTC),
            location=Location(address=address, coordinates=[-122.03, 37.33]),
            tags=tags or [],
            **extra,
        )

    return _make


@pytest.fixture  # type: ignore[misc]
def geocoder() -> StubGeocoder:
    """A stub geocoder that resolves every address to Cupertino."""
    return StubGeocoder([CUPERTINO])


@pytest.fixture  # type: ignore[misc]
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        TIMELINEMAP_ENV="test",
        STORE_BACKEND="memory",
        UPLOADS_DIR=tmp_path / "uploads",
        FRONTEND_BUILD_DIR=tmp_path / "build",
        SEED_DEMO_DATA=False,
    )


@pytest.fixture  # type: ignore[misc]
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture  # type: ignore[misc]
def client(
    test_settings: Settings, store: InMemoryEventStore, geocoder: StubGeocoder
) -> Generator[TestClient, None, None]:
    """API client over an in-memory store and the stub geocoder."""
    app = create_app(test_settings, store=store, geocoder=geocoder)  # type: ignore[arg-type]
    with TestClient(app) as c:
        yield c
