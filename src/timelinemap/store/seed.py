"""Demo events inserted into an empty store on first start."""

from __future__ import annotations

from datetime import UTC, datetime

from timelinemap.core.contracts.event import Event, Location
from timelinemap.core.settings import get_logger
from timelinemap.store.base import EventStore

logger = get_logger("timelinemap.store.seed")

DEMO_EVENTS: tuple[Event, ...] = (
    Event(
        title="Team Meeting @ Apple Park",
        description="Weekly sync meeting to discuss project progress and blockers.",
        people=["Alice", "Bob"],
        date=datetime(2024, 7, 15, 10, 0, tzinfo=UTC),
        location=Location(
            address="Apple Park Visitor Center, 10600 N Tantau Ave, Cupertino, CA 95014, USA",
            coordinates=[-122.0099, 37.3328],
        ),
        tags=["work", "planning"],
    ),
    Event(
        title="Project Launch Party @ Eiffel Tower",
        description="Celebrating the successful launch of Project Phoenix!",
        people=["Charlie", "Dana", "Eve"],
        date=datetime(2024, 7, 15, 18, 30, tzinfo=UTC),
        location=Location(
            address="Eiffel Tower, Champ de Mars, 5 Av. Anatole France, 75007 Paris, France",
            coordinates=[2.2945, 48.8584],
        ),
        tags=["celebration", "social", "paris"],
    ),
    Event(
        title="Conference Talk @ Moscone Center",
        description="Presenting on the future of Web APIs at the annual TechConf.",
        people=["Bob"],
        date=datetime(2024, 7, 16, 14, 0, tzinfo=UTC),
        location=Location(
            address="Moscone Center, 747 Howard St, San Francisco, CA 94103, USA",
            coordinates=[-122.4013, 37.7837],
        ),
        tags=["conference", "tech", "sf"],
    ),
    Event(
        title="Central Park Picnic",
        description="Casual get-together in the park. Bring snacks!",
        people=["Alice", "Charlie"],
        date=datetime(2024, 7, 17, 12, 0, tzinfo=UTC),
        location=Location(
            address="Sheep Meadow, Central Park, New York, NY 10024, USA",
            coordinates=[-73.9742, 40.7749],
        ),
        tags=["social", "park", "nyc"],
    ),
)


def seed_if_empty(store: EventStore) -> int:
    """Insert :data:`DEMO_EVENTS` when ``store`` holds no events; return how many."""
    existing = store.count()
    if existing:
        logger.info("Store already contains %d events, skipping seeding.", existing)
        return 0
    inserted = store.insert_many(DEMO_EVENTS)
    logger.info("Seeded store with %d demo events.", len(inserted))
    return len(inserted)


__all__ = ["DEMO_EVENTS", "seed_if_empty"]
