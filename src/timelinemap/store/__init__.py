"""Event stores: protocol, in-memory backend, MongoDB backend, demo seeding."""

from __future__ import annotations

from timelinemap.core.settings import Settings, load_settings

from .base import EventStore
from .memory import InMemoryEventStore
from .seed import seed_if_empty


def create_store(settings: Settings | None = None) -> EventStore:
    """Build the backend selected by ``STORE_BACKEND``."""
    cfg = settings or load_settings()
    if cfg.store_backend == "mongo":
        from .mongo import MongoEventStore

        return MongoEventStore.from_settings(cfg)
    return InMemoryEventStore()


__all__ = ["EventStore", "InMemoryEventStore", "create_store", "seed_if_empty"]
