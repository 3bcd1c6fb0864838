"""MongoDB-backed event store.

Documents mirror the event JSON minus the string id:

    {_id: ObjectId, title, description, people, date: ISODate,
     location: {address, coordinates: [lon, lat]}, tags, images}

`location.coordinates` carries a ``2dsphere`` index so geospatial queries can
be added without a migration. The client is created with ``tz_aware=True`` so
dates come back as aware UTC datetimes.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date
from typing import Any

from pymongo import DESCENDING, GEOSPHERE, MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from timelinemap.core.contracts.event import Event
from timelinemap.core.errors import StorageError
from timelinemap.core.settings import Settings, get_logger, load_settings
from timelinemap.store.base import day_bounds, parse_day

COLLECTION_NAME = "events"

logger = get_logger("timelinemap.store.mongo")

_client: MongoClient[dict[str, Any]] | None = None


def get_mongo_client(uri: str) -> MongoClient[dict[str, Any]]:
    """Return a process-wide :class:`pymongo.MongoClient` for ``uri``."""
    global _client
    if _client is None:
        _client = MongoClient(uri, tz_aware=True, serverSelectionTimeoutMS=5000)
    return _client


def build_query(search: str | None, day: date | None) -> dict[str, Any]:
    """Translate the search/day filters into a MongoDB query document."""
    query: dict[str, Any] = {}
    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        query["$or"] = [
            {"title": pattern},
            {"description": pattern},
            {"people": pattern},
            {"tags": pattern},
            {"location.address": pattern},
        ]
    if day is not None:
        start, end = day_bounds(day)
        query["date"] = {"$gte": start, "$lte": end}
    return query


def to_document(event: Event) -> dict[str, Any]:
    return event.model_dump(mode="python", exclude={"id"})


def from_document(doc: dict[str, Any]) -> Event:
    payload = dict(doc)
    payload["_id"] = str(payload["_id"])
    return Event.model_validate(payload)


class MongoEventStore:
    """Event store persisting to a MongoDB collection."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        self._collection = collection

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> MongoEventStore:
        cfg = settings or load_settings()
        client = get_mongo_client(cfg.mongo_uri)
        store = cls(client[cfg.mongo_database][COLLECTION_NAME])
        store.ensure_indexes()
        return store

    def ensure_indexes(self) -> None:
        try:
            self._collection.create_index([("location.coordinates", GEOSPHERE)])
            self._collection.create_index([("date", DESCENDING)])
        except PyMongoError as exc:
            raise StorageError(f"Failed to create indexes: {exc}") from exc

    def insert(self, event: Event) -> Event:
        try:
            result = self._collection.insert_one(to_document(event))
        except PyMongoError as exc:
            raise StorageError(f"Failed to store event: {exc}") from exc
        logger.info("Stored event to MongoDB with _id=%s", result.inserted_id)
        return event.model_copy(update={"id": str(result.inserted_id)}, deep=True)

    def insert_many(self, events: Iterable[Event]) -> list[Event]:
        batch = list(events)
        if not batch:
            return []
        try:
            result = self._collection.insert_many([to_document(e) for e in batch])
        except PyMongoError as exc:
            raise StorageError(f"Failed to store events: {exc}") from exc
        return [
            event.model_copy(update={"id": str(oid)}, deep=True)
            for event, oid in zip(batch, result.inserted_ids, strict=True)
        ]

    def find(self, search: str | None = None, date: str | None = None) -> list[Event]:
        query = build_query(search, parse_day(date))
        logger.debug("Executing DB query: %s", query)
        try:
            docs = list(self._collection.find(query).sort("date", DESCENDING))
        except PyMongoError as exc:
            raise StorageError(f"Failed to query events: {exc}") from exc
        return [from_document(doc) for doc in docs]

    def count(self) -> int:
        try:
            return self._collection.count_documents({})
        except PyMongoError as exc:
            raise StorageError(f"Failed to count events: {exc}") from exc


__all__ = ["MongoEventStore", "build_query", "from_document", "get_mongo_client", "to_document"]
