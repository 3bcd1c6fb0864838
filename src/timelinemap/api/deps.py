"""FastAPI dependency accessors for objects wired up by `create_app`."""

from __future__ import annotations

from fastapi import Request

from timelinemap.geocoding.client import GeocoderClient
from timelinemap.ingestion.pipeline import EventIngestionPipeline
from timelinemap.store.base import EventStore


def get_store(request: Request) -> EventStore:
    return request.app.state.store  # type: ignore[no-any-return]


def get_geocoder(request: Request) -> GeocoderClient:
    return request.app.state.geocoder  # type: ignore[no-any-return]


def get_pipeline(request: Request) -> EventIngestionPipeline:
    return request.app.state.pipeline  # type: ignore[no-any-return]


__all__ = ["get_geocoder", "get_pipeline", "get_store"]
