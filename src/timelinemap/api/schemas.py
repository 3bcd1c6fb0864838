"""Response schemas for the TimelineMap HTTP API.

Request bodies are multipart forms (see `routers/events.py`), so only
responses are modelled here. Events themselves reuse
:class:`timelinemap.core.contracts.event.Event`, serialized with ``_id``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from timelinemap.core.contracts.event import Event
from timelinemap.core.contracts.timeline import Facets


class ErrorResponse(BaseModel):
    """Structured error body; never carries a traceback."""

    message: str
    error: str | None = Field(default=None, description="Short machine-readable reason")
    errors: list[str] | None = Field(default=None, description="Offending field names")


class HealthResponse(BaseModel):
    status: str = "ok"
    environment: str
    version: str


class TimelineView(BaseModel):
    """Facets plus the filtered map events and the selected day's events."""

    facets: Facets
    events: list[Event]
    day_events: list[Event]


__all__ = ["ErrorResponse", "HealthResponse", "TimelineView"]
