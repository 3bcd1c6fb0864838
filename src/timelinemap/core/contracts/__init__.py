"""Pydantic contracts shared by the pipeline, stores and API."""

from __future__ import annotations

from .event import Event, EventSubmission, Location
from .geocode import GeocodeCandidate
from .timeline import Facets, FilterSpec

__all__ = ["Event", "EventSubmission", "Facets", "FilterSpec", "GeocodeCandidate", "Location"]
