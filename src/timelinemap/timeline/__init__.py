"""Timeline derivations: facets and multi-criteria filtering."""

from __future__ import annotations

from .facets import derive_facets
from .filters import TimelineState, apply_filters, events_on_date

__all__ = ["TimelineState", "apply_filters", "derive_facets", "events_on_date"]
