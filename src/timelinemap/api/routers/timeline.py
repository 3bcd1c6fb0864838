"""
API Route for the filtered timeline view.

- `GET /api/timeline`: facets over all events, the events visible under the
  given filters, and the events on the selected day.

The view is rebuilt from the store on every request through
:class:`~timelinemap.timeline.filters.TimelineState`.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from timelinemap.api.deps import get_store
from timelinemap.api.schemas import TimelineView
from timelinemap.core.contracts.timeline import FilterSpec
from timelinemap.store.base import EventStore, parse_day
from timelinemap.timeline.filters import TimelineState

router = APIRouter(prefix="/api", tags=["Timeline"])


@router.get("/timeline", response_model=TimelineView, summary="Faceted timeline view")
def timeline_view(
    store: Annotated[EventStore, Depends(get_store)],
    title: Annotated[str, Query(description="Title substring")] = "",
    people: Annotated[str | None, Query(description="Exact person name")] = None,
    tags: Annotated[str | None, Query(description="Exact tag")] = None,
    date: Annotated[str | None, Query(description="Selected day, YYYY-MM-DD")] = None,
) -> TimelineView:
    state = (
        TimelineState()
        .with_events(store.find())
        .with_filters(FilterSpec(title=title, people=people or None, tags=tags or None))
        .select_date(parse_day(date))
    )
    return TimelineView(
        facets=state.facets,
        events=state.visible_events,
        day_events=state.day_events,
    )


__all__ = ["router"]
