"""
API Route for address suggestions.

- `GET /api/geocode?q=...`: up to 5 ranked candidates for a partial address.

Queries shorter than three characters return an empty list without contacting
the upstream service. Debouncing belongs to the caller; this endpoint answers
each request it receives.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from timelinemap.api.deps import get_geocoder
from timelinemap.api.schemas import ErrorResponse
from timelinemap.core.contracts.geocode import GeocodeCandidate
from timelinemap.geocoding.client import SUGGESTION_LIMIT, GeocoderClient
from timelinemap.geocoding.suggest import MIN_QUERY_CHARS

router = APIRouter(prefix="/api", tags=["Geocoding"])


@router.get(
    "/geocode",
    response_model=list[GeocodeCandidate],
    summary="Suggest locations for a partial address",
    responses={502: {"model": ErrorResponse}},
)
def suggest_addresses(
    geocoder: Annotated[GeocoderClient, Depends(get_geocoder)],
    q: Annotated[str, Query(description="Partial address text")] = "",
) -> list[GeocodeCandidate]:
    if len(q.strip()) < MIN_QUERY_CHARS:
        return []
    return geocoder.resolve(q, limit=SUGGESTION_LIMIT)


__all__ = ["router"]
