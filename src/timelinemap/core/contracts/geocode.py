"""GeocodeCandidate: one ranked match returned by the address-search service."""

from __future__ import annotations

from pydantic import BaseModel, Field


class GeocodeCandidate(BaseModel):
    """A single upstream match, already converted to numeric coordinates."""

    display_name: str = Field(description="Human-readable name from the upstream service")
    longitude: float = Field(ge=-180.0, le=180.0)
    latitude: float = Field(ge=-90.0, le=90.0)
    place_id: str | None = Field(default=None, description="Upstream identifier, if any")

    @property
    def coordinates(self) -> list[float]:
        """Return the `[longitude, latitude]` pair stored on events."""
        return [self.longitude, self.latitude]


__all__ = ["GeocodeCandidate"]
