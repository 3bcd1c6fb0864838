"""Filter specification and facet contracts for the timeline view."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class FilterSpec(BaseModel):
    """Ephemeral filter selection: title substring plus exact person/tag/day."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="Case-insensitive title substring")
    people: str | None = Field(default=None, description="Exact person name")
    tags: str | None = Field(default=None, description="Exact tag")
    date: dt.date | None = Field(default=None, description="Calendar day (UTC)")

    def is_empty(self) -> bool:
        return not self.title and not self.people and not self.tags and self.date is None


class Facets(BaseModel):
    """Distinct values extracted from an event set to populate filters."""

    people: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    dates: list[dt.date] = Field(default_factory=list)


__all__ = ["Facets", "FilterSpec"]
