"""Event contracts: the stored record and the raw submission it is built from.

`Event` mirrors the JSON documents served by `/api/events`:

.. code-block:: json

    {
      "_id": "66950e1c9f1b2c0001a1b2c3",
      "title": "Team Meeting",
      "description": "",
      "people": ["Alice", "Bob"],
      "date": "2024-07-15T10:00:00Z",
      "location": {"address": "...", "coordinates": [-122.0099, 37.3328]},
      "tags": ["work"],
      "images": ["/uploads/1721037600000-photo.jpg"]
    }

Coordinates are always `[longitude, latitude]` and are validated whenever an
`Event` is constructed, so an invalid pair never reaches a store.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from datetime import date as _date

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUIRED_SUBMISSION_FIELDS: tuple[str, ...] = ("title", "date", "address")


def as_utc(value: datetime) -> datetime:
    """Return `value` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Location(BaseModel):
    """Original address text plus the geocoded `[longitude, latitude]` pair."""

    address: str = Field(min_length=1, description="Address exactly as submitted")
    coordinates: list[float] = Field(description="[longitude, latitude]")

    @field_validator("coordinates")
    @classmethod
    def _check_pair(cls, v: list[float]) -> list[float]:
        if len(v) != 2:
            raise ValueError("Coordinates must be an array of two numbers [longitude, latitude].")
        lon, lat = v
        if not (math.isfinite(lon) and math.isfinite(lat)):
            raise ValueError("Coordinates must be finite numbers.")
        if not -180.0 <= lon <= 180.0:
            raise ValueError("Longitude must be within [-180, 180].")
        if not -90.0 <= lat <= 90.0:
            raise ValueError("Latitude must be within [-90, 90].")
        return v

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]


class Event(BaseModel):
    """A dated, geocoded event as persisted by an event store."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, alias="_id", description="Store-assigned id")
    title: str = Field(min_length=1)
    description: str = Field(default="")
    people: list[str] = Field(default_factory=list)
    date: datetime
    location: Location
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Event title is required.")
        return v

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, v: datetime) -> datetime:
        # stored dates are truncated to BSON millisecond precision
        v = as_utc(v)
        return v.replace(microsecond=v.microsecond // 1000 * 1000)

    @field_validator("images")
    @classmethod
    def _images_not_blank(cls, v: list[str]) -> list[str]:
        if any(not path for path in v):
            raise ValueError("Image references must be non-empty paths.")
        return v

    @property
    def day(self) -> _date:
        """Calendar day of the event (start-of-day truncation in UTC)."""
        return self.date.date()


class EventSubmission(BaseModel):
    """Loosely-typed form fields as received from `POST /api/events`.

    Every field is optional here; `missing_fields()` enumerates which required
    ones are absent so the pipeline can reject the payload before doing any work.
    `people` and `tags` are comma-separated strings.
    """

    title: str | None = None
    description: str | None = None
    people: str | None = None
    date: str | None = None
    address: str | None = None
    tags: str | None = None

    def missing_fields(self) -> list[str]:
        """Return required field names that are absent or blank, in a stable order."""
        missing: list[str] = []
        for name in REQUIRED_SUBMISSION_FIELDS:
            value = getattr(self, name)
            if value is None or not value.strip():
                missing.append(name)
        return missing


__all__ = ["Event", "EventSubmission", "Location", "REQUIRED_SUBMISSION_FIELDS", "as_utc"]
