"""
Event ingestion pipeline: from a raw form submission to a stored, geocoded event.

Flow Overview
-------------
1. **Required fields**: ``title``, ``date`` and ``address`` must be present and
   non-blank; ``date`` must be ISO-8601. Otherwise :class:`ValidationError`
   is raised before anything else happens.
2. **Lists**: ``people`` and ``tags`` are split on commas, trimmed, and empty
   entries dropped. Order and duplicates are preserved.
3. **Uploads**: type/size/count caps are checked (:class:`UploadRejected`).
4. **Geocoding**: the address is resolved with a single-result lookup. Any
   geocoder failure, including "no match", raises :class:`GeocodingFailed`.
   No file has been written at this point.
5. **Images**: accepted uploads are written under the uploads root.
6. **Persist**: the :class:`Event` is built and inserted. If that fails, the
   files written in step 5 are removed, so a failed request leaves nothing
   behind.

Only one creation path exists; events are never updated or deleted.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

import pydantic

from timelinemap.core.contracts.event import Event, EventSubmission, as_utc
from timelinemap.core.contracts.geocode import GeocodeCandidate
from timelinemap.core.errors import (
    GeocoderError,
    GeocodingFailed,
    ValidationError,
)
from timelinemap.core.settings import get_logger
from timelinemap.ingestion.uploads import ImageUpload, UploadStorage, check_uploads
from timelinemap.store.base import EventStore

logger = get_logger("timelinemap.ingestion")


class SupportsLocate(Protocol):
    def locate(self, query: str) -> GeocodeCandidate: ...


def split_list(raw: str | None) -> list[str]:
    """Split comma-separated text into trimmed, non-empty entries (order kept)."""
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def parse_event_date(raw: str) -> datetime:
    """Parse a submitted ISO-8601 date/datetime; naive values are taken as UTC."""
    try:
        return as_utc(datetime.fromisoformat(raw.strip()))
    except ValueError as exc:
        raise ValidationError(["date"], "Event date is invalid.") from exc


def _error_fields(exc: pydantic.ValidationError) -> list[str]:
    fields: list[str] = []
    for error in exc.errors():
        name = ".".join(str(part) for part in error["loc"])
        if name not in fields:
            fields.append(name)
    return fields


class EventIngestionPipeline:
    """Validate, geocode, attach images, and store a submitted event."""

    def __init__(
        self,
        store: EventStore,
        geocoder: SupportsLocate,
        uploads: UploadStorage,
    ) -> None:
        self.store = store
        self.geocoder = geocoder
        self.uploads = uploads

    def create(
        self,
        submission: EventSubmission,
        images: Sequence[ImageUpload] = (),
    ) -> Event:
        """Run the full ingestion flow and return the stored event.

        Raises
        ------
        ValidationError
            Required fields missing/blank, unparsable date, or the assembled
            event failed model validation.
        UploadRejected
            A file is not an image, is over 5 MB, or more than 5 were sent.
        GeocodingFailed
            The address produced no usable coordinates.
        StorageError
            The store rejected the write.
        """
        # 1. Required fields
        missing = submission.missing_fields()
        if missing:
            logger.info("Validation failed: missing required fields %s", missing)
            raise ValidationError(missing, "Title, date, and address are required fields.")

        title = submission.title or ""
        address = submission.address or ""
        when = parse_event_date(submission.date or "")

        # 2. Lists
        people = split_list(submission.people)
        tags = split_list(submission.tags)

        # 3. Uploads
        check_uploads(images)

        # 4. Geocoding
        candidate = self._geocode(address)

        # 5. Images
        stored_images = self.uploads.save_all(images)

        # 6. Persist
        try:
            event = Event(
                title=title,
                description=submission.description or "",
                people=people,
                date=when,
                location={"address": address, "coordinates": candidate.coordinates},
                tags=tags,
                images=[image.public_path for image in stored_images],
            )
        except pydantic.ValidationError as exc:
            self.uploads.discard(stored_images)
            raise ValidationError(_error_fields(exc)) from exc

        try:
            saved = self.store.insert(event)
        except Exception:
            self.uploads.discard(stored_images)
            raise

        logger.info("Event saved successfully: %s", saved.id)
        return saved

    def _geocode(self, address: str) -> GeocodeCandidate:
        logger.info("Geocoding address: %r", address)
        try:
            candidate = self.geocoder.locate(address)
        except GeocoderError as exc:
            logger.warning("Geocoding failed (%s): %s", exc.reason, exc)
            raise GeocodingFailed(exc.reason, str(exc)) from exc
        logger.info("Geocoding successful: %s", candidate.display_name or candidate.coordinates)
        return candidate


__all__ = ["EventIngestionPipeline", "parse_event_date", "split_list"]
