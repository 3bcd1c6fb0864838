"""
API Routes for Events.

Endpoints
---------
- `POST /api/events`: Create an event from a multipart form (geocoded, with images).
- `GET /api/events`: List events, optionally by free-text `search` and/or `date`.

Both handlers are plain `def` functions: FastAPI runs them in its threadpool,
so the blocking geocoder round-trip only holds up its own request.
Errors raised by the pipeline or store are turned into JSON by the exception
handlers registered in `timelinemap.api.app`.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from timelinemap.api.deps import get_pipeline, get_store
from timelinemap.api.schemas import ErrorResponse
from timelinemap.core.contracts.event import Event, EventSubmission
from timelinemap.core.settings import get_logger
from timelinemap.ingestion.pipeline import EventIngestionPipeline
from timelinemap.ingestion.uploads import MAX_FILE_BYTES, ImageUpload
from timelinemap.store.base import EventStore

router = APIRouter(prefix="/api", tags=["Events"])

logger = get_logger("timelinemap.api.events")


def _read_upload(upload: UploadFile) -> ImageUpload:
    # One byte past the cap is enough to detect an oversized file.
    data = upload.file.read(MAX_FILE_BYTES + 1)
    return ImageUpload(
        filename=upload.filename or "",
        content_type=upload.content_type or "",
        data=data,
    )


@router.post(
    "/events",
    response_model=Event,
    status_code=status.HTTP_201_CREATED,
    summary="Create a geocoded event",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def create_event(
    pipeline: Annotated[EventIngestionPipeline, Depends(get_pipeline)],
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    people: Annotated[str | None, Form()] = None,
    date: Annotated[str | None, Form()] = None,
    address: Annotated[str | None, Form()] = None,
    tags: Annotated[str | None, Form()] = None,
    images: Annotated[list[UploadFile] | None, File()] = None,
) -> Event:
    """
    Validate the form, geocode `address`, store up to 5 images, persist the event.

    `people` and `tags` are comma-separated. The response is the stored event,
    including its generated `_id` and `[longitude, latitude]` coordinates.
    """
    logger.info("Received POST /api/events request.")
    submission = EventSubmission(
        title=title,
        description=description,
        people=people,
        date=date,
        address=address,
        tags=tags,
    )
    uploads = [_read_upload(upload) for upload in images or []]
    return pipeline.create(submission, uploads)


@router.get(
    "/events",
    response_model=list[Event],
    summary="List events (newest first)",
    responses={500: {"model": ErrorResponse}},
)
def list_events(
    store: Annotated[EventStore, Depends(get_store)],
    search: Annotated[str | None, Query(description="Case-insensitive text search")] = None,
    date: Annotated[str | None, Query(description="Day filter, YYYY-MM-DD (UTC)")] = None,
) -> list[Event]:
    """Return events matching `search` and/or `date`, sorted by date descending."""
    logger.info("Received GET /api/events request (search=%r, date=%r)", search, date)
    events = store.find(search=search, date=date)
    logger.info("Found %d events.", len(events))
    return events


__all__ = ["router"]
