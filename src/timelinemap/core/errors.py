"""Error taxonomy surfaced by event ingestion, geocoding and storage.

Two families live here:

- Geocoder signals (`GeocoderError` and subclasses) raised by
  :class:`~timelinemap.geocoding.client.GeocoderClient`. They describe what went
  wrong talking to the upstream address-search service.
- Ingestion errors (`TimelineMapError` and subclasses) raised by the ingestion
  pipeline and stores. The HTTP layer maps each of them to a structured JSON
  response; none of them carries a traceback to the caller.
"""

from __future__ import annotations

from collections.abc import Sequence


# ---- Geocoder signals ---------------------------------------------------------


class GeocoderError(Exception):
    """Base class for failures talking to the upstream geocoder."""

    reason: str = "geocoder_error"


class GeocoderUnreachable(GeocoderError):
    """Network failure, timeout, or non-2xx status from the upstream service."""

    reason = "unreachable"


class GeocoderNotFound(GeocoderError):
    """The upstream service returned zero candidates for the query."""

    reason = "not_found"


class GeocoderInvalidResponse(GeocoderError):
    """The upstream payload could not be read as a list of coordinates."""

    reason = "invalid_response"


# ---- Ingestion / storage errors ----------------------------------------------


class TimelineMapError(Exception):
    """Base class for errors reported to API callers."""

    message: str = "Server error."


class ValidationError(TimelineMapError):
    """Missing or malformed required input; the caller must resubmit."""

    def __init__(self, fields: Sequence[str], message: str | None = None) -> None:
        self.fields: list[str] = list(fields)
        self.message = message or "Validation Error"
        super().__init__(f"{self.message}: {', '.join(self.fields)}")


class GeocodingFailed(TimelineMapError):
    """The address could not be resolved to coordinates."""

    def __init__(self, reason: str, detail: str = "") -> None:
        self.reason = reason
        self.detail = detail
        if reason == GeocoderNotFound.reason:
            self.message = (
                "Could not geocode address. Please provide a valid address or "
                "check the geocoding service status."
            )
        else:
            self.message = "Failed to verify address location. Please try again later."
        super().__init__(f"{reason}: {detail}" if detail else reason)


class UploadRejected(TimelineMapError):
    """An uploaded file is not an image or breaks the size/count caps."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        self.message = f"File upload error: {reason}"
        super().__init__(self.message)


class StorageError(TimelineMapError):
    """The persistence layer rejected a read or write."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        self.message = "Storage error."
        super().__init__(detail)


__all__ = [
    "GeocoderError",
    "GeocoderInvalidResponse",
    "GeocoderNotFound",
    "GeocoderUnreachable",
    "GeocodingFailed",
    "StorageError",
    "TimelineMapError",
    "UploadRejected",
    "ValidationError",
]
