# -----------------------------------------------------------------------------
# This module provides a small, synchronous client for a Nominatim-compatible
# address-search service:
#   - reads the base URL, identification string and timeout from settings
#   - exposes `resolve()` for ranked suggestions and `locate()` for the single
#     authoritative match used when an event is submitted
#
# The implementation uses only the Python standard library (`urllib.request`).
# Unit tests are expected to *mock* the internal `_get()` method so that no
# real HTTP calls are made during CI.
#
# Upstream contract
# -----------------
#   GET {base_url}/search?q=...&format=json&limit=N&addressdetails=1
#   -> [{"display_name": "...", "lat": "37.33", "lon": "-122.03", "place_id": 1}]
#
# Nominatim's usage policy requires a distinguishing User-Agent on every call.
# -----------------------------------------------------------------------------
from __future__ import annotations

import http.client
import json
import math
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from timelinemap.core.contracts.geocode import GeocodeCandidate
from timelinemap.core.errors import (
    GeocoderInvalidResponse,
    GeocoderNotFound,
    GeocoderUnreachable,
)
from timelinemap.core.settings import Settings, get_logger, load_settings

SUGGESTION_LIMIT = 5
SUBMISSION_LIMIT = 1

logger = get_logger("timelinemap.geocoding")


@dataclass(slots=True)
class GeocoderClient:
    """Address-search client returning ranked `[lon, lat]` candidates.

    Parameters
    ----------
    base_url:
        Root of the upstream service, e.g. ``"https://nominatim.openstreetmap.org"``.
    user_agent:
        Caller identification string sent as the ``User-Agent`` header.
    timeout_seconds:
        Network timeout for each request. A timeout fails that request with
        :class:`GeocoderUnreachable`; there is no retry.
    """

    base_url: str
    user_agent: str
    timeout_seconds: float = 10.0

    # --------------------------------------------------------------------- #
    # Constructors
    # --------------------------------------------------------------------- #
    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> GeocoderClient:
        """Build a client from ``GEOCODER_*`` settings."""
        cfg = settings or load_settings()
        return cls(
            base_url=cfg.geocoder_base_url,
            user_agent=cfg.geocoder_user_agent,
            timeout_seconds=cfg.geocoder_timeout_seconds,
        )

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #
    def resolve(self, query: str, *, limit: int = SUGGESTION_LIMIT) -> list[GeocodeCandidate]:
        """Return up to ``limit`` candidates for ``query`` in upstream rank order.

        An empty list means the upstream service knows no match; that is a
        valid result, not an error.

        Raises
        ------
        ValueError
            If ``query`` is blank or ``limit`` is not positive.
        GeocoderUnreachable
            On network failure, timeout, or a non-2xx HTTP status.
        GeocoderInvalidResponse
            If the body is not a list of entries with numeric ``lat``/``lon``.
        """
        text = query.strip()
        if not text:
            raise ValueError("Geocoding query must be non-empty.")
        if limit < 1:
            raise ValueError("limit must be >= 1")

        params = {"q": text, "format": "json", "limit": str(limit), "addressdetails": "1"}
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        url = self.base_url.rstrip("/") + "/search"

        logger.debug("Geocoding %r (limit=%d)", text, limit)
        payload = self._get(url=url, headers=headers, params=params)

        if not isinstance(payload, list):
            raise GeocoderInvalidResponse("Expected a JSON array of candidates.")

        candidates = [self._parse_candidate(entry) for entry in payload[:limit]]
        logger.debug("Geocoder returned %d candidate(s) for %r", len(candidates), text)
        return candidates

    def locate(self, query: str) -> GeocodeCandidate:
        """Return the single best match for ``query`` or raise :class:`GeocoderNotFound`."""
        candidates = self.resolve(query, limit=SUBMISSION_LIMIT)
        if not candidates:
            raise GeocoderNotFound(f"No results found for {query!r}.")
        return candidates[0]

    # --------------------------------------------------------------------- #
    # Internal helpers (test seams)
    # --------------------------------------------------------------------- #
    def _get(
        self,
        *,
        url: str,
        headers: Mapping[str, str],
        params: Mapping[str, str],
    ) -> Any:
        """Perform an HTTP GET request and decode the JSON response.

        This is the only place that touches the network; tests patch it at the
        class level to return canned upstream payloads.
        """
        full_url = f"{url}?{urllib.parse.urlencode(params)}"
        request = urllib.request.Request(url=full_url, headers=dict(headers), method="GET")

        try:
            with urllib.request.urlopen(request, timeout=self.timeout_seconds) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as exc:
            raise GeocoderUnreachable(f"Geocoder HTTP error {exc.code}: {exc.reason}") from exc
        except urllib.error.URLError as exc:
            raise GeocoderUnreachable(f"Geocoder network error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise GeocoderUnreachable(
                f"Geocoder timed out after {self.timeout_seconds:.1f}s"
            ) from exc
        except (OSError, http.client.HTTPException) as exc:
            # dropped connections and malformed status lines are not wrapped by urllib
            raise GeocoderUnreachable(f"Geocoder connection failed: {exc!r}") from exc

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise GeocoderInvalidResponse("Failed to decode geocoder response as JSON") from exc

    @staticmethod
    def _parse_candidate(entry: Any) -> GeocodeCandidate:
        """Convert one upstream entry (string ``lat``/``lon``) to a candidate."""
        if not isinstance(entry, Mapping):
            raise GeocoderInvalidResponse("Candidate entry is not an object.")

        try:
            longitude = float(entry["lon"])
            latitude = float(entry["lat"])
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocoderInvalidResponse(
                "Invalid coordinates received from geocoding service."
            ) from exc

        if not (math.isfinite(longitude) and math.isfinite(latitude)):
            raise GeocoderInvalidResponse("Geocoder returned non-finite coordinates.")
        if not (-180.0 <= longitude <= 180.0 and -90.0 <= latitude <= 90.0):
            raise GeocoderInvalidResponse("Geocoder returned out-of-range coordinates.")

        place_id = entry.get("place_id")
        return GeocodeCandidate(
            display_name=str(entry.get("display_name") or ""),
            longitude=longitude,
            latitude=latitude,
            place_id=str(place_id) if place_id is not None else None,
        )


__all__ = ["GeocoderClient", "SUBMISSION_LIMIT", "SUGGESTION_LIMIT"]
