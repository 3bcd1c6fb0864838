"""Geocoding: upstream address-search client and debounced suggestions."""

from __future__ import annotations

from .client import SUBMISSION_LIMIT, SUGGESTION_LIMIT, GeocoderClient
from .suggest import AddressSuggester

__all__ = ["AddressSuggester", "GeocoderClient", "SUBMISSION_LIMIT", "SUGGESTION_LIMIT"]
