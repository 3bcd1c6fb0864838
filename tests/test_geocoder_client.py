"""Tests for `GeocoderClient`; the network seam `_get` is always patched."""

from __future__ import annotations

import http.client
import urllib.error
from typing import Any
from unittest.mock import patch

import pytest

from timelinemap.core.errors import (
    GeocoderInvalidResponse,
    GeocoderNotFound,
    GeocoderUnreachable,
)
from timelinemap.core.settings import Settings
from timelinemap.geocoding.client import GeocoderClient

NOMINATIM_ROW = {
    "place_id": 297945523,
    "display_name": "1, Infinite Loop, Cupertino, Santa Clara County, California, USA",
    "lat": "37.33",
    "lon": "-122.03",
    "address": {"city": "Cupertino"},
}


def _client() -> GeocoderClient:
    return GeocoderClient(
        base_url="https://geo.example.com/",
        user_agent="TimelineMapTests/1.0 (tests@example.com)",
        timeout_seconds=3.0,
    )


def test_from_settings_reads_geocoder_fields() -> None:
    cfg = Settings(
        GEOCODER_BASE_URL="https://nominatim.local",
        GEOCODER_USER_AGENT="MyApp/2.0",
        GEOCODER_TIMEOUT_SECONDS=4.5,
    )
    client = GeocoderClient.from_settings(cfg)

    assert client.base_url == "https://nominatim.local"
    assert client.user_agent == "MyApp/2.0"
    assert client.timeout_seconds == 4.5


def test_resolve_sends_search_params_and_identification(monkeypatch: Any) -> None:
    captured: dict[str, Any] = {}

    def fake_get(
        self: GeocoderClient,
        *,
        url: str,
        headers: dict[str, str],
        params: dict[str, str],
    ) -> Any:
        captured.update(url=url, headers=headers, params=params)
        return [NOMINATIM_ROW]

    monkeypatch.setattr(GeocoderClient, "_get", fake_get)

    results = _client().resolve("  1 Infinite Loop, Cupertino ")

    assert captured["url"] == "https://geo.example.com/search"
    assert captured["params"] == {
        "q": "1 Infinite Loop, Cupertino",
        "format": "json",
        "limit": "5",
        "addressdetails": "1",
    }
    assert captured["headers"]["User-Agent"] == "TimelineMapTests/1.0 (tests@example.com)"

    assert len(results) == 1
    assert results[0].coordinates == [-122.03, 37.33]
    assert results[0].place_id == "297945523"


def test_resolve_preserves_rank_and_caps_at_limit() -> None:
    rows = [dict(NOMINATIM_ROW, display_name=f"match {i}", place_id=i) for i in range(8)]
    with patch.object(GeocoderClient, "_get", return_value=rows):
        results = _client().resolve("Main Street", limit=5)

    assert [r.display_name for r in results] == [f"match {i}" for i in range(5)]


def test_resolve_returns_empty_list_for_zero_candidates() -> None:
    with patch.object(GeocoderClient, "_get", return_value=[]):
        assert _client().resolve("nowhere at all") == []


def test_locate_uses_limit_one_and_signals_not_found() -> None:
    with patch.object(GeocoderClient, "_get", return_value=[]) as mock_get:
        with pytest.raises(GeocoderNotFound):
            _client().locate("nowhere at all")

    assert mock_get.call_args.kwargs["params"]["limit"] == "1"


def test_locate_returns_first_candidate() -> None:
    with patch.object(GeocoderClient, "_get", return_value=[NOMINATIM_ROW]):
        candidate = _client().locate("1 Infinite Loop")
    assert candidate.longitude == -122.03
    assert candidate.latitude == 37.33


@pytest.mark.parametrize(
    "payload",
    [
        {"error": "bad request"},
        [{"display_name": "no coords"}],
        [{"lat": "north", "lon": "-122.03"}],
        [{"lat": "nan", "lon": "-122.03"}],
        [{"lat": "95.0", "lon": "0"}],
        ["not an object"],
    ],
)
def test_malformed_payloads_signal_invalid_response(payload: Any) -> None:
    with patch.object(GeocoderClient, "_get", return_value=payload):
        with pytest.raises(GeocoderInvalidResponse):
            _client().resolve("1 Infinite Loop")


def test_blank_query_is_rejected_without_network() -> None:
    with patch.object(GeocoderClient, "_get") as mock_get:
        with pytest.raises(ValueError):
            _client().resolve("   ")
    mock_get.assert_not_called()


def test_network_failure_signals_unreachable() -> None:
    err = urllib.error.URLError("Name or service not known")
    with patch("urllib.request.urlopen", side_effect=err):
        with pytest.raises(GeocoderUnreachable):
            _client().resolve("1 Infinite Loop")


def test_timeout_signals_unreachable() -> None:
    with patch("urllib.request.urlopen", side_effect=TimeoutError("timed out")) as mock_open:
        with pytest.raises(GeocoderUnreachable, match="timed out"):
            _client().resolve("1 Infinite Loop")

    assert mock_open.call_args.kwargs["timeout"] == 3.0


@pytest.mark.parametrize(
    "error",
    [
        ConnectionResetError("peer reset"),
        http.client.RemoteDisconnected("Remote end closed connection without response"),
        http.client.BadStatusLine("garbage"),
        http.client.IncompleteRead(b"[{"),
    ],
)
def test_dropped_connection_signals_unreachable(error: Exception) -> None:
    with patch("urllib.request.urlopen", side_effect=error):
        with pytest.raises(GeocoderUnreachable, match="connection failed"):
            _client().resolve("1 Infinite Loop")
