# tests/test_cli.py
"""
Tests for the TimelineMap command-line interface (CLI).

Scope
-----
1.  **Command Registration**: `--help` lists every command.
2.  **Geocoding**: `geocode` and `suggest` against a stub geocoder.
3.  **Store Commands**: `seed` and `timeline` against an in-memory store.
4.  **Error Handling**: non-zero exit codes on upstream failures and bad input.

We use `typer.testing.CliRunner` to invoke the app in-process; the geocoder
and store factories are patched so nothing touches the network or MongoDB.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from conftest import CUPERTINO, StubGeocoder
from typer.testing import CliRunner

from timelinemap.cli import app
from timelinemap.core.errors import GeocoderUnreachable
from timelinemap.store.memory import InMemoryEventStore


@pytest.fixture  # type: ignore[misc]
def runner() -> CliRunner:
    return CliRunner()


def test_cli_help_lists_commands(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0, result.output
    for command in ("serve", "geocode", "suggest", "seed", "timeline"):
        assert command in result.output


def test_geocode_prints_candidates(runner: CliRunner) -> None:
    stub = StubGeocoder([CUPERTINO])
    with patch("timelinemap.cli.GeocoderClient.from_settings", return_value=stub):
        result = runner.invoke(app, ["geocode", "1 Infinite Loop", "--limit", "3"])

    assert result.exit_code == 0, result.output
    assert "-122.03000" in result.output
    assert "37.33000" in result.output
    assert stub.calls == [("1 Infinite Loop", 3)]


def test_geocode_reports_upstream_failure(runner: CliRunner) -> None:
    stub = StubGeocoder(error=GeocoderUnreachable("connection refused"))
    with patch("timelinemap.cli.GeocoderClient.from_settings", return_value=stub):
        result = runner.invoke(app, ["geocode", "Eiffel Tower"])

    assert result.exit_code == 1
    assert "Geocoding Error" in result.output


def test_suggest_only_last_query_reaches_geocoder(runner: CliRunner) -> None:
    stub = StubGeocoder([CUPERTINO])
    with patch("timelinemap.cli.GeocoderClient.from_settings", return_value=stub):
        result = runner.invoke(
            app, ["suggest", "1 I", "1 Infinite", "1 Infinite Loop", "--quiet-window", "0"]
        )

    assert result.exit_code == 0, result.output
    assert "superseded" in result.output
    assert stub.calls == [("1 Infinite Loop", 5)]


def test_seed_is_idempotent(runner: CliRunner) -> None:
    store = InMemoryEventStore()
    with patch("timelinemap.cli.create_store", return_value=store):
        first = runner.invoke(app, ["seed"])
        second = runner.invoke(app, ["seed"])

    assert first.exit_code == 0 and second.exit_code == 0
    assert "Seeded 4 demo events" in first.output
    assert "nothing seeded" in second.output
    assert store.count() == 4


def test_timeline_with_demo_data_and_filters(runner: CliRunner) -> None:
    with patch("timelinemap.cli.create_store", return_value=InMemoryEventStore()):
        result = runner.invoke(app, ["timeline", "--demo", "--person", "Eve"])

    assert result.exit_code == 0, result.output
    assert "People: Alice, Bob, Charlie, Dana, Eve" in result.output
    assert "Matching events (1)" in result.output
    assert "Select a date" in result.output


def test_timeline_selected_day(runner: CliRunner) -> None:
    with patch("timelinemap.cli.create_store", return_value=InMemoryEventStore()):
        result = runner.invoke(app, ["timeline", "--demo", "--date", "2024-07-16"])

    assert result.exit_code == 0, result.output
    assert "Matching events (1)" in result.output
    assert "Events on Jul 16, 2024" in result.output


def test_timeline_rejects_bad_date(runner: CliRunner) -> None:
    with patch("timelinemap.cli.create_store", return_value=InMemoryEventStore()):
        result = runner.invoke(app, ["timeline", "--date", "16/07/2024"])
    assert result.exit_code == 2
