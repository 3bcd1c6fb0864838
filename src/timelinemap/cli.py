# src/timelinemap/cli.py
"""
TimelineMap Command Line Interface (CLI).

This module implements the operator-facing terminal interface using `typer`
and `rich`.

Features
--------
- **serve**: Run the HTTP API with uvicorn.
- **geocode**: Look up an address against the configured geocoder.
- **suggest**: Replay a sequence of keystroke queries through the debounced
  suggester and show which suggestions survive.
- **seed**: Insert the demo events into an empty store.
- **timeline**: Print facets, filtered events and a selected day's events.

Usage
-----
    $ timelinemap geocode "1 Infinite Loop, Cupertino"
    $ timelinemap suggest "1 In" "1 Infin" "1 Infinite Loop"
    $ timelinemap timeline --person Alice --date 2024-07-15
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from timelinemap.core.contracts.event import Event
from timelinemap.core.contracts.geocode import GeocodeCandidate
from timelinemap.core.contracts.timeline import FilterSpec
from timelinemap.core.errors import GeocoderError, StorageError
from timelinemap.core.settings import load_settings
from timelinemap.geocoding.client import SUGGESTION_LIMIT, GeocoderClient
from timelinemap.geocoding.suggest import AddressSuggester
from timelinemap.store import create_store, seed_if_empty
from timelinemap.timeline.filters import TimelineState

# Ensure env vars (like MONGO_URI) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="TimelineMap: geocoded events on a map and a date timeline.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers: Rendering
# --------------------------------------------------------------------------- #


def _render_candidates(candidates: list[GeocodeCandidate], title: str) -> None:
    if not candidates:
        console.print("[yellow]No matching locations.[/yellow]")
        return
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Location")
    table.add_column("Longitude", justify="right")
    table.add_column("Latitude", justify="right")
    for rank, candidate in enumerate(candidates, start=1):
        table.add_row(
            str(rank),
            candidate.display_name,
            f"{candidate.longitude:.5f}",
            f"{candidate.latitude:.5f}",
        )
    console.print(table)


def _render_events(events: list[Event], title: str) -> None:
    table = Table(title=title)
    table.add_column("Date (UTC)")
    table.add_column("Title", style="bold")
    table.add_column("People")
    table.add_column("Tags")
    table.add_column("Address", overflow="fold")
    for event in events:
        table.add_row(
            event.date.strftime("%b %d, %Y %H:%M"),
            event.title,
            ", ".join(event.people),
            ", ".join(event.tags),
            event.location.address,
        )
    console.print(table)


def _parse_day_option(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise typer.BadParameter("Expected a date in YYYY-MM-DD format.") from exc


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def serve(
    reload: Annotated[
        bool, typer.Option("--reload/--no-reload", help="Auto-reload on code changes.")
    ] = False,
) -> None:
    """Run the HTTP API on the configured HOST/PORT."""
    import uvicorn

    cfg = load_settings()
    console.print(
        Panel.fit(
            f"[bold cyan]TimelineMap API[/bold cyan]\n"
            f"http://{cfg.host}:{cfg.port}  (store: {cfg.store_backend})",
            border_style="cyan",
        )
    )
    uvicorn.run("timelinemap.api.server:app", host=cfg.host, port=cfg.port, reload=reload)


@app.command()  # type: ignore[misc]
def geocode(
    query: Annotated[str, typer.Argument(help="Free-text address to look up.")],
    limit: Annotated[
        int, typer.Option("--limit", "-n", min=1, max=50, help="Maximum candidates.")
    ] = SUGGESTION_LIMIT,
) -> None:
    """Resolve an address to ranked `[longitude, latitude]` candidates."""
    client = GeocoderClient.from_settings()
    try:
        candidates = client.resolve(query, limit=limit)
    except (GeocoderError, ValueError) as e:
        console.print(f"[bold red]❌ Geocoding Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e
    _render_candidates(candidates, title=f"Results for {query!r}")


@app.command()  # type: ignore[misc]
def suggest(
    queries: Annotated[
        list[str], typer.Argument(help="Successive field values, as typed (oldest first).")
    ],
    quiet_window: Annotated[
        float, typer.Option("--quiet-window", help="Debounce window in seconds.")
    ] = 0.5,
) -> None:
    """
    Feed keystroke queries through the debounced suggester.

    Each query supersedes the previous one, so only the last query that is
    long enough reaches the geocoder; earlier ones are cancelled.
    """
    suggester = AddressSuggester(GeocoderClient.from_settings(), quiet_window=quiet_window)

    async def _type_all() -> list[list[GeocodeCandidate] | None]:
        tasks = []
        for query in queries:
            tasks.append(asyncio.create_task(suggester.suggest(query)))
            await asyncio.sleep(0)
        return list(await asyncio.gather(*tasks))

    outcomes = asyncio.run(_type_all())
    for query, outcome in zip(queries, outcomes, strict=True):
        state = "superseded" if outcome is None else f"{len(outcome)} suggestion(s)"
        console.print(f"[dim]{query!r}: {state}[/dim]")
    _render_candidates(suggester.suggestions, title="Suggestions")


@app.command()  # type: ignore[misc]
def seed() -> None:
    """Insert the demo events if the configured store is empty."""
    try:
        inserted = seed_if_empty(create_store())
    except StorageError as e:
        console.print(f"[bold red]❌ Storage Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e
    if inserted:
        console.print(f"[bold green]✅ Seeded {inserted} demo events.[/bold green]")
    else:
        console.print("[yellow]Store already contains events; nothing seeded.[/yellow]")


@app.command()  # type: ignore[misc]
def timeline(
    title: Annotated[str, typer.Option("--title", "-t", help="Title substring.")] = "",
    person: Annotated[str | None, typer.Option("--person", "-p", help="Exact person.")] = None,
    tag: Annotated[str | None, typer.Option("--tag", help="Exact tag.")] = None,
    day: Annotated[
        str | None, typer.Option("--date", "-d", help="Selected day (YYYY-MM-DD).")
    ] = None,
    demo: Annotated[
        bool, typer.Option("--demo", help="Seed demo events first if the store is empty.")
    ] = False,
) -> None:
    """Show facets, the filtered events and the selected day's events."""
    selected = _parse_day_option(day)
    try:
        store = create_store()
        if demo:
            seed_if_empty(store)
        events = store.find()
    except StorageError as e:
        console.print(f"[bold red]❌ Storage Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    state = (
        TimelineState()
        .with_events(events)
        .with_filters(FilterSpec(title=title, people=person, tags=tag))
        .select_date(selected)
    )

    facets = state.facets
    console.rule("[bold]Timeline[/bold]")
    console.print(
        "Dates: " + (", ".join(d.strftime("%b %d, %Y") for d in facets.dates) or "(none)")
    )
    console.print("People: " + (", ".join(facets.people) or "(none)"))
    console.print("Tags: " + (", ".join(facets.tags) or "(none)"))
    console.print("")

    _render_events(state.visible_events, title=f"Matching events ({len(state.visible_events)})")
    if selected is not None:
        _render_events(state.day_events, title=f"Events on {selected:%b %d, %Y}")
    else:
        console.print("[dim]Select a date with --date to see event details for that day.[/dim]")


if __name__ == "__main__":
    app()
