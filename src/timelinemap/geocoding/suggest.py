"""
Debounced, cancellation-aware address suggestions.

Type-ahead address fields fire a query on every keystroke. `AddressSuggester`
turns that stream into at most one upstream lookup per pause in typing:

- Queries shorter than ``min_chars`` (after trimming) never reach the
  geocoder and clear the current suggestions.
- Each query waits ``quiet_window`` seconds before it is sent. A newer query
  arriving in the meantime cancels the pending one.
- A lookup already in flight when a newer query arrives is cancelled too; if
  its thread still completes, the result is dropped because its generation is
  no longer current. Stale results therefore never overwrite fresh ones.

The blocking :class:`GeocoderClient` call runs in a worker thread via
:func:`asyncio.to_thread`, keeping the event loop responsive.

Example
-------
>>> suggester = AddressSuggester(GeocoderClient.from_settings())
>>> await suggester.suggest("1 Inf")            # doctest: +SKIP
>>> await suggester.suggest("1 Infinite Loop")  # doctest: +SKIP
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from timelinemap.core.contracts.geocode import GeocodeCandidate
from timelinemap.core.errors import GeocoderError
from timelinemap.core.settings import get_logger
from timelinemap.geocoding.client import SUGGESTION_LIMIT

QUIET_WINDOW_SECONDS = 0.5
MIN_QUERY_CHARS = 3

logger = get_logger("timelinemap.geocoding.suggest")


class SupportsResolve(Protocol):
    def resolve(self, query: str, *, limit: int = ...) -> list[GeocodeCandidate]: ...


class AddressSuggester:
    """Coalesce keystroke queries into debounced geocoder lookups.

    Attributes
    ----------
    suggestions : list[GeocodeCandidate]
        Candidates from the most recent query that was allowed to complete.
    """

    def __init__(
        self,
        client: SupportsResolve,
        *,
        quiet_window: float = QUIET_WINDOW_SECONDS,
        min_chars: int = MIN_QUERY_CHARS,
        limit: int = SUGGESTION_LIMIT,
    ) -> None:
        self._client = client
        self.quiet_window = quiet_window
        self.min_chars = min_chars
        self.limit = limit
        self.suggestions: list[GeocodeCandidate] = []
        self._generation = 0
        self._pending: asyncio.Task[list[GeocodeCandidate] | None] | None = None

    async def suggest(self, query: str) -> list[GeocodeCandidate] | None:
        """Submit the latest field value and wait for its suggestions.

        Returns
        -------
        list[GeocodeCandidate] | None
            The suggestions for ``query``, ``[]`` for short queries or lookup
            failures, or ``None`` if a newer query superseded this one.
        """
        self._generation += 1
        generation = self._generation
        self.cancel()

        text = query.strip()
        if len(text) < self.min_chars:
            self.suggestions = []
            return []

        task = asyncio.create_task(self._debounced_lookup(text, generation))
        self._pending = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task.cancelled():
            return None
        return task.result()

    def cancel(self) -> None:
        """Cancel the pending or in-flight lookup, if any."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _debounced_lookup(
        self, text: str, generation: int
    ) -> list[GeocodeCandidate] | None:
        await asyncio.sleep(self.quiet_window)
        if generation != self._generation:
            return None

        try:
            results = await asyncio.to_thread(self._client.resolve, text, limit=self.limit)
        except GeocoderError as exc:
            logger.warning("Address suggestion lookup failed for %r: %s", text, exc)
            results = []

        if generation != self._generation:
            logger.debug("Discarding stale suggestions for %r", text)
            return None

        self.suggestions = results
        return results


__all__ = ["AddressSuggester", "MIN_QUERY_CHARS", "QUIET_WINDOW_SECONDS"]
