"""Caller-side debounce for interactive search boxes."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from dealerdesk.search.aggregator import SearchAggregator
    from dealerdesk.search.models import SearchResult


class SearchSession:
    """
    Debounced, last-write-wins wrapper around a SearchAggregator.

    Each `submit` waits for a quiet period before searching. A submission
    that is superseded by a newer one, either during the wait or while its
    store queries are still running, resolves to None instead of results.
    """

    def __init__(self, aggregator: SearchAggregator, debounce_ms: int | None = None):
        self.aggregator = aggregator
        delay_ms = aggregator.config.debounce_ms if debounce_ms is None else debounce_ms
        self.debounce_s = max(delay_ms, 0) / 1000
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    async def submit(self, query: str) -> list[SearchResult] | None:
        self._generation += 1
        ticket = self._generation

        await asyncio.sleep(self.debounce_s)
        if ticket != self._generation:
            return None

        results = await self.aggregator.search(query)
        if ticket != self._generation:
            logger.debug("Discarding stale search results for '{}'", query)
            return None
        return results
