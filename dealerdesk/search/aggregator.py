"""Unified entity search with concurrent fan-out across stores."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from loguru import logger

from dealerdesk.search.bills import search_bills
from dealerdesk.search.cars import search_cars
from dealerdesk.search.customers import search_customers
from dealerdesk.search.deals import search_deals
from dealerdesk.search.models import SearchOutcome, SearchResult
from dealerdesk.search.ranking import rank_results
from dealerdesk.search.store import PostgrestEntityStore

if TYPE_CHECKING:
    from dealerdesk.config.schema import SearchConfig
    from dealerdesk.search.store import EntityStore

Searcher = Callable[..., Awaitable[list[SearchResult]]]


class SearchAggregator:
    """Fan a query out to every entity store, then merge, rank and cap."""

    _SEARCHERS: dict[str, Searcher] = {
        "customers": search_customers,
        "cars": search_cars,
        "deals": search_deals,
        "bills": search_bills,
    }

    def __init__(
        self,
        store: EntityStore | None = None,
        config: SearchConfig | None = None,
    ):
        from dealerdesk.config.schema import SearchConfig

        self.store = store or PostgrestEntityStore()
        self.config = config or SearchConfig()

    async def search(self, query: str) -> list[SearchResult]:
        """Ranked results for `query`; store failures degrade to fewer results."""
        outcome = await self.search_detailed(query)
        return outcome.results

    async def search_detailed(self, query: str) -> SearchOutcome:
        """Like `search`, but also reports which stores failed."""
        needle = (query or "").strip()
        if len(needle) < self.config.min_query_length:
            return SearchOutcome()

        names = list(self._SEARCHERS)
        batches = await asyncio.gather(
            *(
                self._SEARCHERS[name](store=self.store, query=needle, config=self.config)
                for name in names
            ),
            return_exceptions=True,
        )

        merged: list[SearchResult] = []
        failed: list[str] = []
        for name, batch in zip(names, batches):
            if isinstance(batch, BaseException):
                if not isinstance(batch, Exception):
                    raise batch
                logger.warning("Search store '{}' failed for query '{}': {}", name, needle, batch)
                failed.append(name)
                continue
            merged.extend(batch)

        if failed and self.config.failure_policy == "all_or_nothing":
            logger.warning(
                "Discarding all results for '{}' ({} store(s) failed, policy=all_or_nothing)",
                needle,
                len(failed),
            )
            return SearchOutcome(results=[], failed_sources=failed)

        ranked = rank_results(merged, needle, limit=self.config.max_results)
        logger.debug(
            "Search '{}': {} raw matches, {} returned", needle, len(merged), len(ranked)
        )
        return SearchOutcome(results=ranked, failed_sources=failed)
