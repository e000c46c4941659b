"""Global entity search across customers, cars, deals and bills."""

from dealerdesk.search.aggregator import SearchAggregator
from dealerdesk.search.models import SearchOutcome, SearchResult
from dealerdesk.search.session import SearchSession
from dealerdesk.search.store import EntityStore, PostgrestEntityStore, StoreQueryFailed

__all__ = [
    "SearchAggregator",
    "SearchOutcome",
    "SearchResult",
    "SearchSession",
    "EntityStore",
    "PostgrestEntityStore",
    "StoreQueryFailed",
]
