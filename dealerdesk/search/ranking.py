"""Relevance ordering for merged search results."""

from __future__ import annotations

import re
from collections.abc import Iterable

from dealerdesk.search.models import TYPE_PRIORITY, SearchResult

_NUMERIC = re.compile(r"\d+")
_ID_METADATA = re.compile(r"ID: (\d+)")


def numeric_query(query: str) -> int | None:
    """Return the query as an integer when it is made of digits only."""
    candidate = query.strip()
    if _NUMERIC.fullmatch(candidate):
        return int(candidate)
    return None


def embedded_id_number(metadata: str) -> int | None:
    """Identity number carried in a customer's `ID: <n>` metadata."""
    match = _ID_METADATA.fullmatch(metadata.strip())
    if not match:
        return None
    return int(match.group(1))


def rank_results(
    results: Iterable[SearchResult],
    query: str,
    limit: int | None = None,
) -> list[SearchResult]:
    """
    Order results by relevance to `query`.

    Precedence: exact identity-number match (numeric queries only), exact
    title, title prefix, then entity type. The sort is stable, so equally
    ranked results keep their input order.
    """
    needle = query.strip().lower()
    number = numeric_query(needle)

    def sort_key(result: SearchResult) -> tuple[int, int, int, int]:
        title = result.title.lower()
        exact_id = number is not None and embedded_id_number(result.metadata) == number
        return (
            0 if exact_id else 1,
            0 if title == needle else 1,
            0 if title.startswith(needle) else 1,
            TYPE_PRIORITY[result.type],
        )

    ranked = sorted(results, key=sort_key)
    if limit is not None:
        return ranked[:limit]
    return ranked
