"""Customer store adapter."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import TYPE_CHECKING

from loguru import logger

from dealerdesk.search.display import text
from dealerdesk.search.models import SearchResult
from dealerdesk.search.ranking import numeric_query

if TYPE_CHECKING:
    from dealerdesk.config.schema import SearchConfig
    from dealerdesk.search.store import EntityStore, Row

TABLE = "customers"
SELECT = "id,name,phone,id_number,car_number,customer_type"
TEXT_FIELDS = ("name", "phone", "car_number")


async def search_customers(
    *,
    store: EntityStore,
    query: str,
    config: SearchConfig,
) -> list[SearchResult]:
    """Substring match plus exact identity/record lookups for numeric queries."""
    lookups = [
        store.search_text(
            TABLE,
            select=SELECT,
            fields=TEXT_FIELDS,
            query=query,
            limit=config.per_store_limit,
        )
    ]
    number = numeric_query(query)
    if number is not None:
        lookups.append(
            store.find_exact(
                TABLE,
                select=SELECT,
                field="id_number",
                value=number,
                limit=config.exact_id_number_limit,
            )
        )
        lookups.append(
            store.find_exact(
                TABLE,
                select=SELECT,
                field="id",
                value=number,
                limit=config.exact_id_limit,
            )
        )

    text_rows, *exact_batches = await asyncio.gather(*lookups, return_exceptions=True)
    if isinstance(text_rows, BaseException):
        raise text_rows

    batches = [text_rows]
    for batch in exact_batches:
        if isinstance(batch, BaseException):
            if not isinstance(batch, Exception):
                raise batch
            # An exact lookup can be rejected (e.g. the number overflows the
            # column type); the substring matches still stand.
            logger.warning("Exact customer lookup for '{}' failed: {}", query, batch)
            continue
        batches.append(batch)

    return [_to_result(row) for row in dedupe_rows(batches)]


def dedupe_rows(batches: Iterable[list[Row]]) -> list[Row]:
    """Merge row batches keeping the first occurrence of each id."""
    seen: set[str] = set()
    rows: list[Row] = []
    for batch in batches:
        for row in batch:
            key = str(row.get("id"))
            if key in seen:
                continue
            seen.add(key)
            rows.append(row)
    return rows


def _to_result(row: Row) -> SearchResult:
    if row.get("id_number"):
        metadata = f"ID: {row['id_number']}"
    elif row.get("car_number"):
        metadata = f"Car: {row['car_number']}"
    else:
        metadata = text(row.get("customer_type"))

    return SearchResult(
        id=str(row["id"]),
        type="customer",
        title=row.get("name") or "Unnamed Customer",
        subtitle=text(row.get("phone")),
        metadata=metadata,
        link=f"/customers/preview/{row['id']}",
    )
