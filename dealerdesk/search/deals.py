"""Deal store adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dealerdesk.search.display import join_bullets, money, text
from dealerdesk.search.models import SearchResult

if TYPE_CHECKING:
    from dealerdesk.config.schema import SearchConfig
    from dealerdesk.search.store import EntityStore, Row

TABLE = "deals"
SELECT = (
    "id,title,deal_type,amount,status,customer_name,"
    "customers(name),cars(title,brand,car_number)"
)
TEXT_FIELDS = ("title", "customer_name", "deal_type")


async def search_deals(
    *,
    store: EntityStore,
    query: str,
    config: SearchConfig,
) -> list[SearchResult]:
    """Search deals by title, customer name or deal type."""
    rows = await store.search_text(
        TABLE,
        select=SELECT,
        fields=TEXT_FIELDS,
        query=query,
        limit=config.per_store_limit,
    )
    return [_to_result(row) for row in rows]


def _to_result(row: Row) -> SearchResult:
    # Embedded relation comes back as an object (or null) per row.
    customer = row.get("customers") or {}
    customer_name = customer.get("name") or row.get("customer_name") or ""
    return SearchResult(
        id=str(row["id"]),
        type="deal",
        title=row.get("title") or f"{text(row.get('deal_type'))} Deal".strip(),
        subtitle=customer_name,
        metadata=join_bullets(row.get("deal_type"), row.get("status"), money(row.get("amount"))),
        link=f"/deals/preview/{row['id']}",
    )
