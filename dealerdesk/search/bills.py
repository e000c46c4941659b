"""Bill store adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dealerdesk.search.display import money, text
from dealerdesk.search.models import SearchResult

if TYPE_CHECKING:
    from dealerdesk.config.schema import SearchConfig
    from dealerdesk.search.store import EntityStore, Row

TABLE = "bills"
SELECT = "id,customer_name,bill_type,total_with_tax,total,status,car_details"
TEXT_FIELDS = ("customer_name", "bill_type", "car_details")


async def search_bills(
    *,
    store: EntityStore,
    query: str,
    config: SearchConfig,
) -> list[SearchResult]:
    """Search bills by customer name, bill type or car details."""
    rows = await store.search_text(
        TABLE,
        select=SELECT,
        fields=TEXT_FIELDS,
        query=query,
        limit=config.per_store_limit,
    )
    return [_to_result(row) for row in rows]


def _to_result(row: Row) -> SearchResult:
    bill_type = row.get("bill_type") or "Bill"
    customer_name = row.get("customer_name") or "Unknown"
    return SearchResult(
        id=str(row["id"]),
        type="bill",
        title=f"{bill_type} - {customer_name}",
        subtitle=text(row.get("car_details")),
        metadata=money(row.get("total_with_tax") or row.get("total")),
        link=f"/bills/preview/{row['id']}",
    )
