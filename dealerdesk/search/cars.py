"""Car store adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dealerdesk.search.display import join_bullets, money, text
from dealerdesk.search.models import SearchResult

if TYPE_CHECKING:
    from dealerdesk.config.schema import SearchConfig
    from dealerdesk.search.store import EntityStore, Row

TABLE = "cars"
SELECT = "id,title,brand,year,car_number,type,status,sale_price"
TEXT_FIELDS = ("title", "brand", "car_number", "type")


async def search_cars(
    *,
    store: EntityStore,
    query: str,
    config: SearchConfig,
) -> list[SearchResult]:
    """Search cars by title, brand, plate or body type."""
    rows = await store.search_text(
        TABLE,
        select=SELECT,
        fields=TEXT_FIELDS,
        query=query,
        limit=config.per_store_limit,
    )
    return [_to_result(row) for row in rows]


def _to_result(row: Row) -> SearchResult:
    title = row.get("title") or " ".join(
        text(part) for part in (row.get("brand"), row.get("year")) if part
    )
    return SearchResult(
        id=str(row["id"]),
        type="car",
        title=title,
        subtitle=text(row.get("car_number")),
        metadata=join_bullets(row.get("type"), row.get("status"), money(row.get("sale_price"))),
        link=f"/cars/preview/{row['id']}",
    )
