"""Global entity search endpoint."""

from fastapi import APIRouter, Depends, Query

from dealerdesk.search.aggregator import SearchAggregator
from dealerdesk.server.dependencies import get_aggregator
from dealerdesk.server.schemas import SearchResponseDTO

router = APIRouter(tags=["Search"])


@router.get("/api/search", response_model=SearchResponseDTO, response_model_by_alias=True)
async def search(
    q: str = Query(default="", max_length=200),
    aggregator: SearchAggregator = Depends(get_aggregator),
):
    """Search customers, cars, deals and bills in one call."""
    outcome = await aggregator.search_detailed(q)
    return SearchResponseDTO.from_outcome(q, outcome)
