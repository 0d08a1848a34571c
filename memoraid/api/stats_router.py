"""API routes for dashboard statistics."""

import logging

from fastapi import APIRouter

from memoraid.api.schemas import ItemsRequest, PerformanceStatsResponse
from memoraid.srs.performance import analyze_global_performance

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.post("/performance", response_model=PerformanceStatsResponse)
async def get_global_performance(request: ItemsRequest) -> PerformanceStatsResponse:
    """Get averaged mastery/retention and due counts for a set of items."""
    items = [item.to_domain() for item in request.items]
    stats = analyze_global_performance(items, now=request.now)
    return PerformanceStatsResponse.from_domain(stats)
