"""API routes for per-item retention metrics and review recording."""

import logging

from fastapi import APIRouter

from memoraid.api.schemas import (
    ItemMetricsResponse,
    ItemRequest,
    ItemsRequest,
    LearningItemSchema,
    ReviewRequest,
    ReviewStageResponse,
)
from memoraid.config import now_ms
from memoraid.srs.retention import default_model

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/items", tags=["items"])


@router.post("/metrics", response_model=list[ItemMetricsResponse])
async def item_metrics(request: ItemsRequest) -> list[ItemMetricsResponse]:
    """Get due-ness, retention and mastery for each item."""
    now = now_ms() if request.now is None else request.now
    results = []
    for schema in request.items:
        item = schema.to_domain()
        results.append(
            ItemMetricsResponse(
                id=item.id,
                is_due=default_model.is_due(item, now),
                is_overdue=default_model.is_overdue(item, now),
                retention=default_model.retention_probability(item, now),
                mastery=default_model.mastery_score(item),
                next_review_date=default_model.next_review_date(item),
            )
        )
    return results


@router.post("/schedule", response_model=list[ReviewStageResponse])
async def item_schedule(request: ItemRequest) -> list[ReviewStageResponse]:
    """Get the item's review ladder: completed, next and projected stages."""
    schedule = default_model.review_schedule(request.item.to_domain(), now=request.now)
    return [ReviewStageResponse.from_domain(info) for info in schedule]


@router.post("/review", response_model=LearningItemSchema)
async def record_review(request: ReviewRequest) -> LearningItemSchema:
    """Record a completed review and return the advanced item."""
    item = default_model.record_review(
        request.item.to_domain(),
        score=request.score,
        review_type=request.type,
        now=request.now,
    )
    logger.info("Item %s reviewed, now at stage %d", item.id, item.review_stage)
    return LearningItemSchema.from_domain(item)
