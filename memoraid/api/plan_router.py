"""API routes for exam study plans."""

import logging

from fastapi import APIRouter, HTTPException

from memoraid.api.schemas import (
    PlanProgressRequest,
    PlanProgressResponse,
    PlanRequest,
    StudyPlanSchema,
    TaskStatusRequest,
    TaskStatusResponse,
)
from memoraid.srs.plan_updates import plan_progress, update_task_status
from memoraid.srs.planner import InvalidHorizonError, generate_plan

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/plans", tags=["plans"])


@router.post("", response_model=StudyPlanSchema)
async def create_plan(request: PlanRequest) -> StudyPlanSchema:
    """Generate a study plan leading up to the exam date."""
    try:
        plan = generate_plan(
            request.name,
            [item.to_domain() for item in request.items],
            exam_date=request.exam_date,
            daily_minutes_available=request.daily_minutes_available,
            now=request.now,
        )
    except InvalidHorizonError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return StudyPlanSchema.from_domain(plan)


@router.post("/tasks/status", response_model=TaskStatusResponse)
async def set_task_status(request: TaskStatusRequest) -> TaskStatusResponse:
    """Mark an item's tasks on one day as completed or pending."""
    plan = request.plan.to_domain()
    updated = update_task_status(plan, request.date, request.capsule_id, request.status)
    if updated is plan:
        logger.info(
            "No task for %s on %s in plan %s", request.capsule_id, request.date, plan.id
        )
    return TaskStatusResponse(
        plan=StudyPlanSchema.from_domain(updated),
        updated=updated is not plan,
    )


@router.post("/progress", response_model=PlanProgressResponse)
async def get_plan_progress(request: PlanProgressRequest) -> PlanProgressResponse:
    """Summarize how much of the plan is done."""
    return PlanProgressResponse.from_domain(plan_progress(request.plan.to_domain()))
