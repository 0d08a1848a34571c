"""Pydantic schemas for API request/response models.

Schemas mirror the domain dataclasses and convert to and from them, so the
scheduling engine never sees pydantic objects.
"""

import datetime

from pydantic import BaseModel, Field

from memoraid.models import (
    DailySession,
    LearningItem,
    ReviewLog,
    ReviewType,
    StudyPlan,
    StudyTask,
    TaskStatus,
    TaskType,
)
from memoraid.srs.performance import PerformanceStats
from memoraid.srs.plan_updates import PlanProgress
from memoraid.srs.retention import ReviewStageInfo, StageStatus

# --- Items ---


class ReviewLogSchema(BaseModel):
    date: int  # Epoch ms
    type: ReviewType
    score: int = Field(ge=0, le=100)

    def to_domain(self) -> ReviewLog:
        return ReviewLog(date=self.date, type=self.type, score=self.score)


class LearningItemSchema(BaseModel):
    """A learning item ("capsule") snapshot as supplied by the client."""

    id: str
    created_at: int
    title: str = ""
    last_reviewed: int | None = None  # None if never reviewed
    review_stage: int = Field(default=0, ge=0)
    history: list[ReviewLogSchema] = []
    concept_count: int = Field(default=0, ge=0)
    flashcard_count: int = Field(default=0, ge=0)
    quiz_count: int = Field(default=0, ge=0)

    def to_domain(self) -> LearningItem:
        return LearningItem(
            id=self.id,
            created_at=self.created_at,
            title=self.title,
            last_reviewed=self.last_reviewed,
            review_stage=self.review_stage,
            history=tuple(log.to_domain() for log in self.history),
            concept_count=self.concept_count,
            flashcard_count=self.flashcard_count,
            quiz_count=self.quiz_count,
        )

    @classmethod
    def from_domain(cls, item: LearningItem) -> "LearningItemSchema":
        return cls(
            id=item.id,
            created_at=item.created_at,
            title=item.title,
            last_reviewed=item.last_reviewed,
            review_stage=item.review_stage,
            history=[
                ReviewLogSchema(date=log.date, type=log.type, score=log.score)
                for log in item.history
            ],
            concept_count=item.concept_count,
            flashcard_count=item.flashcard_count,
            quiz_count=item.quiz_count,
        )


class ItemsRequest(BaseModel):
    """A snapshot of items to evaluate."""

    items: list[LearningItemSchema]
    now: int | None = None  # Epoch ms, defaults to the server clock


class ItemRequest(BaseModel):
    item: LearningItemSchema
    now: int | None = None


class ReviewRequest(BaseModel):
    """Request to record a completed review of an item."""

    item: LearningItemSchema
    score: int = Field(ge=0, le=100)
    type: ReviewType = ReviewType.MANUAL
    now: int | None = None


class ItemMetricsResponse(BaseModel):
    """Per-item retention and mastery metrics."""

    id: str
    is_due: bool
    is_overdue: bool
    retention: int  # 0-100
    mastery: int  # 0-100
    next_review_date: int | None  # Epoch ms, None if never reviewed


class ReviewStageResponse(BaseModel):
    stage: int
    interval_days: int
    review_date: int | None
    status: StageStatus

    @classmethod
    def from_domain(cls, info: ReviewStageInfo) -> "ReviewStageResponse":
        return cls(
            stage=info.stage,
            interval_days=info.interval_days,
            review_date=info.review_date,
            status=info.status,
        )


# --- Stats ---


class PerformanceStatsResponse(BaseModel):
    """Averaged mastery/retention and review backlog for a collection."""

    global_mastery: int
    retention_average: int
    due_count: int
    overdue_count: int
    upcoming_count: int

    @classmethod
    def from_domain(cls, stats: PerformanceStats) -> "PerformanceStatsResponse":
        return cls(
            global_mastery=stats.global_mastery,
            retention_average=stats.retention_average,
            due_count=stats.due_count,
            overdue_count=stats.overdue_count,
            upcoming_count=stats.upcoming_count,
        )


# --- Plans ---


class StudyTaskSchema(BaseModel):
    capsule_id: str
    title: str
    estimated_minutes: int
    type: TaskType
    status: TaskStatus = TaskStatus.PENDING

    def to_domain(self) -> StudyTask:
        return StudyTask(
            capsule_id=self.capsule_id,
            title=self.title,
            estimated_minutes=self.estimated_minutes,
            type=self.type,
            status=self.status,
        )


class DailySessionSchema(BaseModel):
    """One day of a plan. ``total_minutes`` and ``is_rest_day`` are derived on output."""

    date: datetime.date
    tasks: list[StudyTaskSchema] = []
    total_minutes: int = 0
    is_rest_day: bool = True

    def to_domain(self) -> DailySession:
        return DailySession(date=self.date, tasks=tuple(t.to_domain() for t in self.tasks))

    @classmethod
    def from_domain(cls, session: DailySession) -> "DailySessionSchema":
        return cls(
            date=session.date,
            tasks=[
                StudyTaskSchema(
                    capsule_id=t.capsule_id,
                    title=t.title,
                    estimated_minutes=t.estimated_minutes,
                    type=t.type,
                    status=t.status,
                )
                for t in session.tasks
            ],
            total_minutes=session.total_minutes,
            is_rest_day=session.is_rest_day,
        )


class StudyPlanSchema(BaseModel):
    id: str
    name: str
    exam_date: int  # Epoch ms
    daily_minutes_available: int
    schedule: list[DailySessionSchema]
    capsule_ids: list[str]
    created_at: int

    def to_domain(self) -> StudyPlan:
        return StudyPlan(
            id=self.id,
            name=self.name,
            exam_date=self.exam_date,
            daily_minutes_available=self.daily_minutes_available,
            schedule=tuple(s.to_domain() for s in self.schedule),
            capsule_ids=tuple(self.capsule_ids),
            created_at=self.created_at,
        )

    @classmethod
    def from_domain(cls, plan: StudyPlan) -> "StudyPlanSchema":
        return cls(
            id=plan.id,
            name=plan.name,
            exam_date=plan.exam_date,
            daily_minutes_available=plan.daily_minutes_available,
            schedule=[DailySessionSchema.from_domain(s) for s in plan.schedule],
            capsule_ids=list(plan.capsule_ids),
            created_at=plan.created_at,
        )


class PlanRequest(BaseModel):
    """Request to generate a study plan for an exam."""

    name: str
    items: list[LearningItemSchema]
    exam_date: int  # Epoch ms
    daily_minutes_available: int
    now: int | None = None


class TaskStatusRequest(BaseModel):
    """Request to mark an item's tasks on a given day as pending or completed."""

    plan: StudyPlanSchema
    date: datetime.date
    capsule_id: str
    status: TaskStatus


class TaskStatusResponse(BaseModel):
    plan: StudyPlanSchema
    updated: bool  # False if no task matched the date and item


class PlanProgressRequest(BaseModel):
    plan: StudyPlanSchema


class PlanProgressResponse(BaseModel):
    total_tasks: int
    completed_tasks: int
    total_minutes: int
    completed_minutes: int
    percent_complete: int

    @classmethod
    def from_domain(cls, progress: PlanProgress) -> "PlanProgressResponse":
        return cls(
            total_tasks=progress.total_tasks,
            completed_tasks=progress.completed_tasks,
            total_minutes=progress.total_minutes,
            completed_minutes=progress.completed_minutes,
            percent_complete=progress.percent_complete,
        )
