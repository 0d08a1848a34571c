from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class TaskType(Enum):
    LEARN = "learn"
    REVIEW = "review"
    QUIZ = "quiz"


class TaskStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class StudyTask:
    """One unit of work in a study plan. Only ``status`` changes after generation."""

    capsule_id: str
    title: str
    estimated_minutes: int
    type: TaskType
    status: TaskStatus = TaskStatus.PENDING


@dataclass(frozen=True)
class DailySession:
    """All tasks scheduled for one calendar day."""

    date: date
    tasks: tuple[StudyTask, ...] = field(default_factory=tuple)

    @property
    def total_minutes(self) -> int:
        return sum(task.estimated_minutes for task in self.tasks)

    @property
    def completed_minutes(self) -> int:
        return sum(
            task.estimated_minutes for task in self.tasks if task.status is TaskStatus.COMPLETED
        )

    @property
    def is_rest_day(self) -> bool:
        return not self.tasks

    @property
    def is_completed(self) -> bool:
        """Return True if the day has tasks and all of them are done."""
        return bool(self.tasks) and all(
            task.status is TaskStatus.COMPLETED for task in self.tasks
        )


@dataclass(frozen=True)
class StudyPlan:
    """A day-by-day study schedule leading up to an exam."""

    id: str
    name: str
    exam_date: int  # Epoch ms
    daily_minutes_available: int
    schedule: tuple[DailySession, ...]
    capsule_ids: tuple[str, ...]
    created_at: int  # Epoch ms
