"""Domain values shared by the scheduling engine and the API."""

from memoraid.models.item import LearningItem, ReviewLog, ReviewType
from memoraid.models.plan import DailySession, StudyPlan, StudyTask, TaskStatus, TaskType

__all__ = [
    "DailySession",
    "LearningItem",
    "ReviewLog",
    "ReviewType",
    "StudyPlan",
    "StudyTask",
    "TaskStatus",
    "TaskType",
]
