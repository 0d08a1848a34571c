"""Fleet-level statistics over a learner's collection of items."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from memoraid.config import now_ms
from memoraid.models.item import LearningItem
from memoraid.srs.retention import RetentionModel, default_model
from memoraid.utils import round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PerformanceStats:
    """Averaged mastery/retention and review counts for a set of items."""

    global_mastery: int = 0
    retention_average: int = 0
    due_count: int = 0
    overdue_count: int = 0
    upcoming_count: int = 0


def analyze_global_performance(
    items: Iterable[LearningItem],
    now: int | None = None,
    model: RetentionModel | None = None,
) -> PerformanceStats:
    """Summarize mastery, retention and review backlog across items.

    Args:
        items: The learner's items.
        now: Current time in epoch ms (defaults to now).
        model: Retention model to score with (defaults to the standard ladder).

    Returns:
        PerformanceStats; all zeros for an empty collection.
    """
    items = list(items)
    if not items:
        return PerformanceStats()

    model = model or default_model
    now = now_ms() if now is None else now

    total_mastery = 0
    total_retention = 0
    due_count = 0
    overdue_count = 0

    for item in items:
        total_mastery += model.mastery_score(item)
        total_retention += model.retention_probability(item, now)
        if model.is_due(item, now):
            due_count += 1
            if model.is_overdue(item, now):
                overdue_count += 1

    stats = PerformanceStats(
        global_mastery=round_half_up(total_mastery / len(items)),
        retention_average=round_half_up(total_retention / len(items)),
        due_count=due_count,
        overdue_count=overdue_count,
        upcoming_count=len(items) - due_count,
    )
    logger.debug(
        "Analyzed %d items: mastery %d%%, retention %d%%, %d due (%d overdue)",
        len(items),
        stats.global_mastery,
        stats.retention_average,
        stats.due_count,
        stats.overdue_count,
    )
    return stats
