"""Status updates and progress summaries for generated study plans.

Plans are immutable values: updates return a new plan and leave the input
untouched. The schedule itself is never recomputed here.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date

from memoraid.models.plan import DailySession, StudyPlan, TaskStatus
from memoraid.utils import round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanProgress:
    """How much of a plan has been completed."""

    total_tasks: int = 0
    completed_tasks: int = 0
    total_minutes: int = 0
    completed_minutes: int = 0
    percent_complete: int = 0


def session_for(plan: StudyPlan, day: date) -> DailySession | None:
    """Return the plan's session for ``day``, or None if the day is not in the plan."""
    for session in plan.schedule:
        if session.date == day:
            return session
    return None


def update_task_status(
    plan: StudyPlan,
    day: date,
    item_id: str,
    status: TaskStatus,
) -> StudyPlan:
    """Set the status of every task for ``item_id`` on ``day``.

    Args:
        plan: The plan to update.
        day: Calendar date of the session holding the task.
        item_id: Item whose tasks should change.
        status: New status.

    Returns:
        A new plan with the tasks updated. If no session or task matched, the
        input plan itself is returned, so ``result is plan`` signals a no-op.
    """
    matched = False
    schedule: list[DailySession] = []

    for session in plan.schedule:
        if session.date != day:
            schedule.append(session)
            continue

        tasks = []
        for task in session.tasks:
            if task.capsule_id == item_id:
                matched = True
                task = replace(task, status=status)
            tasks.append(task)
        schedule.append(replace(session, tasks=tuple(tasks)))

    if not matched:
        logger.debug("No task for %s on %s in plan %s", item_id, day.isoformat(), plan.id)
        return plan

    return replace(plan, schedule=tuple(schedule))


def plan_progress(plan: StudyPlan) -> PlanProgress:
    """Count completed tasks and minutes across the whole plan."""
    tasks = [task for session in plan.schedule for task in session.tasks]
    if not tasks:
        return PlanProgress()

    completed = [task for task in tasks if task.status is TaskStatus.COMPLETED]
    return PlanProgress(
        total_tasks=len(tasks),
        completed_tasks=len(completed),
        total_minutes=sum(task.estimated_minutes for task in tasks),
        completed_minutes=sum(task.estimated_minutes for task in completed),
        percent_complete=round_half_up(len(completed) / len(tasks) * 100),
    )
