"""Exam study plan generation.

Items are introduced ("learn" tasks) weakest first, each on the earliest day
that still has room in the daily budget. Every learn task then projects its
review tasks at fixed offsets taken from the interval ladder, so an item
learned on day d is reviewed on d+1, d+4, d+7, ... up to the day before the
exam.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo

from memoraid.config import ONE_DAY_MS, now_ms, settings
from memoraid.models.item import LearningItem
from memoraid.models.plan import DailySession, StudyPlan, StudyTask, TaskType
from memoraid.srs.estimator import estimate_study_time
from memoraid.srs.retention import RetentionModel, default_model

logger = logging.getLogger(__name__)


class InvalidHorizonError(ValueError):
    """Raised when the exam date leaves no study day before it, or is too far away."""

    def __init__(self, exam_date: int, days_until_exam: int, message: str | None = None) -> None:
        super().__init__(
            message or f"Exam date must be in the future (got {days_until_exam} days from today)"
        )
        self.exam_date = exam_date
        self.days_until_exam = days_until_exam


def resolve_timezone(tz: tzinfo | None = None) -> tzinfo | None:
    """Return the zone to plan in: explicit, configured, or None for host local."""
    if tz is not None:
        return tz
    if settings.timezone:
        return ZoneInfo(settings.timezone)
    return None


def start_of_day(now: int, tz: tzinfo | None = None) -> datetime:
    """Return midnight of the day containing ``now`` (epoch ms) in ``tz``.

    With no zone the result is a naive datetime in the host's local time.
    """
    moment = datetime.fromtimestamp(now / 1000, tz=tz)
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def days_until(exam_date: int, start: datetime) -> int:
    """Return the number of study days from ``start`` up to the exam day.

    Days are counted on the calendar of ``start``'s zone, so days lengthened
    or shortened by a DST change still count once. An exam at local midnight
    leaves its own day unscheduled; an exam later in the day includes it.
    """
    start_ms = int(start.timestamp() * 1000)
    if exam_date <= start_ms:
        return (exam_date - start_ms) // ONE_DAY_MS

    exam_local = datetime.fromtimestamp(exam_date / 1000, tz=start.tzinfo)
    days = (exam_local.date() - start.date()).days
    if exam_local.time() != time.min:
        days += 1
    return days


def generate_plan(
    name: str,
    items: Iterable[LearningItem],
    exam_date: int,
    daily_minutes_available: int,
    now: int | None = None,
    model: RetentionModel | None = None,
    tz: tzinfo | None = None,
) -> StudyPlan:
    """Build a study plan covering every item before the exam.

    Learn tasks respect the daily budget; when the horizon runs out, the
    remaining items are all placed on the last day regardless of its load.
    Review tasks are projected at fixed offsets and are not budget-checked.

    Args:
        name: Label for the plan.
        items: Items to include.
        exam_date: Exam time in epoch ms. The exam day itself is not scheduled.
        daily_minutes_available: Study budget per day, in minutes.
        now: Current time in epoch ms (defaults to now).
        model: Retention model providing the ladder and mastery scores.
        tz: Zone whose midnight starts the plan (defaults to configured/local).

    Returns:
        A StudyPlan with one DailySession per day from today to the exam.

    Raises:
        InvalidHorizonError: If the exam is not on a future day, or is more
            than ``settings.max_plan_days`` away.
    """
    items = list(items)
    model = model or default_model
    now = now_ms() if now is None else now

    start = start_of_day(now, resolve_timezone(tz))
    span_ms = exam_date - int(start.timestamp() * 1000)
    if span_ms > settings.max_plan_days * ONE_DAY_MS:
        raise InvalidHorizonError(
            exam_date,
            span_ms // ONE_DAY_MS,
            f"Exam date is more than {settings.max_plan_days} days away",
        )

    days_until_exam = days_until(exam_date, start)
    if days_until_exam <= 0:
        raise InvalidHorizonError(exam_date, days_until_exam)

    day_tasks: list[list[StudyTask]] = [[] for _ in range(days_until_exam)]
    day_load = [0] * days_until_exam
    last_day = days_until_exam - 1

    def place(day: int, task: StudyTask) -> None:
        day_tasks[day].append(task)
        day_load[day] += task.estimated_minutes

    # Weakest items first so they get the most review opportunities
    prioritized = sorted(items, key=model.mastery_score)

    # The cursor only moves forward, spreading learn tasks across the horizon
    cursor = 0
    for item in prioritized:
        label = item.title or item.id
        learn_time = estimate_study_time(item, TaskType.LEARN)
        review_time = estimate_study_time(item, TaskType.REVIEW)

        while cursor < days_until_exam and day_load[cursor] + learn_time > daily_minutes_available:
            cursor += 1

        if cursor >= days_until_exam:
            cursor = last_day
            logger.warning(
                "No room left for %s before the exam; placing it on day %d over budget",
                item.id,
                last_day,
            )

        place(
            cursor,
            StudyTask(
                capsule_id=item.id,
                title=f"Learn: {label}",
                estimated_minutes=learn_time,
                type=TaskType.LEARN,
            ),
        )

        for interval in model.intervals:
            review_day = cursor + interval
            if review_day >= days_until_exam:
                continue
            place(
                review_day,
                StudyTask(
                    capsule_id=item.id,
                    title=f"Review D+{interval}: {label}",
                    estimated_minutes=review_time,
                    type=TaskType.REVIEW,
                ),
            )

    first_day = start.date()
    schedule = tuple(
        DailySession(date=first_day + timedelta(days=offset), tasks=tuple(tasks))
        for offset, tasks in enumerate(day_tasks)
    )

    plan = StudyPlan(
        id=f"plan_{now}",
        name=name,
        exam_date=exam_date,
        daily_minutes_available=daily_minutes_available,
        schedule=schedule,
        capsule_ids=tuple(item.id for item in items),
        created_at=now,
    )

    logger.info(
        "Generated plan %r: %d items over %d days, %d tasks, busiest day %d min (budget %d)",
        name,
        len(items),
        days_until_exam,
        sum(len(tasks) for tasks in day_tasks),
        max(day_load),
        daily_minutes_available,
    )
    return plan
