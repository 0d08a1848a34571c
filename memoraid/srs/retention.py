"""Retention model for fixed-interval spaced repetition.

Every learning item climbs a ladder of review intervals (in days). The item's
``review_stage`` indexes into that ladder; stages past the end reuse the last
interval so that mastered items keep being maintained.

Key concepts:
- Due: the interval for the current stage has elapsed since the last review.
- Retention: an exponential forgetting curve, R = 100 * e^(-k * t/I), where t is
  the time since the last review and I the current interval. With k = 0.15,
  retention is ~86% when the item falls due.
- Mastery: a 0-100 heuristic combining ladder progress (60 points) with recent
  review scores (40 points).
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum

from memoraid.config import ONE_DAY_MS, now_ms, settings
from memoraid.models.item import LearningItem, ReviewLog, ReviewType
from memoraid.utils import clamp, round_half_up

logger = logging.getLogger(__name__)

STAGE_POINTS = 60  # Maximum mastery points from ladder progress
PERFORMANCE_POINTS = 40  # Maximum mastery points from review scores
RECENT_REVIEWS = 3  # Reviews averaged for the performance component
UNSCORED_PROGRESS_POINTS = 20  # Credit for progress with no recorded scores


class StageStatus(Enum):
    COMPLETED = "completed"
    DUE = "due"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class ReviewStageInfo:
    """One rung of an item's review ladder."""

    stage: int  # 1-based stage number
    interval_days: int
    review_date: int | None  # Epoch ms, None for stages already completed
    status: StageStatus


class RetentionModel:
    """Due-ness, retention and mastery for items on a fixed interval ladder."""

    def __init__(
        self,
        intervals: Sequence[int] | None = None,
        decay_rate: float | None = None,
        overdue_factor: float | None = None,
    ) -> None:
        """Initialize the model with an optional custom interval ladder.

        Args:
            intervals: Review intervals in days, one per stage.
            decay_rate: Exponent of the forgetting curve.
            overdue_factor: Fraction of an interval an item may run past its
                due date before it counts as overdue.

        Raises:
            ValueError: If the ladder is empty or holds a non-positive interval.
        """
        table = tuple(intervals if intervals is not None else settings.review_intervals_days)
        if not table:
            raise ValueError("Review interval table must not be empty")
        if any(days <= 0 for days in table):
            raise ValueError(f"Review intervals must be positive, got {table}")

        self.intervals: tuple[int, ...] = table
        self.decay_rate = settings.retention_decay_rate if decay_rate is None else decay_rate
        self.overdue_factor = (
            settings.overdue_factor if overdue_factor is None else overdue_factor
        )

    def interval_days(self, stage: int) -> int:
        """Return the interval for a stage, reusing the last one past the end."""
        return self.intervals[min(max(stage, 0), len(self.intervals) - 1)]

    def next_review_date(self, item: LearningItem) -> int | None:
        """Return when the item is next due (epoch ms), or None if never reviewed."""
        if item.is_new:
            return None
        return item.last_reviewed + self.interval_days(item.review_stage) * ONE_DAY_MS

    def is_due(self, item: LearningItem, now: int | None = None) -> bool:
        """Return True if the item should be reviewed now.

        Never-reviewed items are always due.
        """
        next_review = self.next_review_date(item)
        if next_review is None:
            return True
        now = now_ms() if now is None else now
        return now >= next_review

    def is_overdue(self, item: LearningItem, now: int | None = None) -> bool:
        """Return True if the item is due and well past its due date.

        Overdue means more than ``overdue_factor`` of the interval has elapsed
        beyond the due date. Never-reviewed items are measured from creation.
        """
        now = now_ms() if now is None else now
        if not self.is_due(item, now):
            return False
        interval = self.interval_days(item.review_stage) * ONE_DAY_MS
        anchor = item.created_at if item.is_new else item.last_reviewed
        return now > anchor + interval + interval * self.overdue_factor

    def retention_probability(self, item: LearningItem, now: int | None = None) -> int:
        """Estimate the chance (0-100) that the item is still remembered.

        Returns 0 for never-reviewed items.
        """
        if item.last_reviewed is None:
            return 0
        now = now_ms() if now is None else now

        interval = self.interval_days(item.review_stage) * ONE_DAY_MS
        ratio = (now - item.last_reviewed) / interval
        probability = 100 * math.exp(-self.decay_rate * ratio)
        return round_half_up(clamp(probability, 0, 100))

    def mastery_score(self, item: LearningItem) -> int:
        """Score (0-100) how well the item is mastered.

        Combines ladder progress with the mean score of the most recent
        reviews. Items with progress but no scored reviews get partial credit.
        """
        ladder = len(self.intervals)
        stage_score = min(item.review_stage, ladder) / ladder * STAGE_POINTS

        if item.history:
            recent = item.history[-RECENT_REVIEWS:]
            average = sum(log.score for log in recent) / len(recent)
            performance_score = average / 100 * PERFORMANCE_POINTS
        elif item.review_stage > 0:
            performance_score = UNSCORED_PROGRESS_POINTS
        else:
            performance_score = 0

        return round_half_up(clamp(stage_score + performance_score, 0, 100))

    def review_schedule(
        self,
        item: LearningItem,
        now: int | None = None,
    ) -> list[ReviewStageInfo]:
        """Describe the item's ladder: completed stages, the next one, and one beyond.

        The projected stage assumes the next review happens on time.
        """
        now = now_ms() if now is None else now
        ladder = len(self.intervals)

        schedule = [
            ReviewStageInfo(
                stage=i + 1,
                interval_days=self.intervals[i],
                review_date=None,
                status=StageStatus.COMPLETED,
            )
            for i in range(min(item.review_stage, ladder))
        ]

        if item.review_stage >= ladder:
            return schedule

        anchor = item.created_at if item.is_new else item.last_reviewed
        current_days = self.intervals[item.review_stage]
        next_review = anchor + current_days * ONE_DAY_MS
        schedule.append(
            ReviewStageInfo(
                stage=item.review_stage + 1,
                interval_days=current_days,
                review_date=next_review,
                status=StageStatus.DUE if now >= next_review else StageStatus.UPCOMING,
            )
        )

        future_stage = item.review_stage + 1
        if future_stage < ladder:
            future_days = self.intervals[future_stage]
            schedule.append(
                ReviewStageInfo(
                    stage=future_stage + 1,
                    interval_days=future_days,
                    review_date=next_review + future_days * ONE_DAY_MS,
                    status=StageStatus.UPCOMING,
                )
            )

        return schedule

    def record_review(
        self,
        item: LearningItem,
        score: int,
        review_type: ReviewType = ReviewType.MANUAL,
        now: int | None = None,
    ) -> LearningItem:
        """Return a copy of the item advanced by one completed review.

        Args:
            item: The item that was reviewed.
            score: Percentage correct for the review (0-100).
            review_type: How the review was carried out.
            now: When the review happened (defaults to now).

        Returns:
            A new item one stage further up the ladder, with the review logged.

        Raises:
            ValueError: If the score is outside 0-100.
        """
        if not 0 <= score <= 100:
            raise ValueError(f"Review score must be between 0 and 100, got {score}")
        now = now_ms() if now is None else now

        log = ReviewLog(date=now, type=review_type, score=score)
        updated = replace(
            item,
            review_stage=item.review_stage + 1,
            last_reviewed=now,
            history=(*item.history, log),
        )
        logger.debug(
            "Recorded %s review of %s (score %d): stage %d -> %d",
            review_type.value,
            item.id,
            score,
            item.review_stage,
            updated.review_stage,
        )
        return updated


default_model = RetentionModel()


def is_due(item: LearningItem, now: int | None = None) -> bool:
    """Shortcut for :meth:`RetentionModel.is_due` on the default ladder."""
    return default_model.is_due(item, now)


def retention_probability(item: LearningItem, now: int | None = None) -> int:
    """Shortcut for :meth:`RetentionModel.retention_probability` on the default ladder."""
    return default_model.retention_probability(item, now)


def mastery_score(item: LearningItem) -> int:
    """Shortcut for :meth:`RetentionModel.mastery_score` on the default ladder."""
    return default_model.mastery_score(item)
