"""Tests for the SRS engine: retention model, study-time estimates, and statistics."""

import pytest

from memoraid.config import ONE_DAY_MS
from memoraid.models import LearningItem, ReviewLog, ReviewType, TaskType
from memoraid.srs.estimator import content_load, estimate_study_time
from memoraid.srs.performance import PerformanceStats, analyze_global_performance
from memoraid.srs.retention import (
    RetentionModel,
    StageStatus,
    is_due,
    mastery_score,
    retention_probability,
)

NOW = 1_767_225_600_000  # 2026-01-01T00:00:00Z
DAY = ONE_DAY_MS


def _item(
    stage: int = 0,
    last_reviewed: int | None = None,
    scores: list[int] | None = None,
    created_at: int = NOW,
    **kwargs,
) -> LearningItem:
    history = tuple(
        ReviewLog(date=NOW - (len(scores) - i) * DAY, type=ReviewType.QUIZ, score=score)
        for i, score in enumerate(scores or [])
    )
    return LearningItem(
        id=kwargs.pop("id", "cap_1"),
        created_at=created_at,
        last_reviewed=last_reviewed,
        review_stage=stage,
        history=history,
        **kwargs,
    )


# --- Retention Model ---


class TestRetentionModel:
    def setup_method(self) -> None:
        self.model = RetentionModel(intervals=[1, 4, 7, 10, 14, 30, 60, 90])

    def test_never_reviewed_item(self) -> None:
        item = _item()
        assert self.model.is_due(item, NOW)
        assert self.model.retention_probability(item, NOW) == 0
        assert self.model.mastery_score(item) == 0

    def test_next_review_date_follows_last_review(self) -> None:
        new_item = _item()
        assert new_item.is_new
        assert self.model.next_review_date(new_item) is None

        reviewed = _item(stage=2, last_reviewed=NOW)
        assert not reviewed.is_new
        assert self.model.next_review_date(reviewed) == NOW + 7 * DAY

    def test_never_reviewed_is_due_at_any_time(self) -> None:
        item = _item(stage=5)
        for now in (0, NOW - 365 * DAY, NOW, NOW + 365 * DAY):
            assert self.model.is_due(item, now)

    def test_due_exactly_at_interval_boundary(self) -> None:
        # Stage 2 uses the 7-day interval
        item = _item(stage=2, last_reviewed=NOW - 7 * DAY)
        assert self.model.is_due(item, NOW)
        assert self.model.retention_probability(item, NOW) == 86

    def test_not_due_just_before_boundary(self) -> None:
        item = _item(stage=2, last_reviewed=NOW - 7 * DAY + 1)
        assert not self.model.is_due(item, NOW)

    def test_interval_clamped_past_end_of_ladder(self) -> None:
        assert self.model.interval_days(7) == 90
        assert self.model.interval_days(50) == 90
        item = _item(stage=50, last_reviewed=NOW - 89 * DAY)
        assert not self.model.is_due(item, NOW)
        assert self.model.is_due(item, NOW + DAY)

    def test_next_review_date(self) -> None:
        assert self.model.next_review_date(_item()) is None
        item = _item(stage=1, last_reviewed=NOW)
        assert self.model.next_review_date(item) == NOW + 4 * DAY

    def test_retention_decays_monotonically(self) -> None:
        item = _item(stage=1, last_reviewed=NOW)
        times = [NOW + offset * DAY // 2 for offset in range(0, 40)]
        values = [self.model.retention_probability(item, t) for t in times]
        assert values[0] == 100
        assert all(a >= b for a, b in zip(values, values[1:]))
        assert values[-1] < 50

    def test_retention_stays_in_bounds(self) -> None:
        # A review timestamp in the future clamps to 100
        item = _item(stage=0, last_reviewed=NOW + 10 * DAY)
        assert self.model.retention_probability(item, NOW) == 100
        # Decades late still yields a valid percentage
        stale = _item(stage=0, last_reviewed=NOW - 10_000 * DAY)
        assert self.model.retention_probability(stale, NOW) == 0

    def test_mastery_full_ladder_with_recent_scores(self) -> None:
        item = _item(stage=8, last_reviewed=NOW, scores=[100, 80, 90])
        # 60 points for the ladder + 90% of 40
        assert self.model.mastery_score(item) == 96

    def test_mastery_only_counts_last_three_reviews(self) -> None:
        item = _item(stage=8, last_reviewed=NOW, scores=[0, 100, 80, 90])
        assert self.model.mastery_score(item) == 96

    def test_mastery_partial_credit_without_scores(self) -> None:
        item = _item(stage=4, last_reviewed=NOW)
        # 4/8 of 60 + flat 20
        assert self.model.mastery_score(item) == 50

    def test_mastery_scores_without_progress(self) -> None:
        item = _item(stage=0, last_reviewed=NOW, scores=[50])
        assert self.model.mastery_score(item) == 20

    def test_mastery_rounds_halves_up(self) -> None:
        # 1/8 of 60 = 7.5, plus 20
        item = _item(stage=1, last_reviewed=NOW)
        assert self.model.mastery_score(item) == 28

    def test_mastery_saturates(self) -> None:
        item = _item(stage=200, last_reviewed=NOW, scores=[100, 100, 100])
        assert self.model.mastery_score(item) == 100

    def test_mastery_bounds(self) -> None:
        for stage in range(0, 12):
            for scores in ([], [0], [100], [0, 0, 0], [55, 70, 100]):
                score = self.model.mastery_score(_item(stage=stage, last_reviewed=NOW, scores=scores))
                assert 0 <= score <= 100

    # --- Overdue ---

    def test_due_but_not_overdue(self) -> None:
        # Stage 3: 10-day interval, overdue after 15 days
        item = _item(stage=3, last_reviewed=NOW - 15 * DAY)
        assert self.model.is_due(item, NOW)
        assert not self.model.is_overdue(item, NOW)

    def test_overdue_after_half_interval_late(self) -> None:
        item = _item(stage=3, last_reviewed=NOW - 15 * DAY - 1)
        assert self.model.is_overdue(item, NOW)

    def test_not_due_is_never_overdue(self) -> None:
        item = _item(stage=3, last_reviewed=NOW - 2 * DAY)
        assert not self.model.is_overdue(item, NOW)

    def test_never_reviewed_overdue_measured_from_creation(self) -> None:
        fresh = _item(created_at=NOW - DAY)
        stale = _item(created_at=NOW - 2 * DAY)
        assert not self.model.is_overdue(fresh, NOW)
        assert self.model.is_overdue(stale, NOW)

    # --- Custom ladders ---

    def test_custom_intervals(self) -> None:
        fast = RetentionModel(intervals=[1, 2])
        item = _item(stage=1, last_reviewed=NOW - 2 * DAY)
        assert fast.is_due(item, NOW)
        assert not self.model.is_due(item, NOW)
        assert fast.mastery_score(_item(stage=2, last_reviewed=NOW)) == 80

    def test_custom_decay_rate(self) -> None:
        slow = RetentionModel(decay_rate=0.05)
        item = _item(stage=2, last_reviewed=NOW - 7 * DAY)
        assert slow.retention_probability(item, NOW) == 95

    def test_invalid_ladders_rejected(self) -> None:
        with pytest.raises(ValueError):
            RetentionModel(intervals=[])
        with pytest.raises(ValueError):
            RetentionModel(intervals=[1, 0, 4])

    def test_module_shortcuts_use_default_ladder(self) -> None:
        item = _item(stage=2, last_reviewed=NOW - 7 * DAY, scores=[80])
        assert is_due(item, NOW)
        assert retention_probability(item, NOW) == 86
        assert mastery_score(item) == 47


# --- Review ladder ---


class TestReviewSchedule:
    def setup_method(self) -> None:
        self.model = RetentionModel(intervals=[1, 4, 7, 10, 14, 30, 60, 90])

    def test_new_item_projects_from_creation(self) -> None:
        schedule = self.model.review_schedule(_item(), NOW)
        assert [(s.stage, s.interval_days) for s in schedule] == [(1, 1), (2, 4)]
        assert schedule[0].review_date == NOW + DAY
        assert schedule[0].status is StageStatus.UPCOMING
        assert schedule[1].review_date == NOW + 5 * DAY

    def test_completed_next_and_projected_stages(self) -> None:
        item = _item(stage=2, last_reviewed=NOW - 8 * DAY)
        schedule = self.model.review_schedule(item, NOW)

        assert [s.status for s in schedule] == [
            StageStatus.COMPLETED,
            StageStatus.COMPLETED,
            StageStatus.DUE,
            StageStatus.UPCOMING,
        ]
        assert [s.interval_days for s in schedule] == [1, 4, 7, 10]
        assert schedule[0].review_date is None
        assert schedule[2].review_date == NOW - DAY
        assert schedule[3].review_date == NOW + 9 * DAY

    def test_last_stage_has_no_projection(self) -> None:
        item = _item(stage=7, last_reviewed=NOW)
        schedule = self.model.review_schedule(item, NOW)
        assert len(schedule) == 8
        assert schedule[-1].stage == 8
        assert schedule[-1].interval_days == 90

    def test_finished_ladder_only_completed(self) -> None:
        item = _item(stage=8, last_reviewed=NOW)
        schedule = self.model.review_schedule(item, NOW)
        assert len(schedule) == 8
        assert all(s.status is StageStatus.COMPLETED for s in schedule)


# --- Recording reviews ---


class TestRecordReview:
    def setup_method(self) -> None:
        self.model = RetentionModel()

    def test_advances_stage_and_logs(self) -> None:
        item = _item(stage=1, last_reviewed=NOW - 4 * DAY, scores=[70])
        updated = self.model.record_review(item, 90, ReviewType.FLASHCARD, now=NOW)

        assert updated.review_stage == 2
        assert updated.last_reviewed == NOW
        assert len(updated.history) == 2
        assert updated.history[-1] == ReviewLog(date=NOW, type=ReviewType.FLASHCARD, score=90)

    def test_original_item_untouched(self) -> None:
        item = _item()
        self.model.record_review(item, 100, now=NOW)
        assert item.review_stage == 0
        assert item.last_reviewed is None
        assert item.history == ()

    def test_reviewed_item_is_no_longer_due(self) -> None:
        item = _item()
        updated = self.model.record_review(item, 80, now=NOW)
        assert not updated.is_new
        assert not self.model.is_due(updated, NOW)
        assert self.model.retention_probability(updated, NOW) == 100

    def test_defaults_to_manual_review(self) -> None:
        updated = self.model.record_review(_item(), 60, now=NOW)
        assert updated.history[-1].type is ReviewType.MANUAL

    def test_rejects_out_of_range_scores(self) -> None:
        with pytest.raises(ValueError):
            self.model.record_review(_item(), 101, now=NOW)
        with pytest.raises(ValueError):
            self.model.record_review(_item(), -1, now=NOW)


# --- Study-time estimates ---


class TestEstimator:
    def test_content_load(self) -> None:
        item = _item(concept_count=3, flashcard_count=5, quiz_count=4)
        assert content_load(item) == 12.5

    def test_learn_and_review_estimates(self) -> None:
        item = _item(concept_count=3, flashcard_count=5, quiz_count=4)
        assert estimate_study_time(item, TaskType.LEARN) == 28  # 15 + 12.5
        assert estimate_study_time(item, TaskType.REVIEW) == 11  # 5 + 6.25

    def test_empty_item_base_times(self) -> None:
        item = _item()
        assert estimate_study_time(item, TaskType.LEARN) == 15
        assert estimate_study_time(item, TaskType.REVIEW) == 5

    def test_halves_round_up(self) -> None:
        item = _item(flashcard_count=3)  # load 1.5
        assert estimate_study_time(item, TaskType.LEARN) == 17
        assert estimate_study_time(_item(quiz_count=3), TaskType.REVIEW) == 7

    def test_estimates_are_reproducible(self) -> None:
        a = _item(id="a", concept_count=7, flashcard_count=9, quiz_count=2)
        b = _item(id="b", concept_count=7, flashcard_count=9, quiz_count=2)
        assert estimate_study_time(a, TaskType.LEARN) == estimate_study_time(b, TaskType.LEARN)

    def test_quiz_mode_has_no_estimate(self) -> None:
        with pytest.raises(ValueError):
            estimate_study_time(_item(), TaskType.QUIZ)


# --- Global performance ---


class TestGlobalPerformance:
    def test_empty_collection(self) -> None:
        stats = analyze_global_performance([], now=NOW)
        assert stats == PerformanceStats()
        assert stats.global_mastery == 0
        assert stats.retention_average == 0
        assert stats.due_count == 0
        assert stats.overdue_count == 0
        assert stats.upcoming_count == 0

    def test_mixed_collection(self) -> None:
        items = [
            _item(id="new"),  # due, mastery 0, retention 0
            _item(id="on_time", stage=2, last_reviewed=NOW - 7 * DAY, scores=[80]),  # due, 47, 86
            _item(id="fresh", stage=1, last_reviewed=NOW - DAY),  # upcoming, 28, 96
            _item(id="late", stage=3, last_reviewed=NOW - 20 * DAY),  # overdue, 43, 74
        ]
        stats = analyze_global_performance(items, now=NOW)

        assert stats.global_mastery == 30  # 118 / 4 = 29.5
        assert stats.retention_average == 64
        assert stats.due_count == 3
        assert stats.overdue_count == 1
        assert stats.upcoming_count == 1

    def test_accepts_custom_model(self) -> None:
        items = [_item(stage=1, last_reviewed=NOW - 2 * DAY)]
        default_stats = analyze_global_performance(items, now=NOW)
        fast_stats = analyze_global_performance(
            items, now=NOW, model=RetentionModel(intervals=[1, 2])
        )
        assert default_stats.due_count == 0
        assert fast_stats.due_count == 1

    def test_accepts_any_iterable(self) -> None:
        stats = analyze_global_performance((item for item in [_item()]), now=NOW)
        assert stats.due_count == 1
        assert stats.upcoming_count == 0
