"""Study-time estimates derived from the size of an item's content."""

from memoraid.models.item import LearningItem
from memoraid.models.plan import TaskType
from memoraid.utils import round_half_up

# Minutes per unit of content
CONCEPT_MINUTES = 2.0
FLASHCARD_MINUTES = 0.5
QUIZ_QUESTION_MINUTES = 1.0

LEARN_BASE_MINUTES = 15  # First read-through and comprehension
REVIEW_BASE_MINUTES = 5  # Quick recall check


def content_load(item: LearningItem) -> float:
    """Return the weighted size of the item's concepts, flashcards and quiz."""
    return (
        item.concept_count * CONCEPT_MINUTES
        + item.flashcard_count * FLASHCARD_MINUTES
        + item.quiz_count * QUIZ_QUESTION_MINUTES
    )


def estimate_study_time(item: LearningItem, mode: TaskType) -> int:
    """Estimate how many minutes a study pass over the item takes.

    A first ``LEARN`` pass covers the whole content; a ``REVIEW`` pass only
    tests recall and takes roughly half as long per unit.

    Raises:
        ValueError: If asked for a mode other than learn or review.
    """
    load = content_load(item)
    if mode is TaskType.LEARN:
        return round_half_up(LEARN_BASE_MINUTES + load)
    if mode is TaskType.REVIEW:
        return round_half_up(REVIEW_BASE_MINUTES + load / 2)
    raise ValueError(f"No study-time estimate for {mode.value!r} tasks")
