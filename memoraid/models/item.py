from dataclasses import dataclass, field
from enum import Enum


class ReviewType(Enum):
    """How a review was carried out."""

    QUIZ = "quiz"
    FLASHCARD = "flashcard"
    ACTIVE_LEARNING = "active-learning"
    MANUAL = "manual"


@dataclass(frozen=True)
class ReviewLog:
    """A single completed review of a learning item."""

    date: int  # Epoch ms
    type: ReviewType
    score: int  # 0-100, percentage correct


@dataclass(frozen=True)
class LearningItem:
    """A capsule of learning content together with its review progression."""

    id: str
    created_at: int  # Epoch ms
    title: str = ""
    last_reviewed: int | None = None  # Epoch ms, None if never reviewed
    review_stage: int = 0  # Completed spaced-repetition cycles
    history: tuple[ReviewLog, ...] = field(default_factory=tuple)
    concept_count: int = 0
    flashcard_count: int = 0
    quiz_count: int = 0

    @property
    def is_new(self) -> bool:
        """Return True if the item has never been reviewed."""
        return self.last_reviewed is None
