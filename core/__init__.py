# Domain models
import datetime as dt
import enum
import uuid
from dataclasses import dataclass, field
from typing import Optional

from .constants import (
    BACK_CONTENT_PREVIEW_LENGTH,
    EASY_DIFFICULTY_MULTIPLIER,
    FRONT_CONTENT_PREVIEW_LENGTH,
    GOOD_DIFFICULTY_MULTIPLIER,
    HARD_DIFFICULTY_MULTIPLIER,
)


def new_id() -> str:
    return str(uuid.uuid4())


def now() -> dt.datetime:
    """Current local time as an aware datetime."""
    return dt.datetime.now().astimezone()


class TextCategory(str, enum.Enum):
    """Complexity category of a text, selecting its reminder intervals."""
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def description(self) -> str:
        return _CATEGORY_DESCRIPTIONS[self]

    def bumped(self) -> "TextCategory":
        """Return the next longer category (long stays long)."""
        if self is TextCategory.SHORT:
            return TextCategory.MEDIUM
        return TextCategory.LONG

    @classmethod
    def from_value(cls, value: Optional[str], default: Optional["TextCategory"]) -> Optional["TextCategory"]:
        """Decode a stored category, falling back to ``default`` for missing or unknown values."""
        if isinstance(value, cls):
            return value
        if not value:
            return default
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default


_CATEGORY_DESCRIPTIONS = {
    TextCategory.SHORT: "< 150 characters - Quick review intervals",
    TextCategory.MEDIUM: "150-400 characters - Standard intervals",
    TextCategory.LONG: "> 400 characters - Extended intervals",
}


class ReviewDifficulty(str, enum.Enum):
    """Self-reported difficulty of a flashcard review."""
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @property
    def interval_multiplier(self) -> float:
        return _DIFFICULTY_MULTIPLIERS[self]

    @property
    def description(self) -> str:
        return _DIFFICULTY_DESCRIPTIONS[self]


_DIFFICULTY_MULTIPLIERS = {
    ReviewDifficulty.HARD: HARD_DIFFICULTY_MULTIPLIER,
    ReviewDifficulty.GOOD: GOOD_DIFFICULTY_MULTIPLIER,
    ReviewDifficulty.EASY: EASY_DIFFICULTY_MULTIPLIER,
}

_DIFFICULTY_DESCRIPTIONS = {
    ReviewDifficulty.HARD: "Didn't remember well",
    ReviewDifficulty.GOOD: "Remembered correctly",
    ReviewDifficulty.EASY: "Too easy!",
}


@dataclass
class StudyProgress:
    """Review performance and adaptive multiplier of a flashcard.

    Only ``scheduler.review.record_review`` and ``scheduler.review.reset``
    produce new values; the multiplier always stays within [0.5, 2.0].
    """
    total_reviews: int = 0
    hard_count: int = 0
    good_count: int = 0
    easy_count: int = 0
    last_review_date: Optional[dt.datetime] = None
    current_interval_multiplier: float = 1.0

    @property
    def success_rate(self) -> float:
        if self.total_reviews <= 0:
            return 0.0
        return (self.easy_count + self.good_count) / self.total_reviews

    @property
    def average_difficulty(self) -> str:
        if self.total_reviews <= 0:
            return "Not reviewed yet"
        if self.easy_count > self.good_count and self.easy_count > self.hard_count:
            return "Easy"
        if self.hard_count > self.good_count and self.hard_count > self.easy_count:
            return "Hard"
        return "Normal"

    @property
    def has_been_reviewed(self) -> bool:
        return self.total_reviews > 0


@dataclass
class RecallItem:
    """A single piece of information the user wants to remember."""
    content: str = ""
    id: str = field(default_factory=new_id)
    created_at: dt.datetime = field(default_factory=now)
    text_category: TextCategory = TextCategory.MEDIUM
    is_manually_overridden: bool = False

    @property
    def character_count(self) -> int:
        return len(self.content)


@dataclass
class Flashcard:
    """A front/back card with adaptive review progress."""
    front_content: str = ""
    back_content: str = ""
    id: str = field(default_factory=new_id)
    created_at: dt.datetime = field(default_factory=now)
    text_category: TextCategory = TextCategory.MEDIUM
    is_manually_overridden: bool = False
    study_progress: StudyProgress = field(default_factory=StudyProgress)

    @property
    def character_count(self) -> int:
        return len(self.front_content) + len(self.back_content)

    @property
    def combined_content(self) -> str:
        """Front and back joined, used for complexity analysis."""
        return f"{self.front_content} {self.back_content}"

    @property
    def front_preview(self) -> str:
        return _preview(self.front_content, FRONT_CONTENT_PREVIEW_LENGTH)

    @property
    def back_preview(self) -> str:
        return _preview(self.back_content, BACK_CONTENT_PREVIEW_LENGTH)

    @property
    def has_been_reviewed(self) -> bool:
        return self.study_progress.has_been_reviewed


def _preview(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


__all__ = [
    "TextCategory",
    "ReviewDifficulty",
    "StudyProgress",
    "RecallItem",
    "Flashcard",
    "new_id",
    "now",
]
