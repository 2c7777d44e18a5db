"""Adaptive multiplier tracking from self-rated review difficulty."""
import datetime as dt
from dataclasses import replace
from typing import Iterable, Optional

from core import ReviewDifficulty, StudyProgress, now as local_now
from core.constants import MAXIMUM_INTERVAL_MULTIPLIER, MINIMUM_INTERVAL_MULTIPLIER


def clamp_multiplier(value: float) -> float:
    return max(MINIMUM_INTERVAL_MULTIPLIER, min(MAXIMUM_INTERVAL_MULTIPLIER, value))


def record_review(
    progress: StudyProgress,
    difficulty: ReviewDifficulty,
    now: Optional[dt.datetime] = None,
) -> StudyProgress:
    """Return progress updated with one review.

    The multiplier is clamped after every review, not only at the end, so a
    history is a left fold: [easy, easy, easy, hard] ends at 2.0 * 0.7 = 1.4,
    while clamping the raw product once would give 1.5379.

    Args:
        progress: Current progress (left untouched)
        difficulty: Rating given by the user
        now: Review time; read from the clock when omitted

    Returns:
        A new StudyProgress
    """
    difficulty = ReviewDifficulty(difficulty)
    counts = {
        "hard_count": progress.hard_count,
        "good_count": progress.good_count,
        "easy_count": progress.easy_count,
    }
    counts[f"{difficulty.value}_count"] += 1
    return replace(
        progress,
        total_reviews=progress.total_reviews + 1,
        last_review_date=now if now is not None else local_now(),
        current_interval_multiplier=clamp_multiplier(
            progress.current_interval_multiplier * difficulty.interval_multiplier
        ),
        **counts,
    )


def reset(progress: StudyProgress) -> StudyProgress:
    """Return progress with all counters zeroed and the multiplier back at 1.0."""
    return replace(
        progress,
        total_reviews=0,
        hard_count=0,
        good_count=0,
        easy_count=0,
        last_review_date=None,
        current_interval_multiplier=1.0,
    )


def success_rate(progress: StudyProgress) -> float:
    """(easy + good) / total, 0.0 before the first review."""
    return progress.success_rate


def replay(
    difficulties: Iterable[ReviewDifficulty],
    progress: Optional[StudyProgress] = None,
    now: Optional[dt.datetime] = None,
) -> StudyProgress:
    """Fold a whole review history into a progress value."""
    result = progress if progress is not None else StudyProgress()
    for difficulty in difficulties:
        result = record_review(result, difficulty, now=now)
    return result
