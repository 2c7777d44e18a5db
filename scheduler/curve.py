"""Ebbinghaus forgetting-curve intervals.

Three fixed 11-step interval sets, one per text category, plus an adaptive
variant stretched or compressed by a per-item multiplier.
"""
import datetime as dt
from typing import Optional, Protocol

from core import TextCategory
from core.constants import MAX_ADJUSTED_INTERVAL, MIN_ADJUSTED_INTERVAL

IntervalSet = tuple[float, ...]

# Compressed schedule with faster early repetitions (< 150 chars)
SHORT_TEXT_INTERVALS: IntervalSet = (
    3,          # 3 seconds
    15,         # 15 seconds
    90,         # 1.5 minutes
    300,        # 5 minutes
    1800,       # 30 minutes
    9000,       # 2.5 hours
    43200,      # 12 hours
    172800,     # 2 days
    864000,     # 10 days
    5184000,    # ~2 months
    31536000,   # ~1 year
)

# Standard curve (150-400 chars)
MEDIUM_TEXT_INTERVALS: IntervalSet = (
    5,          # 5 seconds
    25,         # 25 seconds
    120,        # 2 minutes
    600,        # 10 minutes
    3600,       # 1 hour
    18000,      # 5 hours
    86400,      # 1 day
    432000,     # 5 days
    2160000,    # 25 days
    10368000,   # ~4 months
    63072000,   # ~2 years
)

# Extended schedule with more time between repetitions (> 400 chars)
LONG_TEXT_INTERVALS: IntervalSet = (
    10,         # 10 seconds
    60,         # 1 minute
    300,        # 5 minutes
    1800,       # 30 minutes
    10800,      # 3 hours
    43200,      # 12 hours
    259200,     # 3 days
    1296000,    # 15 days
    5184000,    # 60 days
    20736000,   # ~8 months
    94608000,   # ~3 years
)

_INTERVALS = {
    TextCategory.SHORT: SHORT_TEXT_INTERVALS,
    TextCategory.MEDIUM: MEDIUM_TEXT_INTERVALS,
    TextCategory.LONG: LONG_TEXT_INTERVALS,
}


class Curve(Protocol):
    """Protocol for reminder curves."""

    def reminder_timestamps(self, start: dt.datetime, category: TextCategory) -> list[dt.datetime]:
        """Calculate every reminder time for an item created at ``start``."""
        ...

    def adjusted_reminder_timestamps(
        self, start: dt.datetime, category: TextCategory, multiplier: float
    ) -> list[dt.datetime]:
        """Calculate reminder times stretched by an adaptive multiplier."""
        ...


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def _offset(start: dt.datetime, intervals: IntervalSet) -> list[dt.datetime]:
    return [start + dt.timedelta(seconds=interval) for interval in intervals]


class ForgettingCurve:
    """Interval lookup and reminder timestamp generation.

    All methods are pure: identical inputs always give identical outputs.
    """

    @staticmethod
    def base_intervals(category: TextCategory) -> IntervalSet:
        """Return the interval set for a text category."""
        return _INTERVALS[TextCategory(category)]

    @staticmethod
    def reminder_timestamps(start: dt.datetime, category: TextCategory = TextCategory.MEDIUM) -> list[dt.datetime]:
        """Calculate all reminder times from a start time and a text category."""
        return _offset(start, ForgettingCurve.base_intervals(category))

    @staticmethod
    def adjusted_intervals(category: TextCategory, multiplier: float) -> IntervalSet:
        """Return intervals scaled by ``multiplier``.

        Args:
            category: Text category determining the base intervals
            multiplier: Adaptive multiplier, normally already within [0.5, 2.0]

        Returns:
            Intervals clamped to [5 seconds, ~5 years]. Degenerate multipliers
            (zero, negative, huge) are clamped rather than rejected.
        """
        return tuple(
            _clamp(interval * multiplier, MIN_ADJUSTED_INTERVAL, MAX_ADJUSTED_INTERVAL)
            for interval in ForgettingCurve.base_intervals(category)
        )

    @staticmethod
    def adjusted_reminder_timestamps(
        start: dt.datetime, category: TextCategory, multiplier: float
    ) -> list[dt.datetime]:
        """Calculate reminder times with an adaptive multiplier applied."""
        return _offset(start, ForgettingCurve.adjusted_intervals(category, multiplier))

    @staticmethod
    def next_reminder(
        start: dt.datetime,
        category: TextCategory,
        now: dt.datetime,
        multiplier: Optional[float] = None,
    ) -> Optional[dt.datetime]:
        """Return the first reminder strictly after ``now``, or None once exhausted."""
        if multiplier is None:
            dates = ForgettingCurve.reminder_timestamps(start, category)
        else:
            dates = ForgettingCurve.adjusted_reminder_timestamps(start, category, multiplier)
        for date in dates:
            if date > now:
                return date
        return None


# Default curve instance
default_curve = ForgettingCurve()
