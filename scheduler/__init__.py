# Scheduling core
from .curve import ForgettingCurve, IntervalSet, default_curve
from .review import record_review, reset, success_rate, replay
from .night_window import NightWindowPolicy, default_policy
from .conflicts import ConflictResolver, NotificationConflict

__all__ = [
    "ForgettingCurve",
    "IntervalSet",
    "default_curve",
    "record_review",
    "reset",
    "success_rate",
    "replay",
    "NightWindowPolicy",
    "default_policy",
    "ConflictResolver",
    "NotificationConflict",
]
