"""Night-window conflict detection for a scheduling pass."""
import datetime as dt
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from core import TextCategory
from core.constants import NIGHT_WINDOW_SKIPPED_ENTRIES

from .curve import ForgettingCurve, default_curve
from .night_window import NightWindowPolicy, default_policy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationConflict:
    """Postponement proposal for one scheduling pass. Never persisted."""
    item: Any
    all_scheduled_dates: tuple[dt.datetime, ...]
    conflicting_indices: tuple[int, ...]
    postponed_dates: tuple[dt.datetime, ...]
    user_region: str

    @property
    def conflicting_dates(self) -> tuple[dt.datetime, ...]:
        return tuple(self.all_scheduled_dates[i] for i in self.conflicting_indices)

    @property
    def final_schedule(self) -> list[dt.datetime]:
        """Non-conflicting originals plus the postponed dates, sorted."""
        flagged = set(self.conflicting_indices)
        kept = [date for i, date in enumerate(self.all_scheduled_dates) if i not in flagged]
        return sorted(kept + list(self.postponed_dates))

    @property
    def alert_message(self) -> str:
        count = len(self.conflicting_indices)
        noun = "reminder" if count == 1 else "reminders"
        return (
            f"{count} {noun} would arrive during night hours ({self.user_region}). "
            f"Postpone them to the next morning or schedule anyway?"
        )


class ConflictResolver:
    """Combines curve output with a night-window policy.

    The first entries of every schedule are near-immediate and always delivered,
    so they are skipped positionally. For the short category this still checks
    the 300 s entry.
    """

    def __init__(
        self,
        policy: NightWindowPolicy = default_policy,
        curve: ForgettingCurve = default_curve,
        skipped_entries: int = NIGHT_WINDOW_SKIPPED_ENTRIES,
    ):
        self.policy = policy
        self.curve = curve
        self.skipped_entries = skipped_entries

    def resolve(
        self,
        item: Any,
        start: dt.datetime,
        category: TextCategory,
        multiplier: Optional[float] = None,
    ) -> Optional[NotificationConflict]:
        """Check the schedule for ``item`` and return a conflict, or None if it can be used as-is."""
        if multiplier is None:
            schedule = self.curve.reminder_timestamps(start, category)
        else:
            schedule = self.curve.adjusted_reminder_timestamps(start, category, multiplier)
        return self.resolve_schedule(item, schedule)

    def resolve_schedule(self, item: Any, schedule: Sequence[dt.datetime]) -> Optional[NotificationConflict]:
        """Same as ``resolve`` over an already computed schedule."""
        flagged = tuple(
            i for i in range(self.skipped_entries, len(schedule))
            if self.policy.is_in_night_window(schedule[i])
        )
        if not flagged:
            return None

        postponed = tuple(self.policy.next_morning_wake_time(schedule[i]) for i in flagged)
        logger.debug("Night window conflict at positions %s of %d reminders", flagged, len(schedule))
        return NotificationConflict(
            item=item,
            all_scheduled_dates=tuple(schedule),
            conflicting_indices=flagged,
            postponed_dates=postponed,
            user_region=self.policy.detect_user_region(),
        )
