"""Do-not-disturb night window.

Timestamps without tzinfo are taken as local wall-clock times. Aware timestamps
are converted to the policy's tz (the system zone when none is configured)
before the hour is read.
"""
import datetime as dt
import locale
from dataclasses import dataclass
from typing import Optional

from core.constants import MORNING_WAKE_HOUR, NIGHT_WINDOW_START_HOUR


@dataclass(frozen=True)
class NightWindowPolicy:
    """Blackout range of local hours, [start_hour, wake_hour), wrapping past midnight."""
    start_hour: int = NIGHT_WINDOW_START_HOUR
    wake_hour: int = MORNING_WAKE_HOUR
    tz: Optional[dt.tzinfo] = None

    def __post_init__(self):
        for name in ("start_hour", "wake_hour"):
            value = getattr(self, name)
            if not isinstance(value, int) or not 0 <= value <= 23:
                raise ValueError(f"{name} must be an hour between 0 and 23, got {value!r}")

    def localize(self, timestamp: dt.datetime) -> dt.datetime:
        if timestamp.tzinfo is None:
            return timestamp
        return timestamp.astimezone(self.tz)

    def is_in_night_window(self, timestamp: dt.datetime) -> bool:
        """Check whether the local hour of ``timestamp`` is inside the window."""
        hour = self.localize(timestamp).hour
        if self.start_hour > self.wake_hour:
            return hour >= self.start_hour or hour < self.wake_hour
        return self.start_hour <= hour < self.wake_hour

    def next_morning_wake_time(self, after: dt.datetime) -> dt.datetime:
        """Return the next wake time strictly after ``after``.

        Same day when the local hour is still before the wake hour, next day otherwise.
        The wall time is localized on the wake day, so a DST change overnight
        does not shift it.
        """
        local = self.localize(after)
        day = local.date()
        if local.hour >= self.wake_hour:
            day += dt.timedelta(days=1)
        wake = dt.datetime.combine(day, dt.time(self.wake_hour))
        if after.tzinfo is None:
            return wake
        if self.tz is None:
            return wake.astimezone()
        return wake.replace(tzinfo=self.tz)

    def detect_user_region(self) -> str:
        """Locale and timezone tag for display only."""
        zone = getattr(self.tz, "key", None)
        if zone is None:
            zone = dt.datetime.now(self.tz).astimezone(self.tz).tzname() or "local"
        language = locale.getlocale()[0]
        if language:
            return f"{language} ({zone})"
        return zone


default_policy = NightWindowPolicy()
