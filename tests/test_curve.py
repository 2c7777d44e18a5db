import unittest
from datetime import datetime, timedelta, timezone

from core import TextCategory
from scheduler.curve import ForgettingCurve, MEDIUM_TEXT_INTERVALS


START = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestForgettingCurve(unittest.TestCase):
    """Tests for the forgetting-curve interval sets."""

    def test_each_set_has_eleven_increasing_entries(self):
        """Every interval set should have 11 strictly increasing entries."""
        for category in TextCategory:
            intervals = ForgettingCurve.base_intervals(category)

            self.assertEqual(len(intervals), 11)
            for earlier, later in zip(intervals, intervals[1:]):
                self.assertLess(earlier, later)
            self.assertGreaterEqual(intervals[0], 1)
            self.assertGreaterEqual(intervals[-1], 365 * 86400)

    def test_short_is_faster_than_long(self):
        """Short texts should be repeated sooner than long ones at every step."""
        short = ForgettingCurve.base_intervals(TextCategory.SHORT)
        long = ForgettingCurve.base_intervals(TextCategory.LONG)

        for s, l in zip(short, long):
            self.assertLess(s, l)

    def test_medium_values(self):
        self.assertEqual(ForgettingCurve.base_intervals(TextCategory.MEDIUM)[3], 600)
        self.assertEqual(ForgettingCurve.base_intervals(TextCategory.MEDIUM)[-1], 63072000)

    def test_reminder_timestamps_add_intervals(self):
        """Reminder i should be start + interval i for every category."""
        for category in TextCategory:
            dates = ForgettingCurve.reminder_timestamps(START, category)
            intervals = ForgettingCurve.base_intervals(category)

            self.assertEqual(len(dates), 11)
            for date, interval in zip(dates, intervals):
                self.assertEqual(date, START + timedelta(seconds=interval))

    def test_reminder_timestamps_default_to_medium(self):
        dates = ForgettingCurve.reminder_timestamps(START)
        self.assertEqual(dates[-1] - START, timedelta(seconds=MEDIUM_TEXT_INTERVALS[-1]))

    def test_reminder_timestamps_are_idempotent(self):
        """Identical inputs should give identical schedules."""
        self.assertEqual(
            ForgettingCurve.reminder_timestamps(START, TextCategory.LONG),
            ForgettingCurve.reminder_timestamps(START, TextCategory.LONG),
        )

    def test_adjusted_intervals_scale(self):
        """A multiplier should scale each interval."""
        adjusted = ForgettingCurve.adjusted_intervals(TextCategory.MEDIUM, 2.0)
        self.assertEqual(adjusted[3], 1200)
        self.assertEqual(adjusted[6], 172800)

    def test_adjusted_intervals_clamped(self):
        """Adjusted intervals should stay within [5 s, ~5 years] for any multiplier."""
        for multiplier in (0, -3, 0.5, 1000):
            for category in TextCategory:
                for interval in ForgettingCurve.adjusted_intervals(category, multiplier):
                    self.assertGreaterEqual(interval, 5)
                    self.assertLessEqual(interval, 157_680_000)

    def test_adjusted_short_first_interval_raised_to_minimum(self):
        """The 3 s short interval should be raised to the 5 s minimum."""
        self.assertEqual(ForgettingCurve.adjusted_intervals(TextCategory.SHORT, 1.0)[0], 5)

    def test_adjusted_reminder_timestamps(self):
        dates = ForgettingCurve.adjusted_reminder_timestamps(START, TextCategory.LONG, 0.5)
        self.assertEqual(dates[4], START + timedelta(seconds=5400))

    def test_next_reminder(self):
        """Next reminder should be the first one strictly after now."""
        now = START + timedelta(seconds=600)
        self.assertEqual(
            ForgettingCurve.next_reminder(START, TextCategory.MEDIUM, now),
            START + timedelta(seconds=3600),
        )

    def test_next_reminder_exhausted(self):
        """No reminder should be returned once the schedule is over."""
        now = START + timedelta(days=365 * 4)
        self.assertIsNone(ForgettingCurve.next_reminder(START, TextCategory.LONG, now))


if __name__ == "__main__":
    unittest.main()
