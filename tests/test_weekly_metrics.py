from __future__ import annotations

import datetime as dt
import unittest

from noah.engine import DailyLogStore, WeightSeries
from shared.weekly_metrics import adherence_rate, weight_change_over

END = dt.date(2026, 10, 19)


class AdherenceTests(unittest.TestCase):
    def test_counts_pill_days_in_window(self):
        store = DailyLogStore()
        for n in (0, 1, 3, 6, 7):
            store.upsert(END - dt.timedelta(days=n), {"pill_taken": True})
        # day 7 is outside the 7-day window
        self.assertAlmostEqual(adherence_rate(store, END, 7), 4 / 7)

    def test_empty_window(self):
        self.assertEqual(adherence_rate(DailyLogStore(), END, 0), 0.0)
        self.assertEqual(adherence_rate(DailyLogStore(), END, 7), 0.0)


class WeightChangeTests(unittest.TestCase):
    def test_change_is_last_minus_first_inside_window(self):
        series = WeightSeries()
        series.upsert(END - dt.timedelta(days=10), 205.0)
        series.upsert(END - dt.timedelta(days=6), 200.0)
        series.upsert(END - dt.timedelta(days=2), 198.5)
        series.upsert(END, 197.0)
        self.assertEqual(weight_change_over(series, END, 7), -3.0)

    def test_needs_two_weigh_ins(self):
        series = WeightSeries()
        series.upsert(END, 197.0)
        self.assertIsNone(weight_change_over(series, END, 7))


if __name__ == "__main__":
    unittest.main()
