from __future__ import annotations

import datetime as dt
import unittest

from domain.datekey import InvalidDateKeyError
from noah.engine import (
    SYMPTOM_NONE,
    DailyLog,
    DailyLogStore,
    UserProfile,
    WeightSeries,
    goal_progress,
    halfway_distance,
    longest_streak,
    normalize_symptoms,
    pill_streak,
    start_weight,
    toggle_symptom,
    weight_lost,
)

TODAY = dt.date(2026, 10, 19)


def _days_ago(n: int) -> dt.date:
    return TODAY - dt.timedelta(days=n)


class DailyLogStoreTests(unittest.TestCase):
    def test_get_missing_day_returns_empty_record(self):
        store = DailyLogStore()
        log = store.get(TODAY)
        self.assertIsInstance(log, DailyLog)
        self.assertTrue(log.is_empty())
        self.assertNotIn(TODAY, store)

    def test_upsert_merges_instead_of_replacing(self):
        store = DailyLogStore()
        store.upsert(TODAY, {"weight": 195.0})
        store.upsert(TODAY, {"workout": True})
        log = store.get(TODAY)
        self.assertEqual(log.weight, 195.0)
        self.assertTrue(log.workout)
        self.assertEqual(log.to_dict(), {"weight": 195.0, "workout": True})

    def test_upsert_new_value_wins_per_key_and_is_idempotent(self):
        store = DailyLogStore()
        store.upsert(TODAY, {"notes": "first", "energy_level": 4})
        store.upsert(TODAY, {"notes": "second"})
        store.upsert(TODAY, {"notes": "second"})
        log = store.get(TODAY)
        self.assertEqual(log.notes, "second")
        self.assertEqual(log.energy_level, 4)
        self.assertEqual(len(store), 1)

    def test_levels_are_clamped_and_unknown_fields_ignored(self):
        store = DailyLogStore()
        store.upsert(TODAY, {"hunger_level": 14, "energy_level": 0, "mood": "great"})
        log = store.get(TODAY)
        self.assertEqual(log.hunger_level, 10)
        self.assertEqual(log.energy_level, 1)
        self.assertNotIn("mood", log.to_dict())

    def test_string_keys_are_accepted(self):
        store = DailyLogStore({"2026-10-18": {"pill_taken": True}})
        self.assertTrue(store.get(dt.date(2026, 10, 18)).pill_taken)

    def test_returned_record_is_a_copy(self):
        store = DailyLogStore()
        store.upsert(TODAY, {"symptoms": {"Nausea"}})
        store.get(TODAY).symptoms.add("Headache")
        self.assertEqual(store.get(TODAY).symptoms, {"Nausea"})

    def test_clear_empties_store(self):
        store = DailyLogStore()
        store.upsert(TODAY, {"pill_taken": True})
        store.upsert(_days_ago(1), {"pill_taken": True})
        store.clear()
        self.assertEqual(len(store), 0)
        self.assertEqual(store.pill_count(), 0)

    def test_dates_are_sorted_and_pill_count_counts_taken_days(self):
        store = DailyLogStore()
        store.upsert(TODAY, {"pill_taken": True})
        store.upsert(_days_ago(2), {"pill_taken": True})
        store.upsert(_days_ago(1), {"weight": 190.0})
        self.assertEqual(store.dates(), [_days_ago(2), _days_ago(1), TODAY])
        self.assertEqual(store.pill_count(), 2)


class SymptomRuleTests(unittest.TestCase):
    def test_selecting_none_clears_other_symptoms(self):
        self.assertEqual(toggle_symptom({"Nausea", "Fatigue"}, SYMPTOM_NONE), {SYMPTOM_NONE})

    def test_selecting_a_symptom_removes_none(self):
        self.assertEqual(toggle_symptom({SYMPTOM_NONE}, "Nausea"), {"Nausea"})

    def test_selecting_again_deselects(self):
        self.assertEqual(toggle_symptom({"Nausea", "Fatigue"}, "Nausea"), {"Fatigue"})

    def test_mixed_input_normalizes_to_sentinel(self):
        self.assertEqual(normalize_symptoms(["Nausea", SYMPTOM_NONE]), {SYMPTOM_NONE})
        store = DailyLogStore()
        store.upsert(TODAY, {"symptoms": ["Headache", SYMPTOM_NONE]})
        self.assertEqual(store.get(TODAY).symptoms, {SYMPTOM_NONE})


class StreakTests(unittest.TestCase):
    def test_three_day_streak_with_gap_before(self):
        store = DailyLogStore()
        for n in (0, 1, 2):
            store.upsert(_days_ago(n), {"pill_taken": True})
        store.upsert(_days_ago(4), {"pill_taken": True})
        self.assertEqual(pill_streak(store, TODAY), 3)

    def test_no_pill_today_means_zero(self):
        store = DailyLogStore()
        for n in range(1, 10):
            store.upsert(_days_ago(n), {"pill_taken": True})
        self.assertEqual(pill_streak(store, TODAY), 0)

    def test_logged_day_without_pill_breaks_streak(self):
        store = DailyLogStore()
        store.upsert(TODAY, {"pill_taken": True})
        store.upsert(_days_ago(1), {"weight": 200.0})
        store.upsert(_days_ago(2), {"pill_taken": True})
        self.assertEqual(pill_streak(store, TODAY), 1)

    def test_longest_streak_finds_best_run(self):
        store = DailyLogStore()
        for n in (10, 9, 8, 7, 3, 2, 0):
            store.upsert(_days_ago(n), {"pill_taken": True})
        self.assertEqual(longest_streak(store), 4)
        self.assertEqual(longest_streak(DailyLogStore()), 0)


class WeightSeriesTests(unittest.TestCase):
    def test_same_display_day_keeps_one_entry_with_later_value(self):
        series = WeightSeries()
        series.upsert("Oct 19, 2026", 196.0, "1.5 mg")
        series.upsert("Oct 19, 2026", 195.2, "1.5 mg")
        self.assertEqual(len(series), 1)
        self.assertEqual(series.latest().weight, 195.2)

    def test_padded_and_unpadded_day_are_one_entry(self):
        series = WeightSeries()
        series.upsert("Oct 05, 2026", 200.0, "1.5 mg")
        series.upsert("Oct 5, 2026", 199.0, "1.5 mg")
        self.assertEqual(len(series), 1)
        self.assertEqual(series.latest().weight, 199.0)
        self.assertEqual(series.latest().date, "Oct 5, 2026")
        series.upsert(dt.date(2026, 10, 5), 198.0, "4 mg")
        self.assertEqual(len(series), 1)
        self.assertEqual(series.dose_change_points(), [])

    def test_out_of_order_inserts_stay_sorted(self):
        series = WeightSeries()
        inserts = [
            dt.date(2026, 10, 5),
            dt.date(2026, 9, 28),
            dt.date(2026, 10, 12),
            dt.date(2026, 9, 30),
        ]
        for i, d in enumerate(inserts):
            series.upsert(d, 200.0 - i, "1.5 mg")
            days = [e.day for e in series.entries()]
            self.assertEqual(days, sorted(days))
        self.assertEqual(series.latest().day, dt.date(2026, 10, 12))

    def test_sort_is_by_date_not_text(self):
        series = WeightSeries()
        series.upsert("Oct 2, 2026", 199.0)
        series.upsert("Sep 30, 2026", 200.0)
        series.upsert("Oct 10, 2026", 198.0)
        self.assertEqual([e.date for e in series], ["Sep 30, 2026", "Oct 2, 2026", "Oct 10, 2026"])

    def test_dose_change_points(self):
        series = WeightSeries()
        series.upsert(dt.date(2026, 9, 1), 210.0, "1.5 mg")
        series.upsert(dt.date(2026, 9, 8), 208.0, "1.5 mg")
        series.upsert(dt.date(2026, 9, 15), 206.0, "4 mg")
        series.upsert(dt.date(2026, 9, 22), 205.0, "4 mg")
        series.upsert(dt.date(2026, 9, 29), 203.0, "9 mg")
        changes = series.dose_change_points()
        self.assertEqual([(c.date, c.dose) for c in changes], [("Sep 15, 2026", "4 mg"), ("Sep 29, 2026", "9 mg")])

    def test_single_entry_has_no_change_point_and_empty_has_no_latest(self):
        series = WeightSeries()
        self.assertIsNone(series.latest())
        series.upsert(TODAY, 200.0, "1.5 mg")
        self.assertEqual(series.dose_change_points(), [])

    def test_unparsable_display_date_is_rejected(self):
        series = WeightSeries()
        with self.assertRaises(InvalidDateKeyError):
            series.upsert("someday", 200.0)
        self.assertEqual(len(series), 0)


class WeightAggregateTests(unittest.TestCase):
    def test_weight_lost_and_halfway(self):
        profile = UserProfile(name="Ann", current_weight="200", goal_weight="180")
        series = WeightSeries()
        self.assertEqual(weight_lost(profile, series), 0.0)
        series.upsert(TODAY, 193.0)
        self.assertEqual(weight_lost(profile, series), 7.0)
        self.assertEqual(halfway_distance(profile), 10.0)
        self.assertAlmostEqual(goal_progress(profile, series), 0.35)

    def test_unparsable_profile_weight_falls_back_to_zero(self):
        profile = UserProfile(name="Ann", current_weight="about 200", goal_weight="")
        self.assertEqual(start_weight(profile), 0.0)
        self.assertEqual(halfway_distance(profile), 0.0)
        self.assertEqual(goal_progress(profile, WeightSeries()), 0.0)

    def test_unknown_companion_and_personality_normalize(self):
        profile = UserProfile(name="Ann", companion="Dragon", personality="CALM")
        self.assertEqual(profile.companion, "dog")
        self.assertEqual(profile.personality, "calm")


if __name__ == "__main__":
    unittest.main()
