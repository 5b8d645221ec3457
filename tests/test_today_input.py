from __future__ import annotations

import datetime as dt
import unittest

from noah.engine import SYMPTOM_NONE
from shared.today_input import checkin_payload, parse_reminder_time, parse_weight_input


class WeightInputTests(unittest.TestCase):
    def test_accepts_common_forms(self):
        self.assertEqual(parse_weight_input("195"), 195.0)
        self.assertEqual(parse_weight_input(" 195.44 "), 195.4)
        self.assertEqual(parse_weight_input("195 lbs"), 195.0)
        self.assertEqual(parse_weight_input("195lb"), 195.0)
        self.assertEqual(parse_weight_input("195,5"), 195.5)

    def test_rejects_garbage_and_implausible_values(self):
        for raw in ("", None, "abc", "0", "-5", "20", "1500"):
            self.assertIsNone(parse_weight_input(raw))


class ReminderTimeTests(unittest.TestCase):
    def test_parses_hh_mm(self):
        self.assertEqual(parse_reminder_time("07:30"), dt.time(7, 30))

    def test_bad_value_uses_fallback(self):
        self.assertEqual(parse_reminder_time("7am"), dt.time(8, 0))
        self.assertEqual(parse_reminder_time("25:00", fallback=dt.time(9, 0)), dt.time(9, 0))


class CheckinPayloadTests(unittest.TestCase):
    def test_only_answered_fields_are_included(self):
        self.assertEqual(checkin_payload(), {})
        self.assertEqual(checkin_payload(energy_level=6), {"energy_level": 6})

    def test_full_payload_is_normalized(self):
        data = checkin_payload(
            hunger_level=12,
            energy_level="4",
            workout=True,
            symptoms=["Nausea", SYMPTOM_NONE],
            notes="  slept well  ",
        )
        self.assertEqual(data, {
            "hunger_level": 10,
            "energy_level": 4,
            "workout": True,
            "symptoms": {SYMPTOM_NONE},
            "notes": "slept well",
        })

    def test_blank_notes_are_dropped(self):
        self.assertNotIn("notes", checkin_payload(notes="   "))

    def test_workout_false_is_an_answer(self):
        self.assertEqual(checkin_payload(workout=False), {"workout": False})


if __name__ == "__main__":
    unittest.main()
