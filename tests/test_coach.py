from __future__ import annotations

import unittest

from noah.coach import daily_insights, reply


def _summary(**kw):
    base = {
        "name": "Ann",
        "streak": 0,
        "longest_streak": 0,
        "total_entries": 0,
        "pill_taken_today": False,
        "latest_weight": None,
        "weight_lost": 0.0,
        "goal_progress": 0.0,
        "dose_label": "",
        "timer_state": "idle",
    }
    base.update(kw)
    return base


class DailyInsightsTests(unittest.TestCase):
    def test_reminds_when_pill_not_logged(self):
        lines = daily_insights(_summary())
        self.assertIn("isn't logged yet", lines[0])

    def test_timer_running_message(self):
        lines = daily_insights(_summary(pill_taken_today=True, timer_state="running"))
        self.assertIn("Hold off on food", lines[0])

    def test_streak_loss_and_dose_lines(self):
        lines = daily_insights(
            _summary(pill_taken_today=True, streak=5, total_entries=9, weight_lost=6.5, dose_label="4 mg"),
            personality="calm",
        )
        self.assertTrue(lines[0].startswith("Nice and steady!"))
        self.assertIn("**5-day streak**", lines[1])
        self.assertIn("6.5 lbs", lines[2])
        self.assertEqual(lines[3], "Current dose: 4 mg.")

    def test_broken_streak_is_encouraged(self):
        lines = daily_insights(_summary(total_entries=4, streak=0))
        self.assertTrue(any("starts again" in line for line in lines))


class ReplyTests(unittest.TestCase):
    def test_keyword_reply(self):
        self.assertIn("Nausea is common", reply("I feel nauseous", _summary()))
        self.assertIn("30 minutes", reply("When can I have coffee?", _summary()))

    def test_fallback_recap(self):
        text = reply("hello", _summary(total_entries=1, streak=1, weight_lost=2.0), personality="coach")
        self.assertEqual(
            text,
            "Good work! You've logged 1 dose and you're on a 1-day streak. You're down 2 lbs. Keep the routine tight.",
        )

    def test_unknown_personality_uses_cheerful_tone(self):
        self.assertTrue(reply("hi", _summary(), personality="grumpy").startswith("Yay!"))


if __name__ == "__main__":
    unittest.main()
