import unittest
from datetime import datetime, timezone

import habit_hero

NOW = datetime(2024, 1, 3, 9, 30, tzinfo=timezone.utc)


def _habit(dates, current):
    return {"id": 1, "name": "Read", "dates_completed": dates, "current_streak": current}


def _by_name(badges):
    return {badge["name"]: badge for badge in badges}


class EvaluateBadgesTests(unittest.TestCase):
    def test_first_completion_earns_first_step(self):
        badges, earned = habit_hero.evaluate_badges(
            habit_hero.default_badges(), _habit(["2024-01-03"], 1), 1, NOW
        )
        self.assertEqual([b["name"] for b in earned], ["First Step"])
        first = _by_name(badges)["First Step"]
        self.assertTrue(first["earned"])
        self.assertEqual(first["date_earned"], "2024-01-03T09:30:00Z")
        self.assertNotIn("date_earned", _by_name(badges)["3-Day Streak"])

    def test_streak_badge_needs_current_streak(self):
        dates = ["2024-01-01", "2024-01-02"]
        badges, _ = habit_hero.evaluate_badges(habit_hero.default_badges(), _habit(dates, 2), 2, NOW)
        self.assertFalse(_by_name(badges)["3-Day Streak"]["earned"])

        dates.append("2024-01-03")
        badges, earned = habit_hero.evaluate_badges(badges, _habit(dates, 3), 3, NOW)
        self.assertEqual([b["name"] for b in earned], ["3-Day Streak"])

    def test_milestone_uses_total_across_habits(self):
        badges, earned = habit_hero.evaluate_badges(
            habit_hero.default_badges(), _habit(["2024-01-03"], 1), 30, NOW
        )
        self.assertIn("Consistency King", [b["name"] for b in earned])
        self.assertTrue(_by_name(badges)["Consistency King"]["earned"])

    def test_earned_badges_are_left_alone(self):
        badges, _ = habit_hero.evaluate_badges(
            habit_hero.default_badges(), _habit(["2024-01-01"], 1), 1, NOW
        )
        later = datetime(2024, 2, 1, tzinfo=timezone.utc)
        again, earned = habit_hero.evaluate_badges(badges, _habit([], 0), 0, later)
        self.assertEqual(earned, [])
        self.assertEqual(_by_name(again)["First Step"]["date_earned"], "2024-01-03T09:30:00Z")

    def test_input_is_not_mutated(self):
        badges = habit_hero.default_badges()
        habit_hero.evaluate_badges(badges, _habit(["2024-01-03"], 1), 1, NOW)
        self.assertFalse(any(b["earned"] for b in badges))

    def test_unknown_type_never_earns(self):
        badges = [{"id": "x", "name": "Odd", "requirement": 0, "type": "mystery", "earned": False}]
        updated, earned = habit_hero.evaluate_badges(badges, _habit(["2024-01-03"], 1), 1, NOW)
        self.assertEqual(earned, [])
        self.assertFalse(updated[0]["earned"])

    def test_default_badges_are_fresh_copies(self):
        first = habit_hero.default_badges()
        first[0]["earned"] = True
        self.assertFalse(habit_hero.default_badges()[0]["earned"])


if __name__ == "__main__":
    unittest.main()
