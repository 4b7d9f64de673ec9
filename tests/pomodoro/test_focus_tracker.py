import unittest

from pomodoro import FocusMetrics, FocusTracker, focus_level, record_distraction


class FocusTrackerTests(unittest.TestCase):
    def test_record_distraction_applies_penalty(self) -> None:
        metrics = record_distraction(FocusMetrics(score=100, distractions=0))
        self.assertEqual(FocusMetrics(score=95, distractions=1), metrics)

    def test_record_distraction_floors_at_zero(self) -> None:
        metrics = record_distraction(FocusMetrics(score=3, distractions=7), penalty=5)
        self.assertEqual(0, metrics.score)
        self.assertEqual(8, metrics.distractions)

    def test_tracker_score_is_non_increasing(self) -> None:
        tracker = FocusTracker(initial_score=20, pause_penalty=6)
        scores = [tracker.record_pause().score for _ in range(5)]
        self.assertEqual([14, 8, 2, 0, 0], scores)
        self.assertEqual(5, tracker.metrics.distractions)

    def test_tracker_rejects_invalid_settings(self) -> None:
        with self.assertRaises(ValueError):
            FocusTracker(initial_score=101)
        with self.assertRaises(ValueError):
            FocusTracker(pause_penalty=-1)

    def test_focus_level_thresholds(self) -> None:
        self.assertEqual("high", focus_level(100))
        self.assertEqual("high", focus_level(81))
        self.assertEqual("medium", focus_level(80))
        self.assertEqual("medium", focus_level(51))
        self.assertEqual("low", focus_level(50))
        self.assertEqual("low", focus_level(0))


if __name__ == "__main__":
    unittest.main()
