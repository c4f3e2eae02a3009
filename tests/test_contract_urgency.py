from __future__ import annotations

import datetime as dt
import unittest

from etaplan.model import TaskNode
from etaplan.urgency import calculate_urgency, due_term, priority_term, task_urgency

NOW = dt.datetime(2022, 2, 7, 0, 0)
UTC = dt.timezone.utc


def _days(n: float) -> dt.datetime:
    return NOW + dt.timedelta(days=n)


class TestUrgencyContract(unittest.TestCase):
    def test_fully_completed_is_minus_one(self) -> None:
        t = TaskNode(fully_completed=True, due=_days(-30), priority=100)
        self.assertEqual(task_urgency(t, NOW), -1.0)

    def test_due_term_boundaries(self) -> None:
        self.assertEqual(task_urgency(TaskNode(due=_days(-7)), NOW), 12.0)
        self.assertAlmostEqual(task_urgency(TaskNode(due=_days(-22)), NOW), 13.0, places=9)
        self.assertAlmostEqual(task_urgency(TaskNode(due=_days(14)), NOW), 0.2, places=9)
        self.assertAlmostEqual(task_urgency(TaskNode(due=_days(15)), NOW), 0.2, places=9)
        self.assertAlmostEqual(task_urgency(TaskNode(due=_days(365)), NOW), 0.2, places=9)

    def test_due_term_quadratic_inside_horizon(self) -> None:
        # x = 14 when due == now
        self.assertAlmostEqual(due_term(NOW, NOW), 12 * 14 ** 2 / 21 ** 2 + 0.2, places=9)
        # just short of 7 days overdue the curve meets the overdue base
        near_peak = due_term(_days(-7) + dt.timedelta(hours=1), NOW)
        self.assertAlmostEqual(near_peak, 12 * (167 / 24 + 14) ** 2 / 21 ** 2 + 0.2, places=9)
        self.assertGreater(near_peak, 12.0)
        # closer due dates are always more urgent inside the horizon
        self.assertGreater(due_term(_days(1), NOW), due_term(_days(5), NOW))

    def test_due_term_truncates_partial_units(self) -> None:
        # 23 hours 59 minutes ahead still counts as 23 whole hours
        due = NOW + dt.timedelta(hours=23, minutes=59)
        self.assertAlmostEqual(due_term(due, NOW), 12 * (-23 / 24 + 14) ** 2 / 21 ** 2 + 0.2, places=9)

    def test_priority_term(self) -> None:
        self.assertAlmostEqual(priority_term(100), 8.0, delta=0.05)
        self.assertAlmostEqual(priority_term(50), 5.66, delta=0.05)
        self.assertEqual(priority_term(0), 0.0)
        self.assertAlmostEqual(priority_term(-8), -0.64, places=9)
        self.assertAlmostEqual(priority_term(-90), -7.2, delta=0.05)

    def test_terms_are_summed(self) -> None:
        t = TaskNode(due=_days(-7), priority=100)
        self.assertAlmostEqual(task_urgency(t, NOW), 20.0, places=9)
        self.assertEqual(task_urgency(TaskNode(), NOW), 0.0)

    def test_calculate_urgency_visits_every_node(self) -> None:
        root = TaskNode(priority=100)
        child = root.add(TaskNode(due="2022-01-31T00:00:00Z"))
        done = child.add(TaskNode(fully_completed=True))

        calculate_urgency([root], NOW, tz=UTC)

        self.assertAlmostEqual(root.urgency, 8.0, places=9)
        self.assertEqual(child.due, dt.datetime(2022, 1, 31))
        self.assertEqual(child.urgency, 12.0)
        self.assertEqual(done.urgency, -1.0)


if __name__ == "__main__":
    unittest.main(verbosity=2)
