from __future__ import annotations

import datetime as dt
import unittest

from etaplan.annotate import annotation_suffix, replace_annotations, strip_annotations
from etaplan.model import TaskNode


class TestAnnotateContract(unittest.TestCase):
    def test_strip_simple_and_nested_link_values(self) -> None:
        self.assertEqual(strip_annotations("Write report [due::2022-01-01] [owner::x]"), "Write report")
        self.assertEqual(strip_annotations("See [link::[[Some Page]]] now"), "See  now")
        self.assertEqual(strip_annotations("Keep [not an annotation] here"), "Keep [not an annotation] here")
        self.assertEqual(strip_annotations("[priority::5]"), "")

    def test_suffix_order_and_priority_gate(self) -> None:
        t = TaskNode(
            priority=5,
            due=dt.datetime(2022, 2, 10),
            eta=dt.datetime(2022, 2, 8, 15, 0),
            owner="bob",
        )
        self.assertEqual(
            annotation_suffix(t),
            " [priority::5] [due::2022-02-10] [eta::2022-02-08] [owner::bob]",
        )
        t.priority = 0
        self.assertNotIn("priority::", annotation_suffix(t))
        t.priority = 2.0
        self.assertIn("[priority::2]", annotation_suffix(t))

    def test_raw_priority_values_before_propagation(self) -> None:
        root = TaskNode(text="Raw [priority::1]", priority="7")
        zero = root.add(TaskNode(text="Zero", priority="0"))
        junk = root.add(TaskNode(text="Junk", priority="urgent"))

        replace_annotations([root])

        self.assertEqual(root.text, "Raw [priority::7]")
        self.assertEqual(zero.text, "Zero")
        self.assertEqual(junk.text, "Junk")

    def test_eta_flagged_when_due_not_after_eta(self) -> None:
        t = TaskNode(due=dt.datetime(2022, 2, 8), eta=dt.datetime(2022, 2, 9, 14, 0))
        self.assertIn('[eta::<font color="red"><b>2022-02-09</b></font>]', annotation_suffix(t))

        t.due = t.eta
        self.assertIn("<font", annotation_suffix(t))

    def test_replace_is_stable_across_runs(self) -> None:
        root = TaskNode(text="Plan [priority::9] [eta::2020-01-01]", priority=1, eta=dt.datetime(2022, 2, 7, 14))
        child = root.add(TaskNode(text="Step", owner="ann"))

        replace_annotations([root])
        once = (root.text, child.text)
        replace_annotations([root])

        self.assertEqual((root.text, child.text), once)
        self.assertEqual(root.text, "Plan [priority::1] [eta::2022-02-07]")
        self.assertEqual(child.text, "Step [owner::ann]")


if __name__ == "__main__":
    unittest.main(verbosity=2)
