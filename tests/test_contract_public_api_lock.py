from __future__ import annotations

import unittest


class TestPublicApiLockContract(unittest.TestCase):
    def test_api_module_exports_are_present(self) -> None:
        import etaplan.api as api

        self.assertTrue(hasattr(api, "__all__"))
        self.assertIsInstance(api.__all__, (list, tuple))
        self.assertEqual(len(api.__all__), len(set(api.__all__)))

        for name in api.__all__:
            self.assertIsInstance(name, str)
            self.assertTrue(hasattr(api, name), f"etaplan.api missing public name: {name}")
            self.assertIsNotNone(getattr(api, name), f"etaplan.api {name} is None")

    def test_core_entrypoints_are_public(self) -> None:
        import etaplan.api as api

        for name in ("schedule_tasks", "next_work_time", "flatten_forest", "propagate_properties", "calculate_urgency"):
            self.assertIn(name, api.__all__)

    def test_package_reexports_match_api_all(self) -> None:
        import etaplan
        import etaplan.api as api

        self.assertEqual(list(etaplan.__all__), list(api.__all__))
        for name in api.__all__:
            self.assertTrue(hasattr(etaplan, name), f"etaplan package does not re-export: {name}")
            self.assertIs(getattr(etaplan, name), getattr(api, name), f"etaplan.{name} must be same object as etaplan.api.{name}")


if __name__ == "__main__":
    unittest.main(verbosity=2)
