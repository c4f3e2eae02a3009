from __future__ import annotations

import io
import sys
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from etaplan.tools import ci

REPO_ROOT = Path(__file__).resolve().parent.parent


class TestCiToolContract(unittest.TestCase):
    def test_repo_root_points_at_checkout(self) -> None:
        self.assertEqual(ci._repo_root(), REPO_ROOT)

    def test_build_steps_without_lint(self) -> None:
        steps = ci.build_steps(REPO_ROOT, skip_compileall=False, skip_lint=True, skip_tests=False, fmt=False)

        self.assertEqual([label for label, _ in steps], ["compileall", "unittest"])
        compile_cmd = steps[0][1]
        self.assertEqual(compile_cmd[:4], [sys.executable, "-m", "compileall", "-q"])
        self.assertEqual(compile_cmd[4], str(REPO_ROOT / "etaplan"))
        self.assertEqual(steps[1][1], [sys.executable, "-m", "unittest", "discover", "-s", "tests"])

    def test_build_steps_all_skipped(self) -> None:
        self.assertEqual(
            ci.build_steps(REPO_ROOT, skip_compileall=True, skip_lint=True, skip_tests=True, fmt=True),
            [],
        )

    def test_main_with_no_steps_reports_ok(self) -> None:
        buf = io.StringIO()
        with redirect_stdout(buf):
            rc = ci.main(["--skip-compileall", "--skip-lint", "--skip-tests"])

        self.assertEqual(rc, 0)
        self.assertIn("[etaplan-ci] RESULT: OK", buf.getvalue())

    def test_fmt_ms(self) -> None:
        self.assertEqual(ci._fmt_ms(250), "250ms")
        self.assertEqual(ci._fmt_ms(1500), "1.50s")
        self.assertEqual(ci._fmt_ms(61000), "1m01.0s")


if __name__ == "__main__":
    unittest.main(verbosity=2)
