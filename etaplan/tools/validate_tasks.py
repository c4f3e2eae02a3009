#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from etaplan.payload import load_forest
from etaplan.validate import lint_forest


def _die(msg: str, rc: int = 2) -> int:
    print(f"[etaplan-validate-tasks] ERROR: {msg}", file=sys.stderr)
    return rc


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="etaplan-validate-tasks",
        description=(
            "Lint one or more task forest JSON files without scheduling them.\n"
            "Duplicate keys are errors; unknown predecessor keys are warnings."
        ),
    )
    ap.add_argument("paths", nargs="+", help="Forest JSON file(s)")
    ap.add_argument("--strict", action="store_true", help="Treat warnings as errors.")
    ns = ap.parse_args(argv)

    all_errs: List[str] = []
    all_warns: List[str] = []

    for raw in ns.paths:
        p = Path(raw)
        if not p.exists():
            return _die(f"Missing JSON file: {p}")
        try:
            forest = load_forest(p)
        except (OSError, ValueError) as e:
            return _die(f"Failed to load forest: {p} ({e})")
        errs, warns = lint_forest(forest, label=str(p))
        all_errs.extend(errs)
        all_warns.extend(warns)

    for w in all_warns:
        print(f"[etaplan-validate-tasks] WARN: {w}", file=sys.stderr)

    if ns.strict:
        all_errs.extend(all_warns)

    if all_errs:
        print("[etaplan-validate-tasks] FAIL", file=sys.stderr)
        for e in all_errs:
            print(f"  - {e}", file=sys.stderr)
        return 3

    print("[etaplan-validate-tasks] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
