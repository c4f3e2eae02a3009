from __future__ import annotations

import argparse
import datetime as dt
import json
import os
import sys
from pathlib import Path
from typing import List, Optional

from .model import DEFAULT_DURATION, ScheduleOptions
from .payload import PayloadError, dump_payload, forest_from_obj, load_forest, schedule_to_payload
from .scheduler import schedule_tasks
from .util.duration import to_duration
from .util.timeparse import parse_local_datetime
from .util.tz import normalize_tz_name, resolve_tz
from .util.worktime import WorkWindow
from .validate import ScheduleError


def _die(msg: str, rc: int = 2) -> int:
    print(f"[etaplan] ERROR: {msg}", file=sys.stderr)
    return rc


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        prog="etaplan",
        description="Schedule a JSON task forest: etas by urgency, owners serialized, Mon-Fri work hours.",
    )
    ap.add_argument("--in", dest="in_json", default="-", help="Input forest JSON path, or - for stdin (default: -)")
    ap.add_argument("--out", default="-", help="Output schedule JSON path, or - for stdout (default: -)")
    ap.add_argument("--start", default=None, help="Schedule start, e.g. 2022-02-07 or 2022-02-07T09:30 (default: now)")
    ap.add_argument("--now", default=None, help="Reference instant for urgency (default: now)")
    ap.add_argument(
        "--tz",
        default=os.getenv("ETAPLAN_TZ", "local"),
        help="Planning timezone (default: env ETAPLAN_TZ or 'local')",
    )
    ap.add_argument(
        "--workhours",
        default=os.getenv("ETAPLAN_WORKHOURS", "13:00-17:00"),
        help="Daily work window, Mon-Fri (default: env ETAPLAN_WORKHOURS or 13:00-17:00)",
    )
    ap.add_argument(
        "--default-duration",
        default=None,
        help="Duration for tasks without one, e.g. 2h, 90m, PT1H (default: 2h)",
    )
    ap.add_argument("--annotate", action="store_true", help="Rewrite [tag::value] annotations in task text")

    args = ap.parse_args(argv)

    tz_name = normalize_tz_name(args.tz)
    try:
        resolve_tz(tz_name)
    except ValueError as e:
        return _die(f"Invalid --tz value: {e}")

    try:
        window = WorkWindow.from_spec(args.workhours)
    except ValueError as e:
        return _die(f"Invalid --workhours value: {e}")

    default_duration: dt.timedelta = DEFAULT_DURATION
    if args.default_duration:
        parsed = to_duration(args.default_duration)
        if parsed is None:
            return _die(f"Invalid --default-duration value: {args.default_duration!r}")
        default_duration = parsed

    try:
        start = parse_local_datetime(args.start) if args.start else None
        now = parse_local_datetime(args.now) if args.now else None
    except ValueError as e:
        return _die(str(e))

    try:
        if args.in_json == "-":
            forest = forest_from_obj(json.loads(sys.stdin.read()))
        else:
            forest = load_forest(Path(args.in_json))
    except (OSError, ValueError) as e:
        return _die(f"Failed to load forest: {e}")

    opts = ScheduleOptions(
        schedule_start=start,
        now=now,
        tz=tz_name,
        work_window=window,
        default_duration=default_duration,
        annotate=bool(args.annotate),
    )
    try:
        schedule = schedule_tasks(forest, opts)
    except ScheduleError as e:
        return _die(str(e))

    text = dump_payload(schedule_to_payload(schedule, forest))
    if args.out == "-":
        print(text)
    else:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
        print(str(out_path.resolve()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
