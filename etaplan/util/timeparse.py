# etaplan/util/timeparse.py
from __future__ import annotations

import datetime as dt
import re
from typing import Tuple

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_DATE_HOUR_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})[ T](\d{1,2})$")


def parse_hhmm(s: str) -> Tuple[int, int]:
    m = _HHMM_RE.match(s.strip())
    if not m:
        raise ValueError(f"Invalid HH:MM: {s!r}")
    hh = int(m.group(1))
    mm = int(m.group(2))
    if not (0 <= hh <= 23 and 0 <= mm <= 59):
        raise ValueError(f"Invalid HH:MM: {s!r}")
    return hh, mm


def parse_workhours(s: str) -> Tuple[dt.time, dt.time]:
    """Parse a daily availability window such as ``13:00-17:00``."""
    parts = s.split("-")
    if len(parts) != 2:
        raise ValueError("workhours must be like 13:00-17:00")
    sh, sm = parse_hhmm(parts[0])
    eh, em = parse_hhmm(parts[1])
    start = dt.time(sh, sm)
    end = dt.time(eh, em)
    if end <= start:
        raise ValueError("workhours end must be after start")
    return start, end


def parse_date_yyyy_mm_dd(s: str) -> dt.date:
    return dt.datetime.strptime(s, "%Y-%m-%d").date()


def parse_local_datetime(s: str) -> dt.datetime:
    """Parse a CLI instant: ``YYYY-MM-DD``, ``YYYY-MM-DD HH``, or ISO-8601."""
    ss = s.strip()
    if not ss:
        raise ValueError("empty datetime")
    try:
        return dt.datetime.combine(parse_date_yyyy_mm_dd(ss), dt.time())
    except ValueError:
        pass
    # "2022-02-07 13" is accepted for brevity
    m = _DATE_HOUR_RE.match(ss)
    if m:
        ss = f"{m.group(1)}T{int(m.group(2)):02d}:00"
    try:
        return dt.datetime.fromisoformat(ss.replace("Z", "+00:00"))
    except ValueError as ex:
        raise ValueError(f"Invalid datetime: {s!r}") from ex
