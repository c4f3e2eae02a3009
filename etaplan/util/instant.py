# etaplan/util/instant.py
from __future__ import annotations

import datetime as dt
import re
from typing import Any, Optional

from .tz import wall_clock

TW_UTC_RE = re.compile(r"^(\d{8})T(\d{6})Z$")  # e.g. 20251217T083000Z


def parse_tw_utc(s: str) -> Optional[dt.datetime]:
    """Parse a compact Taskwarrior UTC stamp into an aware datetime."""
    m = TW_UTC_RE.match(s)
    if not m:
        return None
    ymd = m.group(1)
    hms = m.group(2)
    try:
        return dt.datetime(
            int(ymd[0:4]),
            int(ymd[4:6]),
            int(ymd[6:8]),
            int(hms[0:2]),
            int(hms[2:4]),
            int(hms[4:6]),
            tzinfo=dt.timezone.utc,
        )
    except ValueError:
        return None


def parse_timestamp(s: str) -> Optional[dt.datetime]:
    ss = s.strip()
    if not ss:
        return None
    tw = parse_tw_utc(ss)
    if tw is not None:
        return tw
    try:
        return dt.datetime.fromisoformat(ss.replace("Z", "+00:00"))
    except ValueError:
        return None


def to_instant(value: Any, tz: dt.tzinfo) -> Optional[dt.datetime]:
    """Normalize a raw timestamp field into the internal instant type.

    The internal type is a naive datetime holding wall-clock time in the
    planning timezone `tz`. Accepted inputs:
      - datetime (aware values are converted to `tz`)
      - date (midnight)
      - int/float epoch milliseconds
      - ISO-8601 strings and compact Taskwarrior UTC stamps

    Returns None for values that cannot be interpreted.
    """
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return wall_clock(value, tz)
    if isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            aware = dt.datetime.fromtimestamp(value / 1000.0, tz=tz)
        except (OverflowError, OSError, ValueError):
            return None
        return aware.replace(tzinfo=None)
    if isinstance(value, str):
        parsed = parse_timestamp(value)
        return wall_clock(parsed, tz) if parsed is not None else None
    return None


def format_day(value: dt.datetime) -> str:
    return value.strftime("%Y-%m-%d")


def format_instant(value: Optional[dt.datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()
