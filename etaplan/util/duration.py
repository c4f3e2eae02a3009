# etaplan/util/duration.py
from __future__ import annotations

import datetime as dt
import re
from typing import Any, Optional

# ISO-8601 durations as Taskwarrior stores them: PT10M, PT1H30M, P1DT2H, ...
_ISO_RE = re.compile(r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$", re.IGNORECASE)
# Shorthand used in inline annotations: 90m, 1.5h, 1h30m, 2d
_SHORT_RE = re.compile(
    r"^(?:(\d+(?:\.\d+)?)\s*d)?\s*(?:(\d+(?:\.\d+)?)\s*h)?\s*(?:(\d+(?:\.\d+)?)\s*m(?:in)?)?$",
    re.IGNORECASE,
)


def parse_duration(s: str | None) -> Optional[dt.timedelta]:
    """Parse an ISO-8601 or shorthand duration string; None if unparseable or zero."""
    if not s:
        return None
    ss = str(s).strip()
    if not ss:
        return None

    m = _ISO_RE.match(ss)
    if m and any(m.groups()):
        days, hours, minutes, seconds = (int(g or 0) for g in m.groups())
        td = dt.timedelta(days=days, hours=hours, minutes=minutes, seconds=seconds)
        return td if td > dt.timedelta(0) else None

    m = _SHORT_RE.match(ss)
    if m and any(m.groups()):
        days, hours, minutes = (float(g or 0) for g in m.groups())
        td = dt.timedelta(days=days, hours=hours, minutes=minutes)
        return td if td > dt.timedelta(0) else None

    return None


def to_duration(value: Any) -> Optional[dt.timedelta]:
    """Coerce a raw duration field. Plain numbers are minutes."""
    if value is None:
        return None
    if isinstance(value, dt.timedelta):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return dt.timedelta(minutes=value) if value > 0 else None
    return parse_duration(str(value))


def duration_minutes(td: Optional[dt.timedelta]) -> Optional[int]:
    if td is None:
        return None
    return int(td.total_seconds() // 60)
