# etaplan/util/worktime.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from .timeparse import parse_workhours

# ISO weekday numbers: Monday=1 .. Sunday=7
LAST_WORKDAY = 5


@dataclass(frozen=True)
class WorkWindow:
    """Daily availability window, applied Monday through Friday."""

    start: dt.time = dt.time(13, 0)
    end: dt.time = dt.time(17, 0)

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError(f"work window end {self.end} must be after start {self.start}")

    @classmethod
    def from_spec(cls, s: str) -> "WorkWindow":
        start, end = parse_workhours(s)
        return cls(start=start, end=end)

    def spec(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"


DEFAULT_WORK_WINDOW = WorkWindow()


def _at(day: dt.datetime, t: dt.time) -> dt.datetime:
    return day.replace(hour=t.hour, minute=t.minute, second=0, microsecond=0)


def next_work_time(t: dt.datetime, window: WorkWindow = DEFAULT_WORK_WINDOW) -> dt.datetime:
    """Earliest instant at or after `t` inside the weekly work window."""
    weekday = t.isoweekday()
    clock = t.time()

    if weekday > LAST_WORKDAY or (weekday == LAST_WORKDAY and clock >= window.end):
        return _at(t + dt.timedelta(days=8 - weekday), window.start)
    if clock >= window.end:
        return _at(t + dt.timedelta(days=1), window.start)
    if clock < window.start:
        return _at(t, window.start)
    return t
