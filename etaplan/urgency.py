# etaplan/urgency.py
from __future__ import annotations

import datetime as dt
import math
from typing import Iterable, Optional

from .model import TaskNode
from .util.instant import to_instant
from .util.tz import now_in, resolve_tz

COMPLETED_URGENCY = -1.0

# Due-date term shape: overdue tasks saturate at OVERDUE_BASE past
# OVERDUE_DAYS, tasks further out than HORIZON_DAYS get FAR_DUE.
OVERDUE_DAYS = 7
HORIZON_DAYS = 14
OVERDUE_BASE = 12.0
FAR_DUE = 0.2


def due_term(due: dt.datetime, now: dt.datetime) -> float:
    if due <= now - dt.timedelta(days=OVERDUE_DAYS):
        days = int((now - due) / dt.timedelta(days=1))
        return OVERDUE_BASE + math.sqrt(days - OVERDUE_DAYS) / math.sqrt(15)

    if due < now + dt.timedelta(days=HORIZON_DAYS):
        # ~12.2 just short of 7 days overdue down to FAR_DUE at the horizon
        hours = int((now - due) / dt.timedelta(hours=1))
        x = hours / 24.0 + HORIZON_DAYS
        return OVERDUE_BASE * x ** 2 / 21.0 ** 2 + FAR_DUE

    return FAR_DUE


def priority_term(priority: float) -> float:
    if priority >= 0:
        return 8 * math.sqrt(priority) / 10.0
    return 8 * priority / 100.0


def task_urgency(task: TaskNode, now: dt.datetime) -> float:
    if task.fully_completed:
        return COMPLETED_URGENCY

    urgency = 0.0
    if task.due is not None:
        urgency += due_term(task.due, now)
    if task.priority is not None:
        urgency += priority_term(task.priority)
    return urgency


def calculate_urgency(
    forest: Iterable[TaskNode],
    now: Optional[dt.datetime] = None,
    *,
    tz: Optional[dt.tzinfo] = None,
) -> None:
    """Set `urgency` on every node of the forest."""
    tzinfo = tz or resolve_tz("local")
    now = now_in(tzinfo) if now is None else to_instant(now, tzinfo)
    for task in forest:
        if task.due is not None and not isinstance(task.due, dt.datetime):
            task.due = to_instant(task.due, tzinfo)
        task.urgency = task_urgency(task, now)
        calculate_urgency(task.children, now, tz=tzinfo)
