# etaplan/propagate.py
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Iterable, List, Optional

from .model import DEFAULT_DURATION, DEFAULT_PRIORITY, TaskNode
from .normalize import flatten_forest
from .util.console import eprint, obs_enabled
from .util.duration import to_duration
from .util.instant import to_instant
from .util.tz import resolve_tz

TIME_FIELDS = ("due", "start", "created", "completion", "eta", "eta_start")


def _warn(task: TaskNode, what: str, raw: Any) -> None:
    if obs_enabled():
        eprint(f"[etaplan.propagate] WARN: {what} key={task.key!r} value={raw!r}")


def coerce_priority(raw: Any) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return raw
    try:
        f = float(str(raw).strip())
    except ValueError:
        return None
    return int(f) if f.is_integer() else f


def normalize_fields(task: TaskNode, tz: dt.tzinfo) -> None:
    """Cast timestamp, duration and priority fields to their internal types."""
    for name in TIME_FIELDS:
        raw = getattr(task, name)
        if raw is None:
            continue
        value = to_instant(raw, tz)
        if value is None:
            _warn(task, f"invalid {name} timestamp", raw)
        setattr(task, name, value)

    if task.duration is not None:
        raw = task.duration
        task.duration = to_duration(raw)
        if task.duration is None:
            _warn(task, "invalid duration", raw)

    if task.priority is not None:
        raw = task.priority
        task.priority = coerce_priority(raw)
        if task.priority is None:
            _warn(task, "invalid priority", raw)


def propagate_properties(
    forest: Iterable[TaskNode],
    *,
    tz: Optional[dt.tzinfo] = None,
    default_duration: dt.timedelta = DEFAULT_DURATION,
    flat_tasks: Optional[List[TaskNode]] = None,
) -> None:
    """Top-down pass: link parents, normalize fields, inherit due/priority,
    resolve predecessor keys.

    Due dates only tighten going down; priorities only rise, unless a
    child's own priority is already higher. Predecessor keys that match
    no task are dropped.
    """
    forest = list(forest)
    if flat_tasks is None:
        flat_tasks = flatten_forest(forest)
    index: Dict[str, TaskNode] = {}
    for t in flat_tasks:
        index.setdefault(str(t.key), t)

    _propagate(forest, None, index, tz or resolve_tz("local"), default_duration)


def _propagate(
    tasks: Iterable[TaskNode],
    parent: Optional[TaskNode],
    index: Dict[str, TaskNode],
    tz: dt.tzinfo,
    default_duration: dt.timedelta,
) -> None:
    for task in tasks:
        task.parent = parent

        normalize_fields(task, tz)

        if task.duration is None:
            task.duration = default_duration

        if parent is not None and parent.due is not None and (task.due is None or parent.due < task.due):
            task.due = parent.due

        if parent is not None and parent.priority is not None and (
            task.priority is None or parent.priority > task.priority
        ):
            task.priority = parent.priority
        elif task.priority is None:
            task.priority = DEFAULT_PRIORITY

        links: List[TaskNode] = []
        for pred_key in task.predecessor_keys:
            pred = index.get(pred_key)
            if pred is None:
                _warn(task, "unresolved predecessor", pred_key)
                continue
            links.append(pred)
        task.predecessor_links = links

        _propagate(task.children, task, index, tz, default_duration)
