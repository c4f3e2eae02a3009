# etaplan/scheduler.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .annotate import replace_annotations
from .model import DEFAULT_DURATION, Forest, Schedule, ScheduleOptions, TaskNode
from .normalize import flatten_forest
from .propagate import propagate_properties
from .urgency import calculate_urgency
from .util.console import eprint, obs_enabled
from .util.instant import to_instant
from .util.tz import now_in, resolve_tz
from .util.worktime import DEFAULT_WORK_WINDOW, WorkWindow, next_work_time
from .validate import ScheduleError, assert_unique_keys


class PredecessorCycleError(ScheduleError):
    """Raised when predecessor/subtask resolution revisits an in-progress task."""

    def __init__(self, key: str, path: Sequence[str]):
        self.key = key
        self.path = list(path)
        super().__init__(f"Predecessor loop detected at key: {key!r}, with prior path: {self.path!r}")


@dataclass(frozen=True)
class RunContext:
    """Per-run constants threaded through the recursive scheduler."""

    schedule_start: dt.datetime
    window: WorkWindow = DEFAULT_WORK_WINDOW
    default_duration: dt.timedelta = DEFAULT_DURATION


def by_urgency(tasks: Iterable[TaskNode]) -> List[TaskNode]:
    """Most urgent first; ties keep their input order."""
    return sorted(tasks, key=lambda t: t.urgency, reverse=True)


def _fixed_eta_start(task: TaskNode, run: RunContext) -> dt.datetime:
    for value in (task.eta_start, task.start, task.created):
        if value is not None:
            return value
    return run.schedule_start


def _duration(task: TaskNode, run: RunContext) -> dt.timedelta:
    return task.duration if task.duration is not None else run.default_duration


def finalize_fixed_tasks(flat_tasks: Sequence[TaskNode], run: RunContext, schedule: Schedule) -> None:
    """Finalize manual tasks, then fully completed ones, from their own fields."""
    for task in flat_tasks:
        if not task.manual or task.scheduled:
            continue
        task.scheduled = True
        task.eta_start = _fixed_eta_start(task, run)
        if task.eta is None:
            if task.due is not None:
                task.eta = task.due
            else:
                task.eta = task.eta_start + _duration(task, run)
        schedule.place(task)

    for task in flat_tasks:
        if not task.fully_completed or task.scheduled:
            continue
        task.scheduled = True
        task.eta_start = _fixed_eta_start(task, run)
        if task.completion is not None:
            task.eta = task.completion
        elif task.eta is None:
            if task.due is not None:
                task.eta = task.due
            else:
                task.eta = task.eta_start + _duration(task, run)
        # finished work never ends after the run starts
        if task.eta > run.schedule_start:
            task.eta = run.schedule_start
        schedule.place(task)


def resolve_owner_slot(
    task: TaskNode,
    proposed_start: dt.datetime,
    timeline: List[TaskNode],
    run: RunContext,
) -> dt.datetime:
    """First gap, scanning the owner's timeline by start, that fits `task`.

    Sorts `timeline` in place. Gaps behind tasks that start before
    `proposed_start` are not reconsidered.
    """
    if not timeline:
        return proposed_start

    timeline.sort(key=lambda t: t.eta_start)
    duration = _duration(task, run)
    for other in timeline:
        if proposed_start >= other.eta:
            continue
        if proposed_start + duration <= other.eta_start:
            break
        proposed_start = next_work_time(other.eta, run.window)
    return proposed_start


def _schedule_auto(tasks: Sequence[TaskNode], run: RunContext, schedule: Schedule, path: List[str]) -> None:
    for task in tasks:
        if task.scheduled:
            continue
        if task.key in path:
            raise PredecessorCycleError(str(task.key), path)
        path.append(str(task.key))

        proposed_start = next_work_time(run.schedule_start, run.window)

        if task.predecessor_links:
            preds = by_urgency(task.predecessor_links)
            _schedule_auto(preds, run, schedule, path)
            latest = max(p.eta for p in preds)
            if proposed_start < latest:
                proposed_start = next_work_time(latest, run.window)

        if not task.is_leaf:
            subtasks = by_urgency(flatten_forest(task.children))
            _schedule_auto(subtasks, run, schedule, path)
            latest = max(s.eta for s in subtasks)
            if proposed_start < latest:
                proposed_start = next_work_time(latest, run.window)

            task.eta_start = min(s.eta_start for s in subtasks)
            task.eta = proposed_start
            task.duration = task.eta - task.eta_start
        else:
            if task.serialized:
                timeline = schedule.timeline(str(task.owner))
                proposed_start = resolve_owner_slot(task, proposed_start, timeline, run)
                timeline.append(task)
            else:
                schedule.parallel.append(task)

            if task.duration is None:
                task.duration = run.default_duration
            task.eta_start = proposed_start
            task.eta = next_work_time(proposed_start + task.duration, run.window)

        task.scheduled = True
        path.pop()


def build_schedule(flat_tasks: Sequence[TaskNode], run: RunContext) -> Schedule:
    """Schedule an urgency-sorted flat task list.

    Manual and fully completed tasks are finalized first; everything else
    is placed greedily in list order, predecessors and subtasks first.
    """
    schedule = Schedule()
    finalize_fixed_tasks(flat_tasks, run, schedule)
    _schedule_auto(flat_tasks, run, schedule, [])
    return schedule


def schedule_tasks(forest: Forest, options: Optional[ScheduleOptions] = None) -> Schedule:
    """Compute etas for every task of `forest` (mutated in place).

    Raises DuplicateKeyError before any timing is computed, and
    PredecessorCycleError if a dependency chain loops.
    """
    opts = options or ScheduleOptions()
    tzinfo = resolve_tz(opts.tz)

    if opts.schedule_start is None:
        schedule_start = now_in(tzinfo)
    else:
        schedule_start = to_instant(opts.schedule_start, tzinfo)
        if schedule_start is None:
            raise ValueError(f"Invalid schedule_start: {opts.schedule_start!r}")
    if opts.now is None:
        now = now_in(tzinfo)
    else:
        now = to_instant(opts.now, tzinfo)
        if now is None:
            raise ValueError(f"Invalid now: {opts.now!r}")

    flat_tasks = flatten_forest(forest)
    assert_unique_keys(flat_tasks)
    for task in flat_tasks:
        task.scheduled = False

    propagate_properties(forest, tz=tzinfo, default_duration=opts.default_duration, flat_tasks=flat_tasks)
    calculate_urgency(forest, now, tz=tzinfo)

    run = RunContext(
        schedule_start=schedule_start,
        window=opts.work_window,
        default_duration=opts.default_duration,
    )
    schedule = build_schedule(by_urgency(flat_tasks), run)

    if opts.annotate:
        replace_annotations(forest)

    if obs_enabled():
        eprint(
            f"[etaplan.scheduler] schedule.ok tasks={len(flat_tasks)} "
            f"owners={len(schedule.by_owner)} parallel={len(schedule.parallel)}"
        )
    return schedule
