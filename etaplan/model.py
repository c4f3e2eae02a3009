# etaplan/model.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .util.worktime import DEFAULT_WORK_WINDOW, WorkWindow

DEFAULT_PRIORITY = 0
DEFAULT_DURATION = dt.timedelta(hours=2)

# Name of the unconstrained bucket in serialized schedules.
PARALLEL_BUCKET = "tasks_can_run_in_parallel"


@dataclass(eq=False)
class TaskNode:
    """One task in the forest.

    Timestamp, duration and priority fields hold whatever the source
    produced until `propagate_properties` normalizes them; afterwards
    timestamps are naive datetimes in the planning timezone and
    `duration` is a timedelta.
    """

    text: str = ""
    key: Optional[str] = None
    source_path: str = ""
    line: Optional[int] = None

    children: List["TaskNode"] = field(default_factory=list)
    parent: Optional["TaskNode"] = field(default=None, repr=False)

    priority: Any = None
    due: Any = None
    start: Any = None
    created: Any = None
    completion: Any = None
    duration: Any = None
    owner: Optional[str] = None

    manual: bool = False
    parallel: bool = False
    completed: bool = False
    fully_completed: bool = False

    predecessor_keys: List[str] = field(default_factory=list)
    predecessor_links: List["TaskNode"] = field(default_factory=list, repr=False)

    urgency: float = 0.0
    eta_start: Any = None
    eta: Any = None
    scheduled: bool = False

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def serialized(self) -> bool:
        """True when the task occupies its owner's timeline exclusively."""
        return self.owner is not None and not self.parallel

    def add(self, child: "TaskNode") -> "TaskNode":
        self.children.append(child)
        child.parent = self
        return child


Forest = List[TaskNode]


@dataclass
class Schedule:
    """Per-owner timelines plus the bucket of unconstrained tasks."""

    by_owner: Dict[str, List[TaskNode]] = field(default_factory=dict)
    parallel: List[TaskNode] = field(default_factory=list)

    def timeline(self, owner: str) -> List[TaskNode]:
        return self.by_owner.setdefault(owner, [])

    def place(self, task: TaskNode) -> None:
        if task.serialized:
            self.timeline(task.owner).append(task)  # type: ignore[arg-type]
        else:
            self.parallel.append(task)

    def owners(self) -> List[str]:
        return sorted(self.by_owner.keys())

    def tasks(self) -> List[TaskNode]:
        out: List[TaskNode] = []
        for owner in self.owners():
            out.extend(self.by_owner[owner])
        out.extend(self.parallel)
        return out


@dataclass(frozen=True)
class ScheduleOptions:
    """Knobs for one scheduling run.

    schedule_start / now accept any raw timestamp `to_instant` understands;
    None means the wall clock in the planning timezone.
    """

    schedule_start: Any = None
    now: Any = None
    tz: Optional[str] = "local"
    work_window: WorkWindow = DEFAULT_WORK_WINDOW
    default_duration: dt.timedelta = DEFAULT_DURATION
    annotate: bool = False


__all__ = [
    "DEFAULT_DURATION",
    "DEFAULT_PRIORITY",
    "Forest",
    "PARALLEL_BUCKET",
    "Schedule",
    "ScheduleOptions",
    "TaskNode",
    "WorkWindow",
]
