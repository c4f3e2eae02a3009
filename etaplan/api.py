"""etaplan.api

Stable *library* entrypoint for etaplan.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

from etaplan.annotate import replace_annotations, strip_annotations
from etaplan.model import (
    PARALLEL_BUCKET,
    Forest,
    Schedule,
    ScheduleOptions,
    TaskNode,
    WorkWindow,
)
from etaplan.normalize import assign_keys, flatten_forest, mark_fully_completed, task_key
from etaplan.payload import PayloadError, forest_from_obj, load_forest, schedule_to_payload
from etaplan.propagate import propagate_properties
from etaplan.scheduler import PredecessorCycleError, build_schedule, schedule_tasks
from etaplan.urgency import calculate_urgency
from etaplan.util.worktime import next_work_time
from etaplan.validate import DuplicateKeyError, ScheduleError, find_duplicate_keys, lint_forest

__all__ = [
    # model
    "TaskNode",
    "Forest",
    "Schedule",
    "ScheduleOptions",
    "WorkWindow",
    "PARALLEL_BUCKET",
    # pipeline
    "schedule_tasks",
    "build_schedule",
    "next_work_time",
    "assign_keys",
    "flatten_forest",
    "task_key",
    "mark_fully_completed",
    "propagate_properties",
    "calculate_urgency",
    # annotations
    "strip_annotations",
    "replace_annotations",
    # io
    "forest_from_obj",
    "load_forest",
    "schedule_to_payload",
    # errors / validation
    "ScheduleError",
    "DuplicateKeyError",
    "PredecessorCycleError",
    "PayloadError",
    "find_duplicate_keys",
    "lint_forest",
]
