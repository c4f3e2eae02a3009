"""JSON input/output for task forests and computed schedules."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .model import PARALLEL_BUCKET, Forest, Schedule, TaskNode
from .normalize import flatten_forest, mark_fully_completed
from .util.duration import duration_minutes
from .util.instant import format_instant

JsonPath = Union[str, Path]
Payload = Dict[str, Any]

# Accepted spellings for task fields, first match wins.
_ALIASES: Dict[str, tuple[str, ...]] = {
    "source_path": ("path", "source_path"),
    "predecessor_keys": ("predecessors", "predecessor_keys", "predecessorKeys"),
    "fully_completed": ("fully_completed", "fullyCompleted"),
    "eta_start": ("eta_start", "etaStart"),
    "children": ("subtasks", "children"),
}
_PLAIN_FIELDS = ("text", "key", "priority", "due", "start", "created", "completion", "duration", "owner", "eta")
_FLAG_FIELDS = ("manual", "parallel", "completed")


class PayloadError(ValueError):
    """Raised when a forest payload is malformed."""


def _pick(obj: Dict[str, Any], name: str) -> Any:
    for alias in _ALIASES.get(name, (name,)):
        if alias in obj:
            return obj[alias]
    return None


class _Builder:
    def __init__(self, source_path: str):
        self.source_path = source_path
        self.next_line = 0
        self.saw_fully_completed = False

    def task(self, obj: Any, where: str, parent: Optional[TaskNode]) -> TaskNode:
        if not isinstance(obj, dict):
            raise PayloadError(f"{where} must be an object; got {type(obj).__name__}")

        node = TaskNode()
        for name in _PLAIN_FIELDS:
            if obj.get(name) is not None:
                setattr(node, name, obj[name])
        if node.key is not None:
            node.key = str(node.key)
        if node.owner is not None:
            node.owner = str(node.owner)
        for name in _FLAG_FIELDS:
            setattr(node, name, bool(obj.get(name, False)))

        fully = _pick(obj, "fully_completed")
        if fully is not None:
            node.fully_completed = bool(fully)
            self.saw_fully_completed = True

        node.eta_start = _pick(obj, "eta_start")

        path = _pick(obj, "source_path")
        if path is not None:
            node.source_path = str(path)
        elif parent is not None:
            node.source_path = parent.source_path
        else:
            node.source_path = self.source_path

        line = obj.get("line")
        if isinstance(line, int) and not isinstance(line, bool):
            node.line = line
        else:
            node.line = self.next_line
        self.next_line = max(self.next_line, node.line) + 1

        preds = _pick(obj, "predecessor_keys")
        if preds is not None:
            if not isinstance(preds, list):
                raise PayloadError(f"{where}.predecessors must be a list")
            node.predecessor_keys = [str(p) for p in preds]

        subs = _pick(obj, "children")
        if subs is not None:
            if not isinstance(subs, list):
                raise PayloadError(f"{where}.subtasks must be a list")
            for i, sub in enumerate(subs):
                node.add(self.task(sub, f"{where}.subtasks[{i}]", node))
        return node


def forest_from_obj(obj: Any, *, source_path: str = "") -> Forest:
    """Build a forest from a JSON object (`{"tasks": [...]}`) or list.

    Lines default to document order. When no task declares
    `fully_completed`, it is derived from `completed`.
    """
    if isinstance(obj, dict):
        tasks = obj.get("tasks")
        source_path = str(obj.get("path") or source_path)
    else:
        tasks = obj
    if not isinstance(tasks, list):
        raise PayloadError("payload tasks must be a list")

    b = _Builder(source_path)
    forest = [b.task(t, f"tasks[{i}]", None) for i, t in enumerate(tasks)]
    if not b.saw_fully_completed:
        mark_fully_completed(forest)
    return forest


def load_forest(path: JsonPath) -> Forest:
    p = Path(path)
    obj = json.loads(p.read_text(encoding="utf-8"))
    return forest_from_obj(obj, source_path=p.name)


def task_record(task: TaskNode) -> Dict[str, Any]:
    return {
        "text": task.text,
        "owner": task.owner,
        "priority": task.priority,
        "urgency": round(task.urgency, 4),
        "due": format_instant(task.due),
        "eta_start": format_instant(task.eta_start),
        "eta": format_instant(task.eta),
        "duration_min": duration_minutes(task.duration),
        "parent": task.parent.key if task.parent is not None else None,
        "predecessors": [p.key for p in task.predecessor_links],
    }


def schedule_to_payload(schedule: Schedule, forest: Forest) -> Payload:
    owners: Dict[str, List[str]] = {
        owner: [str(t.key) for t in schedule.by_owner[owner]] for owner in schedule.owners()
    }
    return {
        "owners": owners,
        PARALLEL_BUCKET: [str(t.key) for t in schedule.parallel],
        "tasks": {str(t.key): task_record(t) for t in flatten_forest(forest)},
    }


def dump_payload(payload: Payload) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)
