# etaplan/normalize.py
from __future__ import annotations

from typing import Iterable, List, Optional

from .model import Forest, TaskNode


def task_key(task: TaskNode) -> str:
    """Key derived from the task's source identity (document path + line)."""
    return f"{task.source_path} line: {task.line}"


def assign_keys(forest: Iterable[TaskNode]) -> None:
    """Give every node lacking an explicit key its derived key. Idempotent."""
    for task in forest:
        if not task.key:
            task.key = task_key(task)
        assign_keys(task.children)


def flatten_forest(forest: Iterable[TaskNode], result: Optional[List[TaskNode]] = None) -> List[TaskNode]:
    """Pre-order list of every node; assigns missing keys along the way."""
    if result is None:
        result = []
    for task in forest:
        if not task.key:
            task.key = task_key(task)
        result.append(task)
        flatten_forest(task.children, result)
    return result


def mark_fully_completed(forest: Forest) -> bool:
    """Set `fully_completed` on every node; True if the whole forest is done.

    A node is fully completed when it is completed and so are all of its
    descendants.
    """
    result = True
    for task in forest:
        subs_done = mark_fully_completed(task.children)
        task.fully_completed = bool(subs_done and task.completed)
        if not task.fully_completed:
            result = False
    return result
