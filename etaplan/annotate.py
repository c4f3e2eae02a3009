# etaplan/annotate.py
from __future__ import annotations

import re
from typing import Any, Iterable

from .model import TaskNode
from .propagate import coerce_priority
from .util.instant import format_day

# [tag::value] where tag has no whitespace or '-', and value may hold
# [[wiki links]] nested up to two levels.
ANNOTATION_RE = re.compile(r"\[[^\s-]*::(?:[^\]\[]+|\[(?:[^\]\[]+|\[[^\]\[]*\])*\])*\]", re.MULTILINE)

OVERDUE_OPEN = '<font color="red"><b>'
OVERDUE_CLOSE = "</b></font>"


def strip_annotations(s: str) -> str:
    return ANNOTATION_RE.sub("", s).strip()


def strip_annotations_from_forest(forest: Iterable[TaskNode]) -> None:
    for task in forest:
        if task.text:
            task.text = strip_annotations(task.text)
        strip_annotations_from_forest(task.children)


def _fmt_value(v: Any) -> str:
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def annotation_suffix(task: TaskNode) -> str:
    parts = []
    priority = coerce_priority(task.priority)
    if priority is not None and priority > 0:
        parts.append(f"[priority::{_fmt_value(priority)}]")
    if task.due is not None:
        parts.append(f"[due::{format_day(task.due)}]")
    if task.eta is not None:
        eta = format_day(task.eta)
        if task.due is not None and task.due <= task.eta:
            eta = f"{OVERDUE_OPEN}{eta}{OVERDUE_CLOSE}"
        parts.append(f"[eta::{eta}]")
    if task.owner is not None:
        parts.append(f"[owner::{task.owner}]")
    return "".join(" " + p for p in parts)


def add_annotations(forest: Iterable[TaskNode]) -> None:
    for task in forest:
        task.text = (task.text or "") + annotation_suffix(task)
        add_annotations(task.children)


def replace_annotations(forest: Iterable[TaskNode]) -> None:
    """Rewrite each task's text so its annotations reflect computed fields."""
    forest = list(forest)
    strip_annotations_from_forest(forest)
    add_annotations(forest)
