"""Forest validation helpers (library-facing)."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Sequence, Tuple

from .model import Forest, TaskNode
from .normalize import flatten_forest


class ScheduleError(ValueError):
    """Base class for fatal scheduling-run failures."""


class DuplicateKeyError(ScheduleError):
    """Raised when two or more tasks share a key."""

    def __init__(self, keys: Sequence[str]):
        self.keys = list(keys)
        super().__init__(f"Attribute [key::] is duplicated: {self.keys!r}")


def find_duplicate_keys(flat_tasks: Iterable[TaskNode]) -> List[str]:
    """Every key used more than once, in first-seen order."""
    counts = Counter(t.key for t in flat_tasks)
    return [k for k, n in counts.items() if n > 1]


def assert_unique_keys(flat_tasks: Sequence[TaskNode]) -> None:
    dups = find_duplicate_keys(flat_tasks)
    if dups:
        raise DuplicateKeyError(dups)


def unresolved_predecessors(flat_tasks: Sequence[TaskNode]) -> List[Tuple[str, str]]:
    """(task key, missing predecessor key) pairs."""
    known = {t.key for t in flat_tasks}
    out: List[Tuple[str, str]] = []
    for t in flat_tasks:
        for pk in t.predecessor_keys:
            if pk not in known:
                out.append((str(t.key), pk))
    return out


def lint_forest(forest: Forest, *, label: str = "forest") -> Tuple[List[str], List[str]]:
    """Return (errors, warnings) for a forest without scheduling it."""
    flat = flatten_forest(forest)
    errs: List[str] = []
    warns: List[str] = []

    for k in find_duplicate_keys(flat):
        errs.append(f"{label}: duplicate key {k!r}")

    for task_k, pk in unresolved_predecessors(flat):
        warns.append(f"{label}: task {task_k!r} references unknown predecessor {pk!r}")

    return errs, warns
