"""Selection policy for the task credited by the next completed work phase."""

from __future__ import annotations

from typing import Iterable, Optional

from .models import Task


def first_incomplete_task(tasks: Iterable[Task]) -> Optional[Task]:
    """Return the first task in registry order that still needs pomodoros."""
    for task in tasks:
        if not task.completed:
            return task
    return None


def resolve_active_task_id(
    tasks: Iterable[Task],
    previous_id: Optional[int],
) -> Optional[int]:
    """Keep `previous_id` while it names an incomplete task, else fall back.

    The fallback is the first incomplete task in registry order, or `None`
    when every task is completed or the registry is empty.
    """
    ordered = tuple(tasks)
    if previous_id is not None:
        for task in ordered:
            if task.id == previous_id and not task.completed:
                return previous_id

    fallback = first_incomplete_task(ordered)
    return fallback.id if fallback is not None else None
