"""Ordered in-memory task registry."""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Callable, Iterator, Optional

from .models import Task
from .selector import first_incomplete_task


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


def normalize_title(title: object) -> str:
    if not isinstance(title, str):
        return ""
    return title.strip()


def clamp_estimate(estimated_pomodoros: int, *, completed_pomodoros: int = 0) -> int:
    """Clamp an estimate so it is at least 1 and never below recorded progress."""
    return max(int(estimated_pomodoros), completed_pomodoros, 1)


class TaskRegistry:
    """Owns the ordered task list. Ids are creation timestamps in milliseconds."""

    def __init__(self, *, clock_ms: Callable[[], int] = _now_millis):
        self._clock_ms = clock_ms
        self._tasks: list[Task] = []
        self._last_id = 0

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._tasks))

    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def find(self, task_id: Optional[int]) -> Optional[Task]:
        if task_id is None:
            return None
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def first_incomplete(self) -> Optional[Task]:
        return first_incomplete_task(self._tasks)

    def add(self, title: str, estimated_pomodoros: int = 1) -> Task:
        """Append a task; callers validate the title beforehand."""
        task = Task(
            id=self._next_id(),
            title=normalize_title(title),
            estimated_pomodoros=clamp_estimate(estimated_pomodoros),
        )
        self._tasks.append(task)
        return task

    def edit(
        self,
        task_id: int,
        *,
        title: Optional[str] = None,
        estimated_pomodoros: Optional[int] = None,
    ) -> Optional[Task]:
        current = self.find(task_id)
        if current is None:
            return None

        draft = current
        if title is not None:
            draft = replace(draft, title=normalize_title(title))
        if estimated_pomodoros is not None:
            draft = replace(
                draft,
                estimated_pomodoros=clamp_estimate(
                    estimated_pomodoros,
                    completed_pomodoros=draft.completed_pomodoros,
                ),
            )
        self._replace(draft)
        return draft

    def record_pomodoro(self, task_id: int) -> Optional[Task]:
        current = self.find(task_id)
        if current is None:
            return None
        updated = replace(current, completed_pomodoros=current.completed_pomodoros + 1)
        self._replace(updated)
        return updated

    def remove(self, task_id: int) -> Optional[Task]:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return self._tasks.pop(index)
        return None

    def _replace(self, updated: Task) -> None:
        for index, task in enumerate(self._tasks):
            if task.id == updated.id:
                self._tasks[index] = updated
                return

    def _next_id(self) -> int:
        candidate = max(int(self._clock_ms()), self._last_id + 1)
        self._last_id = candidate
        return candidate
