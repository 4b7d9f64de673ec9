"""Immutable value types shared by the session, registry, and runtime publishers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional

from .constants import DEFAULT_FOCUS_SCORE, PHASE_BREAK, PHASE_WORK, REASON_MESSAGES

SessionPhase = Literal["work", "break"]


@dataclass(frozen=True)
class Task:
    """A user task credited with one pomodoro per completed work phase."""
    id: int
    title: str
    estimated_pomodoros: int
    completed_pomodoros: int = 0

    @property
    def completed(self) -> bool:
        return self.completed_pomodoros >= self.estimated_pomodoros

    @property
    def progress_percent(self) -> float:
        if self.estimated_pomodoros == 0:
            return 0.0
        return min(self.completed_pomodoros / self.estimated_pomodoros * 100, 100.0)

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "estimated_pomodoros": self.estimated_pomodoros,
            "completed_pomodoros": self.completed_pomodoros,
            "completed": self.completed,
            "progress_percent": round(self.progress_percent, 1),
        }


@dataclass(frozen=True)
class FocusMetrics:
    """Focus score and the number of pauses that lowered it."""
    score: int = DEFAULT_FOCUS_SCORE
    distractions: int = 0


@dataclass(frozen=True)
class PomodoroSnapshot:
    """Immutable session snapshot exposed to runtime and UI publishers."""
    phase: SessionPhase
    is_active: bool
    remaining_seconds: int
    work_duration_minutes: int
    break_duration_minutes: int
    cycles: int
    active_task_id: Optional[int]
    tasks: tuple[Task, ...]
    focus: FocusMetrics

    @property
    def is_work_session(self) -> bool:
        return self.phase == PHASE_WORK

    @property
    def duration_seconds(self) -> int:
        if self.phase == PHASE_BREAK:
            return self.break_duration_minutes * 60
        return self.work_duration_minutes * 60

    @property
    def active_task(self) -> Optional[Task]:
        if self.active_task_id is None:
            return None
        for task in self.tasks:
            if task.id == self.active_task_id:
                return task
        return None

    def find_task(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def to_payload(self) -> dict[str, Any]:
        active_task = self.active_task
        return {
            "phase": self.phase,
            "is_active": self.is_active,
            "remaining_seconds": self.remaining_seconds,
            "duration_seconds": self.duration_seconds,
            "work_duration_minutes": self.work_duration_minutes,
            "break_duration_minutes": self.break_duration_minutes,
            "cycles": self.cycles,
            "active_task_id": self.active_task_id,
            "active_task_title": active_task.title if active_task else None,
            "tasks": [task.to_payload() for task in self.tasks],
            "focus": {
                "score": self.focus.score,
                "distractions": self.focus.distractions,
            },
        }


@dataclass(frozen=True)
class PomodoroActionResult:
    """Result envelope returned after applying a session or task action."""
    action: str
    accepted: bool
    reason: str
    snapshot: PomodoroSnapshot
    phase_changed: bool = False

    @property
    def message(self) -> str:
        return REASON_MESSAGES.get(self.reason, "")


@dataclass(frozen=True)
class PomodoroTick:
    """Tick payload emitted while the session is running."""
    snapshot: PomodoroSnapshot
    phase_changed: bool = False
    completed_task_id: Optional[int] = None
