"""Thread-safe in-memory pomodoro session and task state machine."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .clock import ClockLike
from .constants import (
    ACTION_ADD_TASK,
    ACTION_DELETE_TASK,
    ACTION_EDIT_TASK,
    ACTION_PAUSE,
    ACTION_RESET,
    ACTION_SET_ACTIVE_TASK,
    ACTION_SET_BREAK_DURATION,
    ACTION_SET_WORK_DURATION,
    ACTION_SKIP_BREAK,
    ACTION_START,
    DEFAULT_BREAK_DURATION_MINUTES,
    DEFAULT_FOCUS_SCORE,
    DEFAULT_PAUSE_PENALTY,
    DEFAULT_WORK_DURATION_MINUTES,
    PHASE_BREAK,
    PHASE_WORK,
    REASON_ALL_TASKS_COMPLETED,
    REASON_ALREADY_RUNNING,
    REASON_BREAK_SKIPPED,
    REASON_DURATION_UPDATED,
    REASON_EMPTY_TITLE,
    REASON_INVALID_DURATION,
    REASON_NO_TASKS,
    REASON_NOT_ON_BREAK,
    REASON_NOT_RUNNING,
    REASON_PAUSED,
    REASON_RESET,
    REASON_STARTED,
    REASON_TASK_ACTIVATED,
    REASON_TASK_ADDED,
    REASON_TASK_COMPLETED,
    REASON_TASK_DELETED,
    REASON_TASK_NOT_FOUND,
    REASON_TASK_UPDATED,
)
from .focus import FocusTracker
from .models import PomodoroActionResult, PomodoroSnapshot, PomodoroTick, SessionPhase
from .selector import resolve_active_task_id
from .tasks import TaskRegistry, normalize_title


class PomodoroSession:
    """Work/break state machine that credits the active task and tracks focus.

    Every operation runs under one lock and either commits fully or leaves
    state untouched. The only exception is `pause()`, which always records a
    distraction.
    """

    def __init__(
        self,
        *,
        work_duration_minutes: int = DEFAULT_WORK_DURATION_MINUTES,
        break_duration_minutes: int = DEFAULT_BREAK_DURATION_MINUTES,
        initial_focus_score: int = DEFAULT_FOCUS_SCORE,
        pause_penalty: int = DEFAULT_PAUSE_PENALTY,
        clock: Optional[ClockLike] = None,
        registry: Optional[TaskRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if work_duration_minutes <= 0:
            raise ValueError("work_duration_minutes must be greater than zero")
        if break_duration_minutes <= 0:
            raise ValueError("break_duration_minutes must be greater than zero")

        self._logger = logger or logging.getLogger("pomodoro")
        self._lock = threading.Lock()
        self._clock = clock
        self._registry = registry if registry is not None else TaskRegistry()
        self._focus = FocusTracker(
            initial_score=initial_focus_score,
            pause_penalty=pause_penalty,
        )

        self._work_duration_minutes = int(work_duration_minutes)
        self._break_duration_minutes = int(break_duration_minutes)
        self._time_left = self._work_duration_minutes * 60
        self._is_active = False
        self._is_work_session = True
        self._cycles = 0
        self._active_task_id: Optional[int] = None

    def snapshot(self) -> PomodoroSnapshot:
        with self._lock:
            return self._snapshot_locked()

    # Timer controls

    def start(self) -> PomodoroActionResult:
        with self._lock:
            return self._start_locked()

    def pause(self) -> PomodoroActionResult:
        with self._lock:
            return self._pause_locked()

    def toggle(self) -> PomodoroActionResult:
        """Start when stopped; any toggle while running counts as a pause."""
        with self._lock:
            if self._is_active:
                return self._pause_locked()
            return self._start_locked()

    def reset(self) -> PomodoroActionResult:
        with self._lock:
            self._stop_locked()
            self._is_work_session = True
            self._time_left = self._work_duration_minutes * 60
            self._logger.info("Session reset: remaining=%ss", self._time_left)
            return self._result_locked(ACTION_RESET, True, REASON_RESET)

    def skip_break(self) -> PomodoroActionResult:
        with self._lock:
            if self._is_work_session:
                return self._result_locked(ACTION_SKIP_BREAK, False, REASON_NOT_ON_BREAK)

            self._finish_break_locked()
            if self._active_task_id is None:
                self._stop_locked()
                self._logger.info("Break skipped with no incomplete task left; timer stopped")
                return self._result_locked(
                    ACTION_SKIP_BREAK,
                    True,
                    REASON_ALL_TASKS_COMPLETED,
                    phase_changed=True,
                )

            self._logger.info("Break skipped: cycles=%d", self._cycles)
            return self._result_locked(
                ACTION_SKIP_BREAK,
                True,
                REASON_BREAK_SKIPPED,
                phase_changed=True,
            )

    def tick(self, generation: Optional[int] = None) -> Optional[PomodoroTick]:
        """Advance one second; returns None for ticks delivered while stopped."""
        with self._lock:
            if not self._is_active:
                self._logger.debug("Ignoring tick while stopped")
                return None
            if (
                generation is not None
                and self._clock is not None
                and not self._clock.is_current(generation)
            ):
                self._logger.debug("Ignoring stale tick: generation=%d", generation)
                return None

            phase_changed = False
            completed_task_id: Optional[int] = None
            if self._time_left > 1:
                self._time_left -= 1
                self._logger.debug(
                    "Tick: phase=%s remaining=%ss",
                    self._phase_locked(),
                    self._time_left,
                )
            elif self._is_work_session:
                completed_task_id = self._finish_work_locked()
                phase_changed = True
            else:
                self._finish_break_locked()
                phase_changed = True

            if self._is_active and self._clock is not None and generation is not None:
                self._clock.schedule_next(generation)

            return PomodoroTick(
                snapshot=self._snapshot_locked(),
                phase_changed=phase_changed,
                completed_task_id=completed_task_id,
            )

    def set_work_duration(self, minutes: object) -> PomodoroActionResult:
        with self._lock:
            value = _positive_minutes(minutes)
            if value is None:
                return self._result_locked(
                    ACTION_SET_WORK_DURATION, False, REASON_INVALID_DURATION
                )
            self._work_duration_minutes = value
            if self._is_work_session and not self._is_active:
                self._time_left = value * 60
            self._logger.info("Work duration set to %d minutes", value)
            return self._result_locked(ACTION_SET_WORK_DURATION, True, REASON_DURATION_UPDATED)

    def set_break_duration(self, minutes: object) -> PomodoroActionResult:
        with self._lock:
            value = _positive_minutes(minutes)
            if value is None:
                return self._result_locked(
                    ACTION_SET_BREAK_DURATION, False, REASON_INVALID_DURATION
                )
            self._break_duration_minutes = value
            if not self._is_work_session and not self._is_active:
                self._time_left = value * 60
            self._logger.info("Break duration set to %d minutes", value)
            return self._result_locked(ACTION_SET_BREAK_DURATION, True, REASON_DURATION_UPDATED)

    # Task operations

    def add_task(self, title: str, estimated_pomodoros: int = 1) -> PomodoroActionResult:
        with self._lock:
            if not normalize_title(title):
                return self._result_locked(ACTION_ADD_TASK, False, REASON_EMPTY_TITLE)

            previous = self._registry.find(self._active_task_id)
            task = self._registry.add(title, estimated_pomodoros)
            if previous is None or previous.completed:
                self._active_task_id = task.id
            self._logger.info(
                "Task added: id=%d title=%r estimate=%d",
                task.id,
                task.title,
                task.estimated_pomodoros,
            )
            return self._result_locked(ACTION_ADD_TASK, True, REASON_TASK_ADDED)

    def edit_task(
        self,
        task_id: int,
        *,
        title: Optional[str] = None,
        estimated_pomodoros: Optional[int] = None,
    ) -> PomodoroActionResult:
        with self._lock:
            if self._registry.find(task_id) is None:
                return self._result_locked(ACTION_EDIT_TASK, False, REASON_TASK_NOT_FOUND)
            if title is not None and not normalize_title(title):
                return self._result_locked(ACTION_EDIT_TASK, False, REASON_EMPTY_TITLE)

            task = self._registry.edit(
                task_id,
                title=title,
                estimated_pomodoros=estimated_pomodoros,
            )
            self._repair_active_task_locked()
            if task is not None:
                self._logger.info(
                    "Task updated: id=%d title=%r progress=%d/%d",
                    task.id,
                    task.title,
                    task.completed_pomodoros,
                    task.estimated_pomodoros,
                )
            return self._result_locked(ACTION_EDIT_TASK, True, REASON_TASK_UPDATED)

    def delete_task(self, task_id: int) -> PomodoroActionResult:
        with self._lock:
            removed = self._registry.remove(task_id)
            if removed is None:
                return self._result_locked(ACTION_DELETE_TASK, False, REASON_TASK_NOT_FOUND)

            self._repair_active_task_locked()
            self._logger.info(
                "Task deleted: id=%d active=%s",
                removed.id,
                self._active_task_id,
            )
            return self._result_locked(ACTION_DELETE_TASK, True, REASON_TASK_DELETED)

    def set_active_task(self, task_id: int) -> PomodoroActionResult:
        with self._lock:
            task = self._registry.find(task_id)
            if task is None:
                return self._result_locked(
                    ACTION_SET_ACTIVE_TASK, False, REASON_TASK_NOT_FOUND
                )
            if task.completed:
                return self._result_locked(
                    ACTION_SET_ACTIVE_TASK, False, REASON_TASK_COMPLETED
                )

            self._active_task_id = task.id
            self._logger.info("Active task set: id=%d", task.id)
            return self._result_locked(ACTION_SET_ACTIVE_TASK, True, REASON_TASK_ACTIVATED)

    # Lifecycle

    def close(self) -> None:
        with self._lock:
            if self._clock is not None:
                self._clock.cancel()

    def __enter__(self) -> "PomodoroSession":
        return self

    def __exit__(self, exc_type, exc, traceback) -> None:
        self.close()

    # Internals, called with the lock held

    def _start_locked(self) -> PomodoroActionResult:
        if self._is_active:
            return self._result_locked(ACTION_START, False, REASON_ALREADY_RUNNING)

        rejection = self._availability_rejection_locked()
        if rejection is not None:
            self._logger.info("Start rejected: reason=%s", rejection)
            return self._result_locked(ACTION_START, False, rejection)

        self._repair_active_task_locked()
        self._is_active = True
        if self._clock is not None:
            self._clock.arm()
        self._logger.info(
            "Session started: phase=%s remaining=%ss task=%s",
            self._phase_locked(),
            self._time_left,
            self._active_task_id,
        )
        return self._result_locked(ACTION_START, True, REASON_STARTED)

    def _pause_locked(self) -> PomodoroActionResult:
        metrics = self._focus.record_pause()
        self._logger.info(
            "Distraction recorded: score=%d distractions=%d",
            metrics.score,
            metrics.distractions,
        )

        if not self._is_active:
            rejection = self._availability_rejection_locked()
            return self._result_locked(
                ACTION_PAUSE,
                False,
                rejection or REASON_NOT_RUNNING,
            )

        self._stop_locked()
        self._logger.info(
            "Session paused: phase=%s remaining=%ss",
            self._phase_locked(),
            self._time_left,
        )
        return self._result_locked(ACTION_PAUSE, True, REASON_PAUSED)

    def _availability_rejection_locked(self) -> Optional[str]:
        if len(self._registry) == 0:
            return REASON_NO_TASKS
        if self._registry.first_incomplete() is None:
            return REASON_ALL_TASKS_COMPLETED
        return None

    def _repair_active_task_locked(self) -> None:
        previous = self._active_task_id
        self._active_task_id = resolve_active_task_id(self._registry, previous)
        if self._active_task_id != previous:
            self._logger.info(
                "Active task changed: %s -> %s",
                previous,
                self._active_task_id,
            )

    def _finish_work_locked(self) -> Optional[int]:
        completed_task_id: Optional[int] = None
        if self._active_task_id is not None:
            task = self._registry.record_pomodoro(self._active_task_id)
            if task is not None:
                self._logger.info(
                    "Pomodoro credited: task=%d progress=%d/%d",
                    task.id,
                    task.completed_pomodoros,
                    task.estimated_pomodoros,
                )
                if task.completed:
                    completed_task_id = task.id

        self._is_work_session = False
        self._time_left = self._break_duration_minutes * 60
        self._repair_active_task_locked()
        self._logger.info("Work phase completed; break for %ss", self._time_left)
        return completed_task_id

    def _finish_break_locked(self) -> None:
        self._is_work_session = True
        self._cycles += 1
        self._time_left = self._work_duration_minutes * 60
        self._repair_active_task_locked()
        self._logger.info(
            "Break completed: cycles=%d task=%s",
            self._cycles,
            self._active_task_id,
        )

    def _stop_locked(self) -> None:
        self._is_active = False
        if self._clock is not None:
            self._clock.cancel()

    def _phase_locked(self) -> SessionPhase:
        return PHASE_WORK if self._is_work_session else PHASE_BREAK

    def _result_locked(
        self,
        action: str,
        accepted: bool,
        reason: str,
        *,
        phase_changed: bool = False,
    ) -> PomodoroActionResult:
        return PomodoroActionResult(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self._snapshot_locked(),
            phase_changed=phase_changed,
        )

    def _snapshot_locked(self) -> PomodoroSnapshot:
        return PomodoroSnapshot(
            phase=self._phase_locked(),
            is_active=self._is_active,
            remaining_seconds=self._time_left,
            work_duration_minutes=self._work_duration_minutes,
            break_duration_minutes=self._break_duration_minutes,
            cycles=self._cycles,
            active_task_id=self._active_task_id,
            tasks=self._registry.tasks(),
            focus=self._focus.metrics,
        )


def _positive_minutes(value: object) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if not isinstance(value, int) or value <= 0:
        return None
    return value
