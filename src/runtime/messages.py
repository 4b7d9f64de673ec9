"""Status and response text builders for session flows."""

from __future__ import annotations

from pomodoro import PomodoroActionResult, PomodoroSnapshot
from pomodoro.constants import (
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
    PHASE_BREAK,
    REASON_ALL_TASKS_COMPLETED,
    REASON_MESSAGES,
)


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as `MM:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def phase_label(snapshot: PomodoroSnapshot) -> str:
    return "Break Time" if snapshot.phase == PHASE_BREAK else "Work Session"


def session_status_message(snapshot: PomodoroSnapshot) -> str:
    """Build status text for the current session snapshot."""
    remaining = format_duration(snapshot.remaining_seconds)
    if not snapshot.is_active:
        if snapshot.remaining_seconds == snapshot.duration_seconds:
            return f"Ready: {phase_label(snapshot)} ({remaining})"
        return f"{phase_label(snapshot)} paused ({remaining} left)"

    active_task = snapshot.active_task
    if snapshot.phase == PHASE_BREAK:
        return f"Break Time ({remaining} left)"
    if active_task is None:
        return f"Work Session ({remaining} left, no task selected)"
    return f"Working on '{active_task.title}' ({remaining} left)"


def phase_completed_text(snapshot: PomodoroSnapshot) -> str:
    """Return the notice shown when a phase ends on its own."""
    if snapshot.phase == PHASE_BREAK:
        return "Work session complete. Time for a break."
    if snapshot.active_task is None:
        return REASON_MESSAGES[REASON_ALL_TASKS_COMPLETED]
    return f"Break over. Next up: {snapshot.active_task.title}."


def default_action_text(action: str, snapshot: PomodoroSnapshot) -> str:
    """Return default text for accepted actions."""
    if action == ACTION_START:
        return session_status_message(snapshot)
    if action == ACTION_PAUSE:
        return f"Paused. Focus score is now {snapshot.focus.score}%."
    if action == ACTION_RESET:
        return f"Timer reset to {format_duration(snapshot.remaining_seconds)}."
    if action == ACTION_SKIP_BREAK:
        return "Break skipped. Back to work."
    if action == ACTION_ADD_TASK:
        return "Task added."
    if action == ACTION_EDIT_TASK:
        return "Task updated."
    if action == ACTION_DELETE_TASK:
        return "Task deleted."
    if action == ACTION_SET_ACTIVE_TASK:
        active_task = snapshot.active_task
        return f"Current task: {active_task.title}." if active_task else "Task selected."
    if action == ACTION_SET_WORK_DURATION:
        return f"Work sessions last {snapshot.work_duration_minutes} minutes."
    if action == ACTION_SET_BREAK_DURATION:
        return f"Breaks last {snapshot.break_duration_minutes} minutes."
    return session_status_message(snapshot)


def result_text(result: PomodoroActionResult) -> str:
    """Prefer the reason's user-facing message, else the default action text."""
    return result.message or default_action_text(result.action, result.snapshot)
