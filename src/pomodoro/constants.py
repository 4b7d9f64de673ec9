"""Phase, action, reason, and message constants used by the session state machine."""

from __future__ import annotations

DEFAULT_WORK_DURATION_MINUTES = 25
DEFAULT_BREAK_DURATION_MINUTES = 5
DEFAULT_TICK_INTERVAL_SECONDS = 1.0

DEFAULT_FOCUS_SCORE = 100
DEFAULT_PAUSE_PENALTY = 5
MAX_FOCUS_SCORE = 100

PHASE_WORK = "work"
PHASE_BREAK = "break"

FOCUS_LEVEL_HIGH = "high"
FOCUS_LEVEL_MEDIUM = "medium"
FOCUS_LEVEL_LOW = "low"

ACTION_START = "start"
ACTION_PAUSE = "pause"
ACTION_RESET = "reset"
ACTION_SKIP_BREAK = "skip_break"
ACTION_ADD_TASK = "add_task"
ACTION_EDIT_TASK = "edit_task"
ACTION_DELETE_TASK = "delete_task"
ACTION_SET_ACTIVE_TASK = "set_active_task"
ACTION_SET_WORK_DURATION = "set_work_duration"
ACTION_SET_BREAK_DURATION = "set_break_duration"

ACTION_SYNC = "sync"
ACTION_TICK = "tick"
ACTION_PHASE_COMPLETED = "phase_completed"

REASON_STARTED = "started"
REASON_PAUSED = "paused"
REASON_RESET = "reset"
REASON_BREAK_SKIPPED = "break_skipped"
REASON_TASK_ADDED = "task_added"
REASON_TASK_UPDATED = "task_updated"
REASON_TASK_DELETED = "task_deleted"
REASON_TASK_ACTIVATED = "task_activated"
REASON_DURATION_UPDATED = "duration_updated"

REASON_NO_TASKS = "no_tasks"
REASON_ALL_TASKS_COMPLETED = "all_tasks_completed"
REASON_EMPTY_TITLE = "empty_title"
REASON_TASK_COMPLETED = "task_completed"
REASON_TASK_NOT_FOUND = "task_not_found"
REASON_ALREADY_RUNNING = "already_running"
REASON_NOT_RUNNING = "not_running"
REASON_NOT_ON_BREAK = "not_on_break"
REASON_INVALID_DURATION = "invalid_duration"

REASON_TICK = "tick"
REASON_WORK_COMPLETED = "work_completed"
REASON_BREAK_COMPLETED = "break_completed"
REASON_STARTUP = "startup"

# User-visible text shown by the shell for reasons that need the user's attention.
REASON_MESSAGES: dict[str, str] = {
    REASON_NO_TASKS: "Add at least one task before starting the timer",
    REASON_ALL_TASKS_COMPLETED: (
        "All tasks are completed. Please add a new task to continue."
    ),
    REASON_EMPTY_TITLE: "Task name cannot be empty",
    REASON_TASK_COMPLETED: (
        "This task is already completed. Please select an incomplete task."
    ),
    REASON_TASK_NOT_FOUND: "That task no longer exists.",
    REASON_ALREADY_RUNNING: "The timer is already running.",
    REASON_NOT_RUNNING: "The timer is not running.",
    REASON_NOT_ON_BREAK: "There is no break to skip.",
    REASON_INVALID_DURATION: "Durations must be a whole number of minutes above zero.",
}
