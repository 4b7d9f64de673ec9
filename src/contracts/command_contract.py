"""Canonical command names accepted from UI clients."""

from __future__ import annotations

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
    ACTION_SYNC,
)

COMMAND_START = "start"
COMMAND_PAUSE = "pause"
COMMAND_TOGGLE = "toggle"
COMMAND_RESET = "reset"
COMMAND_SKIP_BREAK = "skip_break"
COMMAND_ADD_TASK = "add_task"
COMMAND_EDIT_TASK = "edit_task"
COMMAND_DELETE_TASK = "delete_task"
COMMAND_SET_ACTIVE_TASK = "set_active_task"
COMMAND_SET_WORK_DURATION = "set_work_duration"
COMMAND_SET_BREAK_DURATION = "set_break_duration"
COMMAND_SYNC = "sync"

COMMAND_NAME_ORDER: tuple[str, ...] = (
    COMMAND_START,
    COMMAND_PAUSE,
    COMMAND_TOGGLE,
    COMMAND_RESET,
    COMMAND_SKIP_BREAK,
    COMMAND_ADD_TASK,
    COMMAND_EDIT_TASK,
    COMMAND_DELETE_TASK,
    COMMAND_SET_ACTIVE_TASK,
    COMMAND_SET_WORK_DURATION,
    COMMAND_SET_BREAK_DURATION,
    COMMAND_SYNC,
)

COMMAND_NAMES: frozenset[str] = frozenset(COMMAND_NAME_ORDER)

TIMER_COMMAND_NAMES: frozenset[str] = frozenset(
    {
        COMMAND_START,
        COMMAND_PAUSE,
        COMMAND_TOGGLE,
        COMMAND_RESET,
        COMMAND_SKIP_BREAK,
    }
)

TASK_COMMAND_NAMES: frozenset[str] = frozenset(
    {
        COMMAND_ADD_TASK,
        COMMAND_EDIT_TASK,
        COMMAND_DELETE_TASK,
        COMMAND_SET_ACTIVE_TASK,
    }
)

DURATION_COMMAND_NAMES: frozenset[str] = frozenset(
    {
        COMMAND_SET_WORK_DURATION,
        COMMAND_SET_BREAK_DURATION,
    }
)

COMMANDS_WITHOUT_ARGUMENTS: frozenset[str] = frozenset(
    {
        COMMAND_START,
        COMMAND_PAUSE,
        COMMAND_TOGGLE,
        COMMAND_RESET,
        COMMAND_SKIP_BREAK,
        COMMAND_SYNC,
    }
)

# Toggle resolves to start or pause at dispatch time, so it has no fixed action.
COMMAND_TO_RUNTIME_ACTION: dict[str, str] = {
    COMMAND_START: ACTION_START,
    COMMAND_PAUSE: ACTION_PAUSE,
    COMMAND_RESET: ACTION_RESET,
    COMMAND_SKIP_BREAK: ACTION_SKIP_BREAK,
    COMMAND_ADD_TASK: ACTION_ADD_TASK,
    COMMAND_EDIT_TASK: ACTION_EDIT_TASK,
    COMMAND_DELETE_TASK: ACTION_DELETE_TASK,
    COMMAND_SET_ACTIVE_TASK: ACTION_SET_ACTIVE_TASK,
    COMMAND_SET_WORK_DURATION: ACTION_SET_WORK_DURATION,
    COMMAND_SET_BREAK_DURATION: ACTION_SET_BREAK_DURATION,
    COMMAND_SYNC: ACTION_SYNC,
}


def command_names_one_of_csv() -> str:
    """Return command names as `a,b,c` for error messages."""
    return ",".join(COMMAND_NAME_ORDER)
