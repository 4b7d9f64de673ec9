from .clock import ClockDriver, ClockLike
from .constants import (
    DEFAULT_BREAK_DURATION_MINUTES,
    DEFAULT_WORK_DURATION_MINUTES,
)
from .focus import FocusTracker, focus_level, record_distraction
from .models import (
    FocusMetrics,
    PomodoroActionResult,
    PomodoroSnapshot,
    PomodoroTick,
    SessionPhase,
    Task,
)
from .selector import first_incomplete_task, resolve_active_task_id
from .service import PomodoroSession
from .tasks import TaskRegistry

__all__ = [
    "ClockDriver",
    "ClockLike",
    "DEFAULT_BREAK_DURATION_MINUTES",
    "DEFAULT_WORK_DURATION_MINUTES",
    "FocusMetrics",
    "FocusTracker",
    "PomodoroActionResult",
    "PomodoroSession",
    "PomodoroSnapshot",
    "PomodoroTick",
    "SessionPhase",
    "Task",
    "TaskRegistry",
    "first_incomplete_task",
    "focus_level",
    "record_distraction",
    "resolve_active_task_id",
]
