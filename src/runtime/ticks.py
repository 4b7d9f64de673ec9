"""Tick handler that publishes countdown updates and phase-completion cues."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pomodoro import PomodoroTick
from pomodoro.constants import (
    ACTION_PHASE_COMPLETED,
    ACTION_TICK,
    PHASE_BREAK,
    REASON_BREAK_COMPLETED,
    REASON_TICK,
    REASON_WORK_COMPLETED,
)

from .messages import phase_completed_text
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class TickDependencies:
    """Dependencies required for processing session tick events."""
    logger: logging.Logger
    ui: RuntimeUIPublisher


class TickProcessor:
    """Handles tick side effects such as UI updates and the completion sound."""
    def __init__(self, dependencies: TickDependencies):
        self._dependencies = dependencies

    def handle_tick(self, tick: PomodoroTick) -> None:
        deps = self._dependencies
        if tick.phase_changed:
            # The snapshot already shows the new phase, so break means work just ended.
            reason = (
                REASON_WORK_COMPLETED
                if tick.snapshot.phase == PHASE_BREAK
                else REASON_BREAK_COMPLETED
            )
            completion_message = phase_completed_text(tick.snapshot)
            deps.logger.info(
                "Phase completed: now=%s cycles=%d",
                tick.snapshot.phase,
                tick.snapshot.cycles,
            )
            deps.ui.publish_sound(tick.snapshot)
            deps.ui.publish_session_update(
                tick.snapshot,
                action=ACTION_PHASE_COMPLETED,
                accepted=True,
                reason=reason,
                message=completion_message,
            )
            if tick.completed_task_id is not None:
                task = tick.snapshot.find_task(tick.completed_task_id)
                if task is not None:
                    deps.ui.publish_notice(f"Task completed: {task.title}")
            deps.ui.publish_notice(completion_message, reason=reason)
            return

        deps.ui.publish_session_update(
            tick.snapshot,
            action=ACTION_TICK,
            accepted=True,
            reason=REASON_TICK,
        )
