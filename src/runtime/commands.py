"""Dispatcher that executes normalized UI commands against the session."""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from pomodoro import PomodoroActionResult, PomodoroSession
from pomodoro.constants import ACTION_SYNC, REASON_STARTUP
from contracts.command_contract import (
    COMMAND_ADD_TASK,
    COMMAND_DELETE_TASK,
    COMMAND_EDIT_TASK,
    COMMAND_NAMES,
    COMMAND_PAUSE,
    COMMAND_RESET,
    COMMAND_SET_ACTIVE_TASK,
    COMMAND_SET_BREAK_DURATION,
    COMMAND_SET_WORK_DURATION,
    COMMAND_SKIP_BREAK,
    COMMAND_START,
    COMMAND_SYNC,
    COMMAND_TO_RUNTIME_ACTION,
    COMMAND_TOGGLE,
    COMMANDS_WITHOUT_ARGUMENTS,
    command_names_one_of_csv,
)

from .messages import result_text, session_status_message
from .ui import RuntimeUIPublisher


class CommandArgumentError(ValueError):
    """Raised when a command carries arguments that cannot be interpreted."""


class RuntimeCommandDispatcher:
    """Routes UI commands to timer, task, and duration operations."""
    def __init__(
        self,
        *,
        logger: logging.Logger,
        session: PomodoroSession,
        ui: RuntimeUIPublisher,
    ):
        self._logger = logger
        self._session = session
        self._ui = ui

    def active_runtime_message(self) -> str:
        return session_status_message(self._session.snapshot())

    def publish_sync(self, *, reason: str = REASON_STARTUP) -> None:
        self._ui.publish_session_update(
            self._session.snapshot(),
            action=ACTION_SYNC,
            accepted=True,
            reason=reason,
            message=self.active_runtime_message(),
        )

    def handle_command(self, command: dict[str, Any]) -> str:
        raw_name = command.get("command")
        if not isinstance(raw_name, str) or raw_name.strip() not in COMMAND_NAMES:
            message = (
                f"Unsupported command: {raw_name!r}. "
                f"Expected one of: {command_names_one_of_csv()}"
            )
            self._logger.warning("Unsupported command: %r", raw_name)
            self._ui.publish_error(message)
            return message

        name = raw_name.strip()
        raw_arguments = command.get("arguments")
        arguments = raw_arguments if isinstance(raw_arguments, dict) else {}
        if arguments and name in COMMANDS_WITHOUT_ARGUMENTS:
            self._logger.debug("Ignoring arguments for %s: %s", name, arguments)

        if name == COMMAND_SYNC:
            self.publish_sync(reason=COMMAND_SYNC)
            return self.active_runtime_message()

        try:
            result = self._apply(name, arguments)
        except CommandArgumentError as error:
            message = f"Invalid arguments for {name}: {error}"
            self._logger.warning(message)
            self._ui.publish_error(message)
            return message

        response_text = result_text(result)
        if result.accepted:
            self._logger.debug("Command accepted: %s reason=%s", name, result.reason)
        else:
            self._logger.info("Command rejected: %s reason=%s", name, result.reason)

        if result.phase_changed:
            self._ui.publish_sound(result.snapshot)
        self._ui.publish_session_update(
            result.snapshot,
            action=result.action,
            accepted=result.accepted,
            reason=result.reason,
            command=name,
            message=response_text,
        )
        if result.message:
            self._ui.publish_notice(result.message, reason=result.reason)
        return response_text

    def _apply(self, name: str, arguments: dict[str, Any]) -> PomodoroActionResult:
        session = self._session
        if name == COMMAND_START:
            return session.start()
        if name == COMMAND_PAUSE:
            return session.pause()
        if name == COMMAND_TOGGLE:
            return session.toggle()
        if name == COMMAND_RESET:
            return session.reset()
        if name == COMMAND_SKIP_BREAK:
            return session.skip_break()
        if name == COMMAND_ADD_TASK:
            title = arguments.get("title")
            return session.add_task(
                title if isinstance(title, str) else "",
                _as_estimate(arguments.get("estimated_pomodoros"), default=1),
            )
        if name == COMMAND_EDIT_TASK:
            title = arguments.get("title")
            if title is not None and not isinstance(title, str):
                raise CommandArgumentError("title must be a string")
            raw_estimate = arguments.get("estimated_pomodoros")
            return session.edit_task(
                _as_task_id(arguments.get("task_id")),
                title=title,
                estimated_pomodoros=(
                    None if raw_estimate is None else _as_estimate(raw_estimate, default=1)
                ),
            )
        if name == COMMAND_DELETE_TASK:
            return session.delete_task(_as_task_id(arguments.get("task_id")))
        if name == COMMAND_SET_ACTIVE_TASK:
            return session.set_active_task(_as_task_id(arguments.get("task_id")))
        if name == COMMAND_SET_WORK_DURATION:
            return session.set_work_duration(arguments.get("minutes"))
        if name == COMMAND_SET_BREAK_DURATION:
            return session.set_break_duration(arguments.get("minutes"))

        raise CommandArgumentError(
            f"no handler for action {COMMAND_TO_RUNTIME_ACTION.get(name, name)}"
        )


def _as_task_id(value: Any) -> int:
    if isinstance(value, bool):
        raise CommandArgumentError("task_id must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise CommandArgumentError("task_id must be an integer") from error
    raise CommandArgumentError("task_id is required")


def _as_estimate(value: Any, *, default: int) -> int:
    """Parse an estimate; unparsable values fall back to `default`, negatives clamp."""
    parsed: Optional[int] = None
    if isinstance(value, bool):
        parsed = None
    elif isinstance(value, int):
        parsed = value
    elif isinstance(value, float) and math.isfinite(value):
        parsed = int(value)
    elif isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            parsed = None
    if parsed is None:
        return default
    return max(parsed, 0)
