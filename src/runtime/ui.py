from __future__ import annotations

from typing import Any, Optional, Protocol

from pomodoro import PomodoroSnapshot, focus_level
from contracts.ui_protocol import (
    EVENT_ERROR,
    EVENT_NOTICE,
    EVENT_SESSION,
    EVENT_SOUND,
    SOUND_PHASE_COMPLETE,
)


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...


class RuntimeUIPublisher:
    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_session_update(
        self,
        snapshot: PomodoroSnapshot,
        *,
        action: str,
        accepted: Optional[bool] = None,
        reason: str = "",
        command: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {
            "action": action,
            **snapshot.to_payload(),
        }
        payload["focus"]["level"] = focus_level(snapshot.focus.score)
        if accepted is not None:
            payload["accepted"] = accepted
        if reason:
            payload["reason"] = reason
        if command:
            payload["command"] = command
        if message:
            payload["message"] = message
        self.publish(EVENT_SESSION, **payload)

    def publish_sound(self, snapshot: PomodoroSnapshot) -> None:
        self.publish(EVENT_SOUND, sound=SOUND_PHASE_COMPLETE, phase=snapshot.phase)

    def publish_notice(self, message: str, *, reason: str = "") -> None:
        payload: dict[str, Any] = {"message": message}
        if reason:
            payload["reason"] = reason
        self.publish(EVENT_NOTICE, **payload)

    def publish_error(self, message: str) -> None:
        self.publish(EVENT_ERROR, message=message)
