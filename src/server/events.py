"""Utilities for serializing UI events, parsing client commands, and sticky state."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable

from contracts.ui_protocol import STICKY_EVENT_ORDER, STICKY_EVENT_TYPES


class ClientMessageError(ValueError):
    """Raised when a websocket client sends a message that is not a command."""


def make_event(
    event_type: str,
    *,
    now_fn: Callable[[], datetime] | None = None,
    **payload: Any,
) -> str:
    """Serialize an event payload with type and timestamp for websocket delivery."""
    now = now_fn() if now_fn is not None else datetime.now(timezone.utc)
    return json.dumps(
        {
            "type": event_type,
            "timestamp": now.isoformat(),
            **payload,
        }
    )


def parse_client_message(raw: str | bytes) -> dict[str, Any]:
    """Decode `{"command": ..., "arguments": {...}}` sent by a UI client."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as error:
            raise ClientMessageError("message is not valid UTF-8") from error

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as error:
        raise ClientMessageError(f"message is not valid JSON: {error.msg}") from error

    if not isinstance(payload, dict):
        raise ClientMessageError("message must be a JSON object")

    command = payload.get("command")
    if not isinstance(command, str) or not command.strip():
        raise ClientMessageError("message is missing a command name")

    arguments = payload.get("arguments", {})
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise ClientMessageError("arguments must be a JSON object")

    return {"command": command.strip(), "arguments": arguments}


class StickyEventStore:
    """Thread-safe cache of sticky events replayed to new websocket clients."""
    def __init__(self):
        self._events: dict[str, str] = {}
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str) -> None:
        if event_type not in STICKY_EVENT_TYPES:
            return
        with self._lock:
            self._events[event_type] = message

    def snapshot(self) -> list[str]:
        with self._lock:
            return [self._events[key] for key in STICKY_EVENT_ORDER if key in self._events]
