"""Web UI websocket event constants."""

from __future__ import annotations

# Websocket event types
EVENT_HELLO = "hello"
EVENT_SESSION = "session"
EVENT_SOUND = "sound"
EVENT_NOTICE = "notice"
EVENT_ERROR = "error"

# Sound cues sent with EVENT_SOUND
SOUND_PHASE_COMPLETE = "phase_complete"

STICKY_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_SESSION,
        EVENT_NOTICE,
        EVENT_ERROR,
    }
)

STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_SESSION,
    EVENT_NOTICE,
    EVENT_ERROR,
)
