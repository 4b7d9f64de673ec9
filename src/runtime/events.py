"""Event dataclasses and the queue publisher feeding the runtime loop."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from queue import Queue
from typing import Any, Protocol


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ClockTickEvent:
    """Event emitted by the clock driver once per second while running."""
    generation: int
    occurred_at: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True)
class CommandEvent:
    """Event emitted when a UI client sends a command."""
    command: dict[str, Any]
    occurred_at: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True)
class ShutdownEvent:
    """Event asking the runtime loop to exit."""
    reason: str = ""


RuntimeEvent = ClockTickEvent | CommandEvent | ShutdownEvent


class EventPublisher(Protocol):
    """Protocol for publishing runtime events."""

    def publish(self, event: RuntimeEvent) -> None: ...


class QueueEventPublisher:
    """Event publisher that pushes events to a queue."""

    def __init__(self, queue: Queue):
        self._queue = queue

    def publish(self, event: RuntimeEvent) -> None:
        self._queue.put(event)
