"""Cancellable one-second tick source backing a running session."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Optional, Protocol

from .constants import DEFAULT_TICK_INTERVAL_SECONDS


class ClockLike(Protocol):
    """Clock interface the session arms and cancels on run-flag transitions."""
    def arm(self) -> int:
        ...

    def schedule_next(self, generation: int) -> bool:
        ...

    def cancel(self) -> None:
        ...

    def is_current(self, generation: int) -> bool:
        ...


class _TimerHandle(Protocol):
    daemon: bool

    def start(self) -> None:
        ...

    def cancel(self) -> None:
        ...


TimerFactory = Callable[..., _TimerHandle]


class ClockDriver:
    """Chain of one-shot timers; the next tick is scheduled only on request.

    Each `arm()` opens a new generation. Ticks are delivered as
    `on_tick(generation)` so the receiver can drop ticks that raced a pause.
    """

    def __init__(
        self,
        on_tick: Callable[[int], Any],
        *,
        interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        timer_factory: TimerFactory = threading.Timer,
        monotonic: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")

        self._on_tick = on_tick
        self._interval_seconds = float(interval_seconds)
        self._timer_factory = timer_factory
        self._monotonic = monotonic
        self._logger = logger or logging.getLogger("pomodoro.clock")
        self._lock = threading.Lock()

        self._generation = 0
        self._armed = False
        self._deadline: Optional[float] = None
        self._pending: Optional[_TimerHandle] = None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def is_armed(self) -> bool:
        with self._lock:
            return self._armed

    def arm(self) -> int:
        with self._lock:
            self._cancel_pending_locked()
            self._generation += 1
            self._armed = True
            self._deadline = self._monotonic() + self._interval_seconds
            self._schedule_locked(self._interval_seconds)
            self._logger.debug("Clock armed: generation=%d", self._generation)
            return self._generation

    def schedule_next(self, generation: int) -> bool:
        """Schedule the tick after `generation`'s last one; False if stale."""
        with self._lock:
            if not self._armed or generation != self._generation:
                return False
            if self._pending is not None:
                return False

            now = self._monotonic()
            deadline = (self._deadline or now) + self._interval_seconds
            if deadline < now:
                # Fell behind by more than one interval; resync instead of bursting.
                deadline = now + self._interval_seconds
            self._deadline = deadline
            self._schedule_locked(max(0.0, deadline - now))
            return True

    def cancel(self) -> None:
        with self._lock:
            was_armed = self._armed
            self._cancel_pending_locked()
            self._armed = False
            self._deadline = None
            self._generation += 1
            if was_armed:
                self._logger.debug("Clock cancelled")

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return self._armed and generation == self._generation

    def close(self) -> None:
        self.cancel()

    def __enter__(self) -> "ClockDriver":
        return self

    def __exit__(self, exc_type, exc, traceback) -> None:
        self.close()

    def _schedule_locked(self, delay_seconds: float) -> None:
        timer = self._timer_factory(
            delay_seconds,
            self._fire,
            args=(self._generation,),
        )
        timer.daemon = True
        self._pending = timer
        timer.start()

    def _cancel_pending_locked(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            if not self._armed or generation != self._generation:
                return
            self._pending = None
        self._on_tick(generation)
