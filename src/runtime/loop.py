"""Runtime orchestration loop that serializes clock ticks and UI commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from queue import Empty, Queue
from typing import Any, Callable, Optional

from app_config import AppConfig
from pomodoro import ClockDriver, PomodoroSession
from server import UIServer

from .commands import RuntimeCommandDispatcher
from .events import (
    ClockTickEvent,
    CommandEvent,
    EventPublisher,
    QueueEventPublisher,
    ShutdownEvent,
)
from .ticks import TickDependencies, TickProcessor
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class RuntimeHooks:
    """Injectable lifecycle hooks used by runtime startup and shutdown flow."""
    setup_signal_handlers: Callable[["RuntimeEngine"], None]


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    app_config: AppConfig
    ui_server: Optional[UIServer]
    hooks: RuntimeHooks


@dataclass
class RuntimeResources:
    """Mutable runtime resources created for the event loop lifecycle."""
    event_queue: Queue[Any]
    publisher: EventPublisher
    clock: ClockDriver


class RuntimeEngine:
    """Single-writer loop: every tick and command is applied one at a time."""
    def __init__(self, bootstrap: RuntimeBootstrap):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        settings = bootstrap.app_config

        event_queue: Queue[Any] = Queue()
        publisher = QueueEventPublisher(event_queue)
        self._resources = RuntimeResources(
            event_queue=event_queue,
            publisher=publisher,
            clock=ClockDriver(
                lambda generation: publisher.publish(ClockTickEvent(generation)),
                interval_seconds=settings.session.tick_interval_seconds,
                logger=logging.getLogger("pomodoro.clock"),
            ),
        )

        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        self._session = PomodoroSession(
            work_duration_minutes=settings.session.work_duration_minutes,
            break_duration_minutes=settings.session.break_duration_minutes,
            initial_focus_score=settings.focus.initial_score,
            pause_penalty=settings.focus.pause_penalty,
            clock=self._resources.clock,
            logger=logging.getLogger("pomodoro"),
        )
        self._dispatcher = RuntimeCommandDispatcher(
            logger=self._logger,
            session=self._session,
            ui=self._ui,
        )
        self._tick_processor = TickProcessor(
            TickDependencies(
                logger=self._logger,
                ui=self._ui,
            )
        )
        if bootstrap.ui_server is not None:
            bootstrap.ui_server.set_command_handler(self.submit_command)

    @property
    def session(self) -> PomodoroSession:
        return self._session

    def submit_command(self, command: dict[str, Any]) -> None:
        """Queue a UI command; safe to call from the websocket thread."""
        self._resources.publisher.publish(CommandEvent(command))

    def request_shutdown(self, reason: str = "") -> None:
        self._resources.publisher.publish(ShutdownEvent(reason))

    def run(self) -> int:
        try:
            self._bootstrap.hooks.setup_signal_handlers(self)

            ui_server = self._bootstrap.ui_server
            if ui_server is not None:
                self._logger.info("Starting UI server...")
                ui_server.start()

            self._dispatcher.publish_sync()
            self._logger.info("Ready! %s", self._dispatcher.active_runtime_message())

            while True:
                event = self._poll_event()
                if event is None:
                    continue

                event_exit = self._handle_event(event)
                if event_exit is not None:
                    return event_exit

        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
            return 0
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            return 1
        finally:
            self._shutdown()

    def _poll_event(self) -> Optional[Any]:
        try:
            return self._resources.event_queue.get(timeout=0.25)
        except Empty:
            return None

    def _handle_event(self, event: Any) -> Optional[int]:
        if isinstance(event, ClockTickEvent):
            tick = self._session.tick(event.generation)
            if tick is not None:
                self._tick_processor.handle_tick(tick)
            return None

        if isinstance(event, CommandEvent):
            self._logger.debug("Command received: %s", event.command)
            self._dispatcher.handle_command(event.command)
            return None

        if isinstance(event, ShutdownEvent):
            self._logger.info("Shutdown requested: %s", event.reason or "no reason given")
            return 0

        self._logger.warning("Ignoring unknown event type: %s", type(event).__name__)
        return None

    def _shutdown(self) -> None:
        self._logger.info("Stopping session clock...")
        self._session.close()
        self._resources.clock.close()

        ui_server = self._bootstrap.ui_server
        if ui_server is not None:
            self._logger.info("Stopping UI server...")
            try:
                ui_server.stop(timeout_seconds=5.0)
            except Exception as error:
                self._logger.error("Error stopping UI server: %s", error, exc_info=True)
