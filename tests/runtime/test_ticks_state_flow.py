import logging
import unittest

from pomodoro import FocusMetrics, PomodoroSnapshot, PomodoroTick, Task
from runtime.ticks import TickDependencies, TickProcessor
from runtime.ui import RuntimeUIPublisher


class _UIServerStub:
    def __init__(self):
        self.events: list[tuple[str, dict[str, object]]] = []

    def publish(self, event_type: str, **payload):
        self.events.append((event_type, payload))


def _snapshot(phase: str, *, remaining: int, tasks=(), active_task_id=None) -> PomodoroSnapshot:
    return PomodoroSnapshot(
        phase=phase,  # type: ignore[arg-type]
        is_active=True,
        remaining_seconds=remaining,
        work_duration_minutes=25,
        break_duration_minutes=5,
        cycles=0,
        active_task_id=active_task_id,
        tasks=tuple(tasks),
        focus=FocusMetrics(),
    )


def _processor(ui: _UIServerStub) -> TickProcessor:
    return TickProcessor(
        TickDependencies(
            logger=logging.getLogger("test"),
            ui=RuntimeUIPublisher(ui),
        )
    )


class TickStateFlowTests(unittest.TestCase):
    def test_regular_tick_publishes_single_session_update(self) -> None:
        ui = _UIServerStub()

        _processor(ui).handle_tick(PomodoroTick(snapshot=_snapshot("work", remaining=1499)))

        self.assertEqual(1, len(ui.events))
        kind, payload = ui.events[0]
        self.assertEqual("session", kind)
        self.assertEqual("tick", payload["action"])
        self.assertEqual(1499, payload["remaining_seconds"])

    def test_work_completion_plays_sound_and_announces_task(self) -> None:
        ui = _UIServerStub()
        done = Task(id=7, title="Write report", estimated_pomodoros=1, completed_pomodoros=1)
        tick = PomodoroTick(
            snapshot=_snapshot("break", remaining=300, tasks=[done]),
            phase_changed=True,
            completed_task_id=7,
        )

        _processor(ui).handle_tick(tick)

        kinds = [kind for kind, _ in ui.events]
        self.assertEqual(["sound", "session", "notice", "notice"], kinds)
        session_payload = ui.events[1][1]
        self.assertEqual("phase_completed", session_payload["action"])
        self.assertEqual("work_completed", session_payload["reason"])
        self.assertEqual("Task completed: Write report", ui.events[2][1]["message"])
        self.assertEqual("work_completed", ui.events[3][1]["reason"])

    def test_break_completion_names_next_task(self) -> None:
        ui = _UIServerStub()
        task = Task(id=3, title="Outline", estimated_pomodoros=2, completed_pomodoros=1)
        tick = PomodoroTick(
            snapshot=_snapshot("work", remaining=1500, tasks=[task], active_task_id=3),
            phase_changed=True,
        )

        _processor(ui).handle_tick(tick)

        kinds = [kind for kind, _ in ui.events]
        self.assertEqual(["sound", "session", "notice"], kinds)
        self.assertEqual("break_completed", ui.events[1][1]["reason"])
        self.assertEqual("Break over. Next up: Outline.", ui.events[2][1]["message"])

    def test_break_completion_without_tasks_reports_all_done(self) -> None:
        ui = _UIServerStub()
        tick = PomodoroTick(snapshot=_snapshot("work", remaining=1500), phase_changed=True)

        _processor(ui).handle_tick(tick)

        self.assertEqual(
            "All tasks are completed. Please add a new task to continue.",
            ui.events[-1][1]["message"],
        )


if __name__ == "__main__":
    unittest.main()
