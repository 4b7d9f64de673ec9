import datetime as dt
import json
import unittest

from server.events import (
    ClientMessageError,
    StickyEventStore,
    make_event,
    parse_client_message,
)


class ServerEventsTests(unittest.TestCase):
    def test_make_event_serializes_timestamp_and_payload(self) -> None:
        now = dt.datetime(2026, 2, 21, 10, 0, tzinfo=dt.timezone.utc)
        raw = make_event("session", now_fn=lambda: now, phase="work", remaining_seconds=1500)
        payload = json.loads(raw)

        self.assertEqual("session", payload["type"])
        self.assertEqual(now.isoformat(), payload["timestamp"])
        self.assertEqual("work", payload["phase"])
        self.assertEqual(1500, payload["remaining_seconds"])

    def test_sticky_store_ignores_non_sticky_events(self) -> None:
        store = StickyEventStore()
        store.remember("hello", '{"type":"hello"}')
        store.remember("sound", '{"type":"sound"}')
        self.assertEqual([], store.snapshot())

    def test_sticky_store_snapshot_follows_stable_order(self) -> None:
        store = StickyEventStore()
        store.remember("error", '{"type":"error","n":1}')
        store.remember("notice", '{"type":"notice","n":2}')
        store.remember("session", '{"type":"session","n":3}')

        decoded_types = [json.loads(item)["type"] for item in store.snapshot()]
        self.assertEqual(["session", "notice", "error"], decoded_types)

    def test_sticky_store_overwrites_latest_event_by_type(self) -> None:
        store = StickyEventStore()
        store.remember("session", '{"type":"session","remaining_seconds":10}')
        store.remember("session", '{"type":"session","remaining_seconds":9}')
        snapshot = store.snapshot()

        self.assertEqual(1, len(snapshot))
        self.assertEqual(9, json.loads(snapshot[0])["remaining_seconds"])


class ClientMessageParsingTests(unittest.TestCase):
    def test_parses_command_with_arguments(self) -> None:
        parsed = parse_client_message(
            '{"command": " add_task ", "arguments": {"title": "Read"}}'
        )
        self.assertEqual({"command": "add_task", "arguments": {"title": "Read"}}, parsed)

    def test_missing_arguments_default_to_empty(self) -> None:
        self.assertEqual(
            {"command": "start", "arguments": {}},
            parse_client_message(b'{"command": "start"}'),
        )
        self.assertEqual(
            {"command": "start", "arguments": {}},
            parse_client_message('{"command": "start", "arguments": null}'),
        )

    def test_rejects_malformed_messages(self) -> None:
        for raw in (
            "not json",
            "[1, 2]",
            '{"arguments": {}}',
            '{"command": "   "}',
            '{"command": "start", "arguments": [1]}',
            b"\xff\xfe",
        ):
            with self.assertRaises(ClientMessageError, msg=repr(raw)):
                parse_client_message(raw)


if __name__ == "__main__":
    unittest.main()
