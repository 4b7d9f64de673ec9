import asyncio
import json
import tempfile
import unittest
from pathlib import Path

from websockets.datastructures import Headers
from websockets.http11 import Request

from server import UIServer, UIServerConfig


class _WebSocketStub:
    def __init__(self):
        self.sent: list[str] = []

    async def send(self, message: str) -> None:
        self.sent.append(message)


class UIServerRoutingTests(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        self.ui_root = Path(self._temp_dir.name)
        (self.ui_root / "index.html").write_text("<html>ui</html>", encoding="utf-8")
        (self.ui_root / "app.js").write_text("console.log(1);", encoding="utf-8")
        self.commands: list[dict[str, object]] = []
        self.server = UIServer(
            UIServerConfig(index_file=str(self.ui_root / "index.html")),
            command_handler=self.commands.append,
        )

    def tearDown(self) -> None:
        self._temp_dir.cleanup()

    def _get(self, path: str):
        return asyncio.run(self.server._process_request(None, Request(path, Headers())))

    def test_index_and_healthz_routes(self) -> None:
        for path in ("/", "/index.html"):
            response = self._get(path)
            self.assertEqual(200, response.status_code)
            self.assertEqual(b"<html>ui</html>", response.body)

        health = self._get("/healthz")
        self.assertEqual(200, health.status_code)
        self.assertEqual(b"ok\n", health.body)

    def test_static_asset_and_not_found(self) -> None:
        asset = self._get("/app.js?v=1")
        self.assertEqual(200, asset.status_code)
        self.assertIn("javascript", asset.headers["Content-Type"])

        missing = self._get("/missing.png")
        self.assertEqual(404, missing.status_code)

    def test_websocket_path_is_left_to_handshake(self) -> None:
        self.assertIsNone(self._get("/ws"))

    def test_client_command_is_forwarded(self) -> None:
        websocket = _WebSocketStub()

        asyncio.run(
            self.server._handle_client_message(
                websocket,
                '{"command": "add_task", "arguments": {"title": "Read"}}',
            )
        )

        self.assertEqual([{"command": "add_task", "arguments": {"title": "Read"}}], self.commands)
        self.assertEqual([], websocket.sent)

    def test_malformed_client_message_gets_error_reply(self) -> None:
        websocket = _WebSocketStub()

        asyncio.run(self.server._handle_client_message(websocket, "{oops"))

        self.assertEqual([], self.commands)
        self.assertEqual("error", json.loads(websocket.sent[0])["type"])

    def test_publish_before_start_keeps_sticky_state(self) -> None:
        self.server.publish("session", remaining_seconds=1500)
        self.server.publish("sound", sound="phase_complete")

        snapshot = self.server._sticky_events.snapshot()
        self.assertEqual(1, len(snapshot))
        self.assertEqual(1500, json.loads(snapshot[0])["remaining_seconds"])


if __name__ == "__main__":
    unittest.main()
