from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import websockets
from websockets.asyncio.server import ServerConnection
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_ERROR, EVENT_HELLO

from .config import HEALTHZ_PATH, INDEX_ROUTES, UIServerConfig
from .events import ClientMessageError, StickyEventStore, make_event, parse_client_message
from .static_files import load_static_asset

CommandHandler = Callable[[dict[str, Any]], None]

_HTML = "text/html; charset=utf-8"
_TEXT = "text/plain; charset=utf-8"


def _http_response(status_code: int, reason_phrase: str, body: bytes, content_type: str) -> Response:
    headers = Headers()
    headers["Content-Type"] = content_type
    headers["Content-Length"] = str(len(body))
    headers["Cache-Control"] = "no-store"
    return Response(status_code, reason_phrase, headers, body)


class UIServer:
    """Web shell transport: serves the page and relays events and commands.

    The asyncio loop lives on its own daemon thread. `publish()` may be called
    from any thread; incoming commands go to the registered handler, which is
    expected to queue them rather than apply them on the server thread.
    """

    def __init__(
        self,
        config: UIServerConfig,
        logger: Optional[logging.Logger] = None,
        command_handler: Optional[CommandHandler] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("ui_server")
        self._command_handler = command_handler
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_async: Optional[asyncio.Event] = None
        self._started = threading.Event()
        self._startup_error: Optional[Exception] = None
        self._clients: set[ServerConnection] = set()
        self._sticky_events = StickyEventStore()
        self._ui_root = config.ui_root
        index_html = Path(config.index_file).read_bytes()
        self._fixed_routes: dict[str, tuple[bytes, str]] = {
            **{path: (index_html, _HTML) for path in INDEX_ROUTES},
            HEALTHZ_PATH: (b"ok\n", _TEXT),
        }

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def websocket_path(self) -> str:
        return self._config.websocket_path

    @property
    def client_count(self) -> int:
        return len(self._clients)

    @property
    def is_running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and self._startup_error is None
        )

    def set_command_handler(self, handler: CommandHandler) -> None:
        self._command_handler = handler

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("UI server is already running")
            return

        self._startup_error = None
        self._started.clear()
        self._thread = threading.Thread(target=self._run_loop, daemon=True, name="ui-server")
        self._thread.start()

        if not self._started.wait(timeout_seconds):
            raise RuntimeError(f"UI server did not start within {timeout_seconds:.1f}s")
        if self._startup_error is not None:
            raise RuntimeError(f"UI server startup failed: {self._startup_error}")

    def stop(self, timeout_seconds: float = 5.0) -> None:
        if self._thread is None:
            return

        if self._loop and self._stop_async:
            self._loop.call_soon_threadsafe(self._stop_async.set)

        self._thread.join(timeout=timeout_seconds)
        if self._thread.is_alive():
            self._logger.error("UI server thread did not stop within %.1fs", timeout_seconds)

        self._thread = None
        self._loop = None
        self._stop_async = None

    def publish(self, event_type: str, **payload: Any) -> None:
        """Serialize, remember if sticky, and fan out to connected clients."""
        message = make_event(event_type, **payload)
        self._sticky_events.remember(event_type, message)

        loop = self._loop
        if not self.is_running or loop is None:
            return
        try:
            future = asyncio.run_coroutine_threadsafe(self._broadcast(message), loop)
        except RuntimeError:
            # Loop is closing.
            return
        future.add_done_callback(self._log_broadcast_failure)

    def _log_broadcast_failure(self, future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self._logger.warning("Broadcast failed: %s", error)

    def _run_loop(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)
        self._stop_async = asyncio.Event()

        try:
            self._loop.run_until_complete(self._serve())
        except Exception as error:  # pragma: no cover - exercised manually
            self._startup_error = error
            self._logger.error("UI server failed: %s", error, exc_info=True)
            self._started.set()
        finally:
            pending = asyncio.all_tasks(self._loop)
            for task in pending:
                task.cancel()
            with contextlib.suppress(Exception):
                self._loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            self._loop.close()

    async def _serve(self) -> None:
        async with websockets.serve(
            self._handler,
            host=self._config.host,
            port=self._config.port,
            process_request=self._process_request,
            logger=self._logger,
        ):
            self._logger.info(
                "UI server running at %s (websocket: %s)",
                self._config.http_url,
                self._config.websocket_path,
            )
            self._started.set()
            await self._stop_async.wait()
            await self._disconnect_all()

    async def _handler(self, websocket: ServerConnection) -> None:
        request = websocket.request
        if request is None or urlsplit(request.path).path != self._config.websocket_path:
            await websocket.close(code=1008, reason="Invalid websocket path")
            return

        self._clients.add(websocket)
        self._logger.info("Client connected: %s", websocket.remote_address)
        try:
            await self._send_initial_state(websocket)
            async for message in websocket:
                await self._handle_client_message(websocket, message)
        except websockets.exceptions.ConnectionClosed:
            self._logger.info("Client disconnected: %s", websocket.remote_address)
        finally:
            self._clients.discard(websocket)

    async def _send_initial_state(self, websocket: ServerConnection) -> None:
        """Greet a new client, then replay the latest session, notice, and error."""
        await websocket.send(make_event(EVENT_HELLO, message="UI websocket connected"))
        for message in self._sticky_events.snapshot():
            await websocket.send(message)

    async def _handle_client_message(self, websocket: ServerConnection, message: str | bytes) -> None:
        self._logger.debug("Received from UI: %s", message)
        try:
            command = parse_client_message(message)
        except ClientMessageError as error:
            self._logger.warning("Rejected UI message: %s", error)
            await websocket.send(make_event(EVENT_ERROR, message=str(error)))
            return

        handler = self._command_handler
        if handler is None:
            self._logger.warning("No command handler registered; dropping %s", command)
            await websocket.send(make_event(EVENT_ERROR, message="Server is not accepting commands"))
            return
        handler(command)

    async def _process_request(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Response | None:
        del connection  # Routing depends only on the path.
        path = urlsplit(request.path).path
        if path == self._config.websocket_path:
            return None

        fixed = self._fixed_routes.get(path)
        if fixed is not None:
            return _http_response(200, "OK", *fixed)

        asset = load_static_asset(self._ui_root, path)
        if asset is not None:
            return _http_response(200, "OK", asset.body, asset.content_type)
        return _http_response(404, "Not Found", b"not found\n", _TEXT)

    async def _disconnect_all(self) -> None:
        clients = tuple(self._clients)
        self._clients.clear()
        await asyncio.gather(
            *(client.close(code=1001, reason="Server shutting down") for client in clients),
            return_exceptions=True,
        )

    async def _broadcast(self, message: str) -> None:
        clients = tuple(self._clients)
        if not clients:
            return
        delivered = await asyncio.gather(*(self._send_to(client, message) for client in clients))
        for client, ok in zip(clients, delivered):
            if not ok:
                self._clients.discard(client)

    async def _send_to(self, client: ServerConnection, message: str) -> bool:
        try:
            await client.send(message)
        except Exception as error:
            self._logger.warning("Failed to send message to client: %s", error)
            return False
        return True
