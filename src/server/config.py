"""Configuration model for the web shell server."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from app_config_schema import UIServerSettings


class ServerConfigurationError(Exception):
    """Raised when UI server configuration is invalid."""


WEBSOCKET_PATH = "/ws"
ROOT_PATH = "/"
INDEX_PATH = "/index.html"
HEALTHZ_PATH = "/healthz"
INDEX_ROUTES = frozenset({ROOT_PATH, INDEX_PATH})

_BUNDLED_INDEX = ("web_ui", "index.html")


def default_index_file() -> Path:
    """Bundled UI page, next to the frozen executable or at the repo root."""
    base_dir = Path(getattr(sys, "_MEIPASS", Path(__file__).resolve().parents[2]))
    return base_dir.joinpath(*_BUNDLED_INDEX)


def _check_index_file(raw: str) -> None:
    if not raw:
        raise ServerConfigurationError("ui_server.index_file cannot be empty")
    index_path = Path(raw)
    if not index_path.is_file():
        problem = "is not a file" if index_path.exists() else "not found"
        raise ServerConfigurationError(f"UI index file {problem}: {index_path}")


@dataclass(frozen=True)
class UIServerConfig:
    """Where the shell listens and which page it serves."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""

    def __post_init__(self) -> None:
        if not self.host.strip():
            raise ServerConfigurationError("ui_server.host cannot be empty")
        if not 1 <= self.port <= 65535:
            raise ServerConfigurationError(
                f"ui_server.port must be in [1, 65535], got: {self.port}"
            )
        if self.enabled:
            _check_index_file(self.index_file)

    @property
    def websocket_path(self) -> str:
        return WEBSOCKET_PATH

    @property
    def ui_root(self) -> Path:
        """Directory that static asset requests are resolved against."""
        return Path(self.index_file).resolve().parent

    @property
    def http_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @classmethod
    def from_settings(cls, settings: UIServerSettings) -> "UIServerConfig":
        return cls(
            enabled=bool(settings.enabled),
            host=settings.host,
            port=settings.port,
            index_file=(settings.index_file or "").strip() or str(default_index_file()),
        )
