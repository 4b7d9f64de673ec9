"""UI server module for the web shell: static files, websocket events, and commands."""

from .config import ServerConfigurationError, UIServerConfig
from .service import UIServer

__all__ = [
    "ServerConfigurationError",
    "UIServerConfig",
    "UIServer",
]
