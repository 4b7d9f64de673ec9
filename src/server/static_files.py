"""Static asset lookup for files shipped next to the UI index page."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_TEXT_APPLICATION_TYPES = frozenset(
    {
        "application/javascript",
        "application/json",
        "application/xml",
        "image/svg+xml",
    }
)


@dataclass(frozen=True)
class StaticAsset:
    """File contents and HTTP content type for one UI asset."""
    body: bytes
    content_type: str


def resolve_static_file(ui_root: Path, request_path: str) -> Optional[Path]:
    """Map a request path to a file under `ui_root`, or None.

    Hidden files and anything that resolves outside the root are refused.
    """
    relative = request_path.lstrip("/")
    if not relative:
        return None
    if any(part.startswith(".") for part in Path(relative).parts):
        return None

    root = ui_root.resolve()
    candidate = (root / relative).resolve()
    if root not in candidate.parents or not candidate.is_file():
        return None
    return candidate


def guess_content_type(path: Path) -> str:
    """Guess an HTTP content type; textual types get a UTF-8 charset."""
    mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type:
        return "application/octet-stream"
    if mime_type.startswith("text/") or mime_type in _TEXT_APPLICATION_TYPES:
        return f"{mime_type}; charset=utf-8"
    return mime_type


def load_static_asset(ui_root: Path, request_path: str) -> Optional[StaticAsset]:
    path = resolve_static_file(ui_root, request_path)
    if path is None:
        return None
    return StaticAsset(body=path.read_bytes(), content_type=guess_content_type(path))
