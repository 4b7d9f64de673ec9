"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    AppConfig,
    AppConfigurationError,
    FocusSettings,
    LoggingSettings,
    SessionSettings,
    UIServerSettings,
)
from pomodoro.constants import (
    DEFAULT_BREAK_DURATION_MINUTES,
    DEFAULT_FOCUS_SCORE,
    DEFAULT_PAUSE_PENALTY,
    DEFAULT_TICK_INTERVAL_SECONDS,
    DEFAULT_WORK_DURATION_MINUTES,
    MAX_FOCUS_SCORE,
)

_ALLOWED_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    session = _parse_session_settings(_section(raw, "session"))
    focus = _parse_focus_settings(_section(raw, "focus"))
    logging_settings = _parse_logging_settings(_section(raw, "logging"))
    ui_server = _parse_ui_server_settings(_section(raw, "ui_server"), base_dir=base_dir)

    return AppConfig(
        session=session,
        focus=focus,
        logging=logging_settings,
        ui_server=ui_server,
        source_file=source_file,
    )


def _parse_session_settings(section: Mapping[str, Any]) -> SessionSettings:
    work = _as_int(
        section.get("work_duration_minutes", DEFAULT_WORK_DURATION_MINUTES),
        "session.work_duration_minutes",
    )
    brk = _as_int(
        section.get("break_duration_minutes", DEFAULT_BREAK_DURATION_MINUTES),
        "session.break_duration_minutes",
    )
    interval = _as_float(
        section.get("tick_interval_seconds", DEFAULT_TICK_INTERVAL_SECONDS),
        "session.tick_interval_seconds",
    )
    _require_positive(work, "session.work_duration_minutes")
    _require_positive(brk, "session.break_duration_minutes")
    _require_positive(interval, "session.tick_interval_seconds")
    return SessionSettings(
        work_duration_minutes=work,
        break_duration_minutes=brk,
        tick_interval_seconds=interval,
    )


def _parse_focus_settings(section: Mapping[str, Any]) -> FocusSettings:
    initial_score = _as_int(
        section.get("initial_score", DEFAULT_FOCUS_SCORE),
        "focus.initial_score",
    )
    pause_penalty = _as_int(
        section.get("pause_penalty", DEFAULT_PAUSE_PENALTY),
        "focus.pause_penalty",
    )
    if not 0 <= initial_score <= MAX_FOCUS_SCORE:
        raise AppConfigurationError(
            f"focus.initial_score must be in [0, {MAX_FOCUS_SCORE}], got: {initial_score}"
        )
    if pause_penalty < 0:
        raise AppConfigurationError(
            f"focus.pause_penalty must be >= 0, got: {pause_penalty}"
        )
    return FocusSettings(initial_score=initial_score, pause_penalty=pause_penalty)


def _parse_logging_settings(section: Mapping[str, Any]) -> LoggingSettings:
    level = _as_str(section.get("level", "INFO"), "logging.level").upper() or "INFO"
    if level not in _ALLOWED_LOG_LEVELS:
        allowed = ", ".join(sorted(_ALLOWED_LOG_LEVELS))
        raise AppConfigurationError(f"logging.level must be one of: {allowed}.")
    return LoggingSettings(level=level)


def _parse_ui_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> UIServerSettings:
    index_file = _as_str(section.get("index_file", ""), "ui_server.index_file")
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        index_file=_resolve_path(base_dir, index_file) if index_file else "",
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _require_positive(value: float, field: str) -> None:
    if value <= 0:
        raise AppConfigurationError(f"{field} must be greater than zero, got: {value}")


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
