"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass

from pomodoro.constants import (
    DEFAULT_BREAK_DURATION_MINUTES,
    DEFAULT_FOCUS_SCORE,
    DEFAULT_PAUSE_PENALTY,
    DEFAULT_TICK_INTERVAL_SECONDS,
    DEFAULT_WORK_DURATION_MINUTES,
)

DEFAULT_CONFIG_FILE = "config.toml"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class SessionSettings:
    """Timer durations and clock cadence from `[session]`."""
    work_duration_minutes: int = DEFAULT_WORK_DURATION_MINUTES
    break_duration_minutes: int = DEFAULT_BREAK_DURATION_MINUTES
    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS


@dataclass(frozen=True)
class FocusSettings:
    """Focus score tuning from `[focus]`."""
    initial_score: int = DEFAULT_FOCUS_SCORE
    pause_penalty: int = DEFAULT_PAUSE_PENALTY


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class UIServerSettings:
    """Built-in UI server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    session: SessionSettings
    focus: FocusSettings
    logging: LoggingSettings
    ui_server: UIServerSettings
    source_file: str
