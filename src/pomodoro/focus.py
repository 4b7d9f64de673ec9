"""Focus score bookkeeping driven by pause events."""

from __future__ import annotations

from .constants import (
    DEFAULT_FOCUS_SCORE,
    DEFAULT_PAUSE_PENALTY,
    FOCUS_LEVEL_HIGH,
    FOCUS_LEVEL_LOW,
    FOCUS_LEVEL_MEDIUM,
    MAX_FOCUS_SCORE,
)
from .models import FocusMetrics


def record_distraction(
    metrics: FocusMetrics,
    penalty: int = DEFAULT_PAUSE_PENALTY,
) -> FocusMetrics:
    """Return metrics after one pause: one more distraction, score floored at 0."""
    return FocusMetrics(
        score=max(metrics.score - penalty, 0),
        distractions=metrics.distractions + 1,
    )


def focus_level(score: int) -> str:
    if score > 80:
        return FOCUS_LEVEL_HIGH
    if score > 50:
        return FOCUS_LEVEL_MEDIUM
    return FOCUS_LEVEL_LOW


class FocusTracker:
    """Holds the current focus metrics; the score never recovers."""

    def __init__(
        self,
        *,
        initial_score: int = DEFAULT_FOCUS_SCORE,
        pause_penalty: int = DEFAULT_PAUSE_PENALTY,
    ):
        if not 0 <= initial_score <= MAX_FOCUS_SCORE:
            raise ValueError(
                f"initial_score must be in [0, {MAX_FOCUS_SCORE}], got: {initial_score}"
            )
        if pause_penalty < 0:
            raise ValueError("pause_penalty cannot be negative")

        self._metrics = FocusMetrics(score=initial_score, distractions=0)
        self._pause_penalty = pause_penalty

    @property
    def metrics(self) -> FocusMetrics:
        return self._metrics

    def record_pause(self) -> FocusMetrics:
        self._metrics = record_distraction(self._metrics, self._pause_penalty)
        return self._metrics
