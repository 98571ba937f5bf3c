"""Readiness watching exports."""

from .readiness_watcher import ReadinessWatcher, resolve_condition_state
from .watch_outcomes import ReadinessResult, ReadinessState

__all__ = [
    "ReadinessState",
    "ReadinessResult",
    "ReadinessWatcher",
    "resolve_condition_state",
]
