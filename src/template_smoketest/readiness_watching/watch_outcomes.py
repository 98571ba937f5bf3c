"""Readiness watching entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from template_smoketest.smoketest_failures import SmoketestFailure
from template_smoketest.template_resources.resource_models import InstanceRequest


class ReadinessState(str, Enum):
    """Lifecycle state of a watched template instance."""

    PENDING = "pending"
    READY = "ready"
    INSTANTIATE_FAILED = "instantiate_failed"
    TIMED_OUT = "timed_out"
    UNEXPECTED = "unexpected"

    @property
    def is_terminal(self) -> bool:
        return self is not ReadinessState.PENDING


_FAILURE_BY_STATE = {
    ReadinessState.INSTANTIATE_FAILED: SmoketestFailure.LAUNCH_INSTANCE_FAILED,
    ReadinessState.TIMED_OUT: SmoketestFailure.LAUNCH_INSTANCE_TIMEOUT,
    ReadinessState.UNEXPECTED: SmoketestFailure.UNKNOWN,
}


@dataclass(frozen=True)
class ReadinessResult:
    """Terminal outcome of waiting for a template instance."""

    instance: InstanceRequest
    duration_seconds: float
    state: ReadinessState

    @property
    def is_ready(self) -> bool:
        return self.state is ReadinessState.READY

    @property
    def failure(self) -> SmoketestFailure | None:
        """Classification for a non-ready outcome, None when ready."""
        return _FAILURE_BY_STATE.get(self.state)
