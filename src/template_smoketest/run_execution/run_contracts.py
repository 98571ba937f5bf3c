"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from template_smoketest.configuration.runtime_settings import (
    DEFAULT_TIMEOUT_SECONDS,
    ClusterSettings,
)
from template_smoketest.smoketest_failures import SmoketestFailure

RESULT_SUCCESS = "success"
RESULT_FAILURE = "failure"


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one smoketest."""

    cluster: ClusterSettings = field(default_factory=ClusterSettings)
    keep_objects: bool = False
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed smoketest."""

    run_id: str
    started_at: datetime
    launch_duration_seconds: float
    total_duration_seconds: float
    failure: SmoketestFailure | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def result_label(self) -> str:
        return RESULT_SUCCESS if self.failure is None else RESULT_FAILURE

    @property
    def reason(self) -> str:
        return "" if self.failure is None else self.failure.value
