"""Prometheus gauges describing the most recent smoketest."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Gauge

from template_smoketest.run_execution.run_contracts import RunOutcome

RESULT_LABELS = ("result", "reason")


class SmoketestMetrics:
    """Gauges labelled by result (success/failure) and failure reason."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.last_ran = Gauge(
            "template_test_last_ran",
            "Time that the template smoketest last ran",
            RESULT_LABELS,
            registry=self.registry,
        )
        self.launch_duration = Gauge(
            "template_test_launch_duration_seconds",
            "Duration the cluster last took to launch a test template instance.",
            RESULT_LABELS,
            registry=self.registry,
        )
        self.total_duration = Gauge(
            "template_test_total_duration_seconds",
            "Total duration of the previous test.",
            RESULT_LABELS,
            registry=self.registry,
        )

    def publish(self, outcome: RunOutcome) -> None:
        labels = (outcome.result_label, outcome.reason)
        self.last_ran.labels(*labels).set_to_current_time()
        self.launch_duration.labels(*labels).set(outcome.launch_duration_seconds)
        self.total_duration.labels(*labels).set(outcome.total_duration_seconds)
