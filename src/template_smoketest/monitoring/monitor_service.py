"""Long-running monitor: periodic smoketests exported as metrics."""

from __future__ import annotations

import logging
import signal
from collections.abc import Callable

from template_smoketest.cluster_access.client_loading import ClusterConnection
from template_smoketest.configuration.runtime_settings import ClusterSettings, Configuration
from template_smoketest.run_execution import RunOutcome, RunRequest, execute_template_smoketest

from .health_endpoints import MetricsHttpServer, build_wsgi_app
from .periodic_scheduler import PeriodicScheduler
from .result_metrics import SmoketestMetrics

logger = logging.getLogger(__name__)

ConnectionLoader = Callable[[ClusterSettings], ClusterConnection]


def run_and_publish(
    request: RunRequest,
    metrics: SmoketestMetrics,
    *,
    connection_loader: ConnectionLoader | None = None,
) -> RunOutcome:
    """Execute one smoketest and record its outcome in ``metrics``."""
    outcome = execute_template_smoketest(request, connection_loader=connection_loader)
    metrics.publish(outcome)
    logger.info(
        "Smoketest %s finished: result=%s reason=%s launch=%.2fs total=%.2fs",
        outcome.run_id,
        outcome.result_label,
        outcome.reason or "-",
        outcome.launch_duration_seconds,
        outcome.total_duration_seconds,
    )
    return outcome


def run_monitor(
    configuration: Configuration,
    *,
    connection_loader: ConnectionLoader | None = None,
    metrics: SmoketestMetrics | None = None,
    install_signal_handlers: bool = True,
) -> None:
    """Serve /healthz and /metrics and run smoketests until SIGINT or SIGTERM."""
    settings = configuration.monitor
    logger.info("Started template smoketest application")
    logger.debug("Listening at address %s", settings.listen_address)
    logger.debug("Keeping test artifact objects: %s", settings.keep_objects)
    logger.debug("Test interval: %d", settings.interval_seconds)
    logger.debug("Instance launch timeout: %d", settings.timeout_seconds)

    resolved_metrics = metrics or SmoketestMetrics()
    server = MetricsHttpServer(settings.listen_address, build_wsgi_app(resolved_metrics.registry))
    request = RunRequest(
        cluster=configuration.cluster,
        keep_objects=settings.keep_objects,
        timeout_seconds=settings.timeout_seconds,
    )
    scheduler = PeriodicScheduler(
        settings.interval_seconds,
        lambda: run_and_publish(request, resolved_metrics, connection_loader=connection_loader),
    )
    if install_signal_handlers:
        _install_signal_handlers(scheduler.stop)

    server.start()
    try:
        scheduler.run()
    finally:
        server.stop()
        logger.info("Exiting template smoketest application")


def _install_signal_handlers(stop: Callable[[], None]) -> None:
    def _handle(signum: int, _frame: object) -> None:
        logger.info("Received %s, stopping after the current run", signal.Signals(signum).name)
        stop()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)
