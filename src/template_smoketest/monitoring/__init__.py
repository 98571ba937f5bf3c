"""Monitoring exports."""

from .health_endpoints import MetricsHttpServer, build_wsgi_app, parse_listen_address
from .monitor_service import run_and_publish, run_monitor
from .periodic_scheduler import PeriodicScheduler
from .result_metrics import SmoketestMetrics

__all__ = [
    "SmoketestMetrics",
    "MetricsHttpServer",
    "build_wsgi_app",
    "parse_listen_address",
    "PeriodicScheduler",
    "run_and_publish",
    "run_monitor",
]
