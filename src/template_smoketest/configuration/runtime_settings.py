"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_LISTEN_ADDRESS = ":8080"
DEFAULT_KEEP_OBJECTS = False
DEFAULT_INTERVAL_SECONDS = 300
DEFAULT_TIMEOUT_SECONDS = 60


@dataclass(frozen=True)
class ClusterSettings:
    """How to reach the cluster and which namespace to test in."""

    kubeconfig_path: str | None = None
    context: str | None = None
    namespace: str | None = None
    in_cluster: bool = False


@dataclass(frozen=True)
class MonitorSettings:
    """Smoketest cadence and metrics endpoint settings."""

    listen_address: str = DEFAULT_LISTEN_ADDRESS
    keep_objects: bool = DEFAULT_KEEP_OBJECTS
    interval_seconds: int = DEFAULT_INTERVAL_SECONDS
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path | None = None
    cluster: ClusterSettings = field(default_factory=ClusterSettings)
    monitor: MonitorSettings = field(default_factory=MonitorSettings)
