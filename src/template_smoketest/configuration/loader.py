"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_KEEP_OBJECTS,
    DEFAULT_LISTEN_ADDRESS,
    DEFAULT_TIMEOUT_SECONDS,
    ClusterSettings,
    Configuration,
    MonitorSettings,
)


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str | None) -> Configuration:
    """Load and validate the configuration file; ``None`` yields the defaults."""
    if config_path is None:
        return Configuration()
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    cluster = _parse_cluster_section(parsed.get("cluster"), path.parent)
    monitor = _parse_monitor_section(parsed.get("monitor"))
    return Configuration(path=path, cluster=cluster, monitor=monitor)


def _parse_cluster_section(value: Any, base_path: Path) -> ClusterSettings:
    section = _optional_mapping(value, "cluster")
    kubeconfig = _optional_string(section.get("kubeconfig"), "cluster.kubeconfig")
    in_cluster = _optional_bool(section.get("in_cluster"), "cluster.in_cluster", default=False)
    if kubeconfig and in_cluster:
        raise ConfigurationError(
            "cluster.kubeconfig must not be set when cluster.in_cluster is true."
        )
    return ClusterSettings(
        kubeconfig_path=str(_resolve_path(base_path, kubeconfig)) if kubeconfig else None,
        context=_optional_string(section.get("context"), "cluster.context"),
        namespace=_optional_string(section.get("namespace"), "cluster.namespace"),
        in_cluster=in_cluster,
    )


def _parse_monitor_section(value: Any) -> MonitorSettings:
    section = _optional_mapping(value, "monitor")
    listen_address = _require_non_empty_string(
        section.get("listen_address", DEFAULT_LISTEN_ADDRESS), "monitor.listen_address"
    )
    return MonitorSettings(
        listen_address=listen_address,
        keep_objects=_optional_bool(
            section.get("keep_objects"), "monitor.keep_objects", default=DEFAULT_KEEP_OBJECTS
        ),
        interval_seconds=_require_positive_int(
            section.get("interval_seconds", DEFAULT_INTERVAL_SECONDS), "monitor.interval_seconds"
        ),
        timeout_seconds=_require_positive_int(
            section.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS), "monitor.timeout_seconds"
        ),
    )


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path).expanduser()
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _optional_bool(value: Any, field_name: str, *, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
