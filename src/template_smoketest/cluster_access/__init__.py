"""Cluster access exports."""

from .client_loading import ClusterConnection, load_cluster_clients
from .cluster_api import (
    EVENT_CLOSED,
    EVENT_ERROR,
    EVENT_MODIFIED,
    ClusterApi,
    ClusterApiError,
    ResourceNotFoundError,
    StatusSubscription,
    WatchEvent,
)
from .kubernetes_cluster_api import KubernetesClusterApi
from .resource_cleanup import delete_best_effort
from .status_subscription import ThreadedStatusSubscription

__all__ = [
    "EVENT_MODIFIED",
    "EVENT_ERROR",
    "EVENT_CLOSED",
    "ClusterApi",
    "ClusterApiError",
    "ResourceNotFoundError",
    "StatusSubscription",
    "WatchEvent",
    "KubernetesClusterApi",
    "ThreadedStatusSubscription",
    "ClusterConnection",
    "load_cluster_clients",
    "delete_best_effort",
]
