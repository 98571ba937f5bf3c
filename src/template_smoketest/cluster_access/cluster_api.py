"""Boundary contracts for the cluster API used by the smoketest."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from kubernetes import client

from template_smoketest.template_resources.resource_models import (
    InstanceRequest,
    SecretResource,
    TemplateDefinition,
)

EVENT_ADDED = "ADDED"
EVENT_MODIFIED = "MODIFIED"
EVENT_DELETED = "DELETED"
EVENT_ERROR = "ERROR"
# Synthetic type emitted when the underlying watch stream ends.
EVENT_CLOSED = "CLOSED"


class ClusterApiError(Exception):
    """Raised when a cluster API call fails."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ResourceNotFoundError(ClusterApiError):
    """Raised when the requested cluster resource does not exist."""


@dataclass(frozen=True)
class WatchEvent:
    """One notification from a template instance status-change stream."""

    event_type: str
    instance: InstanceRequest | None = None


class StatusSubscription(Protocol):
    """Cancellable stream of status changes for a single object."""

    def next_event(self, timeout: float) -> WatchEvent | None:
        """Return the next event, or None once ``timeout`` seconds pass without one."""
        ...

    def stop(self) -> None: ...


class ClusterApi(Protocol):
    """Operations the smoketest needs from the cluster, implemented by real and fake clients."""

    def create_template(
        self, namespace: str, template: TemplateDefinition
    ) -> TemplateDefinition: ...

    def get_template(self, namespace: str, name: str) -> TemplateDefinition: ...

    def delete_template(self, namespace: str, name: str) -> None: ...

    def create_secret(self, namespace: str, secret: SecretResource) -> SecretResource: ...

    def delete_secret(self, namespace: str, name: str) -> None: ...

    def create_template_instance(
        self, namespace: str, instance: InstanceRequest
    ) -> InstanceRequest: ...

    def watch_template_instance(
        self, namespace: str, instance: InstanceRequest, timeout_seconds: int
    ) -> StatusSubscription: ...

    def delete_template_instance(self, namespace: str, name: str) -> None: ...

    def read_config_map(self, namespace: str, name: str) -> client.V1ConfigMap: ...

    def read_job(self, namespace: str, name: str) -> client.V1Job: ...
