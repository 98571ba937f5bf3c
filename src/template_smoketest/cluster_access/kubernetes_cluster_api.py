"""Cluster API adapter backed by the official Kubernetes Python client."""

from __future__ import annotations

import base64
import functools
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from kubernetes import client, watch
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from template_smoketest.template_resources.resource_models import (
    TEMPLATE_API_GROUP,
    TEMPLATE_API_VERSION,
    InstanceRequest,
    SecretResource,
    TemplateDefinition,
)

from .cluster_api import ClusterApiError, ResourceNotFoundError
from .status_subscription import ThreadedStatusSubscription

logger = logging.getLogger(__name__)

TEMPLATE_PLURAL = "templates"
TEMPLATE_INSTANCE_PLURAL = "templateinstances"
FOREGROUND_PROPAGATION = "Foreground"


@contextmanager
def _translated_errors(action: str) -> Iterator[None]:
    try:
        yield
    except ApiException as exc:
        message = f"{action} failed: {exc.status} {exc.reason}"
        if exc.status == 404:
            raise ResourceNotFoundError(message, status=404) from exc
        raise ClusterApiError(message, status=exc.status) from exc
    except HTTPError as exc:
        raise ClusterApiError(f"{action} failed: {exc}") from exc


class KubernetesClusterApi:
    """ClusterApi implementation for OpenShift templates on top of kubernetes.client."""

    def __init__(
        self,
        core_api: client.CoreV1Api,
        batch_api: client.BatchV1Api,
        custom_api: client.CustomObjectsApi,
        *,
        watch_factory: Callable[[], watch.Watch] | None = None,
    ) -> None:
        self._core_api = core_api
        self._batch_api = batch_api
        self._custom_api = custom_api
        self._watch_factory = watch_factory or watch.Watch

    def create_template(self, namespace: str, template: TemplateDefinition) -> TemplateDefinition:
        with _translated_errors(f"create template {template.name}"):
            created = self._custom_api.create_namespaced_custom_object(
                TEMPLATE_API_GROUP,
                TEMPLATE_API_VERSION,
                namespace,
                TEMPLATE_PLURAL,
                template.to_manifest(),
            )
        return TemplateDefinition.from_manifest(created)

    def get_template(self, namespace: str, name: str) -> TemplateDefinition:
        with _translated_errors(f"get template {name}"):
            fetched = self._custom_api.get_namespaced_custom_object(
                TEMPLATE_API_GROUP, TEMPLATE_API_VERSION, namespace, TEMPLATE_PLURAL, name
            )
        return TemplateDefinition.from_manifest(fetched)

    def delete_template(self, namespace: str, name: str) -> None:
        with _translated_errors(f"delete template {name}"):
            self._custom_api.delete_namespaced_custom_object(
                TEMPLATE_API_GROUP, TEMPLATE_API_VERSION, namespace, TEMPLATE_PLURAL, name
            )

    def create_secret(self, namespace: str, secret: SecretResource) -> SecretResource:
        body = client.V1Secret(
            metadata=client.V1ObjectMeta(name=secret.name),
            data={
                key: base64.b64encode(value).decode("ascii") for key, value in secret.data.items()
            },
        )
        with _translated_errors(f"create secret {secret.name}"):
            created = self._core_api.create_namespaced_secret(namespace, body)
        return SecretResource(name=created.metadata.name, data=secret.data)

    def delete_secret(self, namespace: str, name: str) -> None:
        with _translated_errors(f"delete secret {name}"):
            self._core_api.delete_namespaced_secret(name, namespace)

    def create_template_instance(
        self, namespace: str, instance: InstanceRequest
    ) -> InstanceRequest:
        with _translated_errors(f"create template instance {instance.name}"):
            created = self._custom_api.create_namespaced_custom_object(
                TEMPLATE_API_GROUP,
                TEMPLATE_API_VERSION,
                namespace,
                TEMPLATE_INSTANCE_PLURAL,
                instance.to_manifest(),
            )
        return InstanceRequest.from_manifest(created)

    def watch_template_instance(
        self, namespace: str, instance: InstanceRequest, timeout_seconds: int
    ) -> ThreadedStatusSubscription:
        stream_kwargs: dict[str, Any] = {
            "field_selector": f"metadata.name={instance.name}",
            "timeout_seconds": timeout_seconds,
        }
        # Start after the creation so the initial ADDED replay is skipped.
        if instance.resource_version:
            stream_kwargs["resource_version"] = instance.resource_version
        instance_watch = self._watch_factory()
        responses: list[Any] = []
        list_instances = self._custom_api.list_namespaced_custom_object

        # Watch.stream reads the return type from the docstring.
        @functools.wraps(list_instances, assigned=("__doc__",), updated=())
        def _list_and_track_response(*args: Any, **kwargs: Any) -> Any:
            response = list_instances(*args, **kwargs)
            responses.append(response)
            return response

        def _stop_stream() -> None:
            instance_watch.stop()
            # Watch.stop is only checked between events.
            for response in responses:
                response.shutdown()
                response.release_conn()

        with _translated_errors(f"watch template instance {instance.name}"):
            stream = instance_watch.stream(
                _list_and_track_response,
                TEMPLATE_API_GROUP,
                TEMPLATE_API_VERSION,
                namespace,
                TEMPLATE_INSTANCE_PLURAL,
                **stream_kwargs,
            )
        return ThreadedStatusSubscription(
            stream,
            stop_stream=_stop_stream,
            name=f"watch-{instance.name}",
        )

    def delete_template_instance(self, namespace: str, name: str) -> None:
        with _translated_errors(f"delete template instance {name}"):
            self._custom_api.delete_namespaced_custom_object(
                TEMPLATE_API_GROUP,
                TEMPLATE_API_VERSION,
                namespace,
                TEMPLATE_INSTANCE_PLURAL,
                name,
                body=client.V1DeleteOptions(propagation_policy=FOREGROUND_PROPAGATION),
            )

    def read_config_map(self, namespace: str, name: str) -> client.V1ConfigMap:
        with _translated_errors(f"read config map {name}"):
            return self._core_api.read_namespaced_config_map(name, namespace)

    def read_job(self, namespace: str, name: str) -> client.V1Job:
        with _translated_errors(f"read job {name}"):
            return self._batch_api.read_namespaced_job(name, namespace)
