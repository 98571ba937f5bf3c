"""Shared fakes for the cluster API, status subscriptions and the clock."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import replace

import pytest
from kubernetes import client
from template_smoketest.cluster_access.cluster_api import (
    EVENT_MODIFIED,
    ClusterApiError,
    ResourceNotFoundError,
    WatchEvent,
)
from template_smoketest.template_resources.resource_models import (
    INSTANCE_READY,
    InstanceRequest,
    SecretResource,
    StatusCondition,
    TemplateDefinition,
)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSubscription:
    """Delivers scripted events in order, then reports a timeout."""

    def __init__(
        self,
        events: list[WatchEvent],
        *,
        on_next: Callable[[float], None] | None = None,
    ) -> None:
        self._events = list(events)
        self._on_next = on_next
        self.timeouts: list[float] = []
        self.stop_calls = 0

    def next_event(self, timeout: float) -> WatchEvent | None:
        self.timeouts.append(timeout)
        if self._on_next is not None:
            self._on_next(timeout)
        if not self._events:
            return None
        return self._events.pop(0)

    def stop(self) -> None:
        self.stop_calls += 1


def ready_event(instance: InstanceRequest) -> WatchEvent:
    return WatchEvent(
        event_type=EVENT_MODIFIED,
        instance=replace(instance, conditions=(StatusCondition(INSTANCE_READY, True),)),
    )


def build_job(name: str, args: list[str] | None) -> client.V1Job:
    return client.V1Job(
        metadata=client.V1ObjectMeta(name=name),
        spec=client.V1JobSpec(
            template=client.V1PodTemplateSpec(
                spec=client.V1PodSpec(
                    restart_policy="Never",
                    containers=[client.V1Container(name="bash", image="centos:7", args=args)],
                )
            )
        ),
    )


def build_config_map(name: str, data: dict[str, str] | None) -> client.V1ConfigMap:
    return client.V1ConfigMap(metadata=client.V1ObjectMeta(name=name), data=data)


class FakeClusterApi:
    """In-memory cluster that plays the template controller when instances are created.

    ``failures`` maps an operation name to the error it raises; ``watch_events``
    overrides the default single Ready event.
    """

    def __init__(self) -> None:
        self.templates: dict[str, TemplateDefinition] = {}
        self.secrets: dict[str, SecretResource] = {}
        self.instances: dict[str, InstanceRequest] = {}
        self.config_maps: dict[str, client.V1ConfigMap] = {}
        self.jobs: dict[str, client.V1Job] = {}
        self.failures: dict[str, ClusterApiError] = {}
        self.calls: list[tuple[str, str]] = []
        self.watch_events: list[WatchEvent] | None = None
        self.subscriptions: list[FakeSubscription] = []
        self.materialize_objects = True
        self.on_next: Callable[[float], None] | None = None

    def deleted(self, kind: str) -> list[str]:
        return [name for operation, name in self.calls if operation == f"delete_{kind}"]

    def _record(self, operation: str, name: str) -> None:
        self.calls.append((operation, name))
        failure = self.failures.get(operation)
        if failure is not None:
            raise failure

    def create_template(self, namespace: str, template: TemplateDefinition) -> TemplateDefinition:
        self._record("create_template", template.name)
        stored = replace(template, namespace=namespace, resource_version="1")
        self.templates[template.name] = stored
        return stored

    def get_template(self, namespace: str, name: str) -> TemplateDefinition:
        self._record("get_template", name)
        if name not in self.templates:
            raise ResourceNotFoundError(f"template {name} not found", status=404)
        return self.templates[name]

    def delete_template(self, namespace: str, name: str) -> None:
        self._record("delete_template", name)
        if self.templates.pop(name, None) is None:
            raise ResourceNotFoundError(f"template {name} not found", status=404)

    def create_secret(self, namespace: str, secret: SecretResource) -> SecretResource:
        self._record("create_secret", secret.name)
        self.secrets[secret.name] = secret
        return secret

    def delete_secret(self, namespace: str, name: str) -> None:
        self._record("delete_secret", name)
        if self.secrets.pop(name, None) is None:
            raise ResourceNotFoundError(f"secret {name} not found", status=404)

    def create_template_instance(
        self, namespace: str, instance: InstanceRequest
    ) -> InstanceRequest:
        self._record("create_template_instance", instance.name)
        stored = replace(instance, namespace=namespace, resource_version="2")
        self.instances[instance.name] = stored
        if self.materialize_objects:
            self._materialize(self.secrets[instance.secret_name])
        return stored

    def watch_template_instance(
        self, namespace: str, instance: InstanceRequest, timeout_seconds: int
    ) -> FakeSubscription:
        self._record("watch_template_instance", instance.name)
        events = self.watch_events if self.watch_events is not None else [ready_event(instance)]
        subscription = FakeSubscription(events, on_next=self.on_next)
        self.subscriptions.append(subscription)
        return subscription

    def delete_template_instance(self, namespace: str, name: str) -> None:
        self._record("delete_template_instance", name)
        if self.instances.pop(name, None) is None:
            raise ResourceNotFoundError(f"template instance {name} not found", status=404)
        self.config_maps.clear()
        self.jobs.clear()

    def read_config_map(self, namespace: str, name: str) -> client.V1ConfigMap:
        self._record("read_config_map", name)
        if name not in self.config_maps:
            raise ResourceNotFoundError(f"config map {name} not found", status=404)
        return self.config_maps[name]

    def read_job(self, namespace: str, name: str) -> client.V1Job:
        self._record("read_job", name)
        if name not in self.jobs:
            raise ResourceNotFoundError(f"job {name} not found", status=404)
        return self.jobs[name]

    def _materialize(self, secret: SecretResource) -> None:
        values = {key: value.decode("utf-8") for key, value in secret.data.items()}
        run_id = values["ID"]
        config_map_name = f"test-configmap-{run_id}"
        job_name = f"test-job-{run_id}"
        self.config_maps[config_map_name] = build_config_map(
            config_map_name, {"foo": "bar", "simpleParam": values["SIMPLE_PARAM"]}
        )
        self.jobs[job_name] = build_job(job_name, json.loads(values["JSON_PARAM"]))


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_cluster_api() -> FakeClusterApi:
    return FakeClusterApi()


@pytest.fixture
def make_subscription() -> Callable[..., FakeSubscription]:
    return FakeSubscription


@pytest.fixture
def make_ready_event() -> Callable[[InstanceRequest], WatchEvent]:
    return ready_event


@pytest.fixture
def make_job() -> Callable[[str, list[str] | None], client.V1Job]:
    return build_job


@pytest.fixture
def make_config_map() -> Callable[[str, dict[str, str] | None], client.V1ConfigMap]:
    return build_config_map
