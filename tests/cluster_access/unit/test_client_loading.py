"""Tests for cluster client initialisation."""

from __future__ import annotations

from pathlib import Path

import pytest
from kubernetes.config.config_exception import ConfigException
from template_smoketest.cluster_access import KubernetesClusterApi, client_loading
from template_smoketest.configuration import ClusterSettings
from template_smoketest.smoketest_failures import SmoketestError, SmoketestFailure


@pytest.fixture
def kube_config_calls(monkeypatch):
    calls: list[dict] = []

    def _load_kube_config(**kwargs) -> None:
        calls.append(kwargs)

    monkeypatch.setattr(client_loading.config, "load_kube_config", _load_kube_config)
    return calls


def _contexts(namespace: str | None):
    context = {"cluster": "c"}
    if namespace:
        context["namespace"] = namespace
    active = {"name": "ci", "context": context}
    return [active, {"name": "other", "context": {"namespace": "other-ns"}}], active


def test_loads_kubeconfig_and_context_namespace(monkeypatch, kube_config_calls) -> None:
    monkeypatch.setattr(
        client_loading.config, "list_kube_config_contexts", lambda **_: _contexts("ci-ns")
    )

    connection = client_loading.load_cluster_clients(
        ClusterSettings(kubeconfig_path="/tmp/kubeconfig")
    )

    assert connection.namespace == "ci-ns"
    assert isinstance(connection.cluster_api, KubernetesClusterApi)
    assert kube_config_calls[0]["config_file"] == "/tmp/kubeconfig"
    assert kube_config_calls[0]["context"] is None


def test_selected_context_namespace_wins(monkeypatch, kube_config_calls) -> None:
    monkeypatch.setattr(
        client_loading.config, "list_kube_config_contexts", lambda **_: _contexts("ci-ns")
    )

    connection = client_loading.load_cluster_clients(ClusterSettings(context="other"))

    assert connection.namespace == "other-ns"
    assert kube_config_calls[0]["context"] == "other"


def test_context_without_namespace_falls_back_to_default(monkeypatch, kube_config_calls) -> None:
    monkeypatch.setattr(
        client_loading.config, "list_kube_config_contexts", lambda **_: _contexts(None)
    )

    assert client_loading.load_cluster_clients(ClusterSettings()).namespace == "default"


def test_explicit_namespace_skips_context_lookup(monkeypatch, kube_config_calls) -> None:
    def _unexpected(**_kwargs):
        raise AssertionError("contexts should not be listed")

    monkeypatch.setattr(client_loading.config, "list_kube_config_contexts", _unexpected)

    connection = client_loading.load_cluster_clients(ClusterSettings(namespace="explicit"))

    assert connection.namespace == "explicit"


def test_in_cluster_reads_service_account_namespace(monkeypatch, tmp_path: Path) -> None:
    namespace_file = tmp_path / "namespace"
    namespace_file.write_text("monitoring\n", encoding="utf-8")
    loaded: list[bool] = []
    monkeypatch.setattr(
        client_loading.config,
        "load_incluster_config",
        lambda **_: loaded.append(True),
    )
    monkeypatch.setattr(client_loading, "SERVICE_ACCOUNT_NAMESPACE_PATH", namespace_file)

    connection = client_loading.load_cluster_clients(ClusterSettings(in_cluster=True))

    assert loaded == [True]
    assert connection.namespace == "monitoring"


def test_configuration_errors_are_init_failures(monkeypatch) -> None:
    def _missing(**_kwargs) -> None:
        raise ConfigException("Invalid kube-config file. No configuration found.")

    monkeypatch.setattr(client_loading.config, "load_kube_config", _missing)

    with pytest.raises(SmoketestError) as exc_info:
        client_loading.load_cluster_clients(ClusterSettings())

    assert exc_info.value.failure is SmoketestFailure.INIT_TEST


def test_unknown_context_is_init_failure(monkeypatch, kube_config_calls) -> None:
    monkeypatch.setattr(
        client_loading.config, "list_kube_config_contexts", lambda **_: _contexts("ci-ns")
    )

    with pytest.raises(SmoketestError) as exc_info:
        client_loading.load_cluster_clients(ClusterSettings(context="missing"))

    assert exc_info.value.failure is SmoketestFailure.INIT_TEST
