"""Kubernetes client initialisation for one smoketest run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from template_smoketest.configuration.runtime_settings import ClusterSettings
from template_smoketest.smoketest_failures import SmoketestError, SmoketestFailure

from .cluster_api import ClusterApi
from .kubernetes_cluster_api import KubernetesClusterApi

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "default"
SERVICE_ACCOUNT_NAMESPACE_PATH = Path("/var/run/secrets/kubernetes.io/serviceaccount/namespace")


@dataclass(frozen=True)
class ClusterConnection:
    """Cluster API client bound to the namespace the smoketest runs in."""

    namespace: str
    cluster_api: ClusterApi


def load_cluster_clients(settings: ClusterSettings) -> ClusterConnection:
    """Load cluster credentials and build the API clients.

    Raises:
      SmoketestError: classified ``InitTestFailed`` when configuration cannot be loaded.
    """
    try:
        api_client = _load_api_client(settings)
        namespace = settings.namespace or _resolve_namespace(settings)
    except (ConfigException, OSError, KeyError, TypeError) as exc:
        logger.warning("Failed to load kubernetes client configuration: %s", exc)
        raise SmoketestError(SmoketestFailure.INIT_TEST, str(exc)) from exc
    logger.debug("Using namespace %s", namespace)
    return ClusterConnection(
        namespace=namespace,
        cluster_api=KubernetesClusterApi(
            core_api=client.CoreV1Api(api_client),
            batch_api=client.BatchV1Api(api_client),
            custom_api=client.CustomObjectsApi(api_client),
        ),
    )


def _load_api_client(settings: ClusterSettings) -> client.ApiClient:
    config_obj = client.Configuration()
    if settings.in_cluster:
        config.load_incluster_config(client_configuration=config_obj)
        logger.debug("Loaded in-cluster kubernetes configuration")
    else:
        config.load_kube_config(
            config_file=settings.kubeconfig_path,
            context=settings.context,
            client_configuration=config_obj,
        )
        logger.debug("Loaded kubeconfig (context=%s)", settings.context or "<current>")
    return client.ApiClient(config_obj)


def _resolve_namespace(settings: ClusterSettings) -> str:
    if settings.in_cluster:
        if SERVICE_ACCOUNT_NAMESPACE_PATH.exists():
            namespace = SERVICE_ACCOUNT_NAMESPACE_PATH.read_text(encoding="utf-8").strip()
            return namespace or DEFAULT_NAMESPACE
        return DEFAULT_NAMESPACE

    contexts, active_context = config.list_kube_config_contexts(
        config_file=settings.kubeconfig_path
    )
    selected = active_context
    if settings.context:
        matching = [entry for entry in contexts if entry.get("name") == settings.context]
        if not matching:
            raise ConfigException(f"Context {settings.context} not found in kubeconfig")
        selected = matching[0]
    if not selected:
        return DEFAULT_NAMESPACE
    return (selected.get("context") or {}).get("namespace") or DEFAULT_NAMESPACE
