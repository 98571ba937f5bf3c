"""Template instance launch service."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from template_smoketest.cluster_access.cluster_api import ClusterApi, ClusterApiError
from template_smoketest.cluster_access.resource_cleanup import delete_best_effort
from template_smoketest.smoketest_failures import InstanceLaunchError, SmoketestFailure
from template_smoketest.template_resources.resource_models import (
    InstanceRequest,
    ParameterSet,
    SecretResource,
    TemplateDefinition,
)

from .launch_outcomes import LaunchedInstance

logger = logging.getLogger(__name__)


def secret_name(template_name: str) -> str:
    return f"{template_name}-secret"


def instance_name(template_name: str) -> str:
    return f"{template_name}-instance"


class InstanceLauncher:
    """Creates the parameter secret and the template instance that references it."""

    def __init__(
        self,
        cluster_api: ClusterApi,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cluster_api = cluster_api
        self._clock = clock

    def launch(
        self, namespace: str, template_name: str, parameters: ParameterSet
    ) -> LaunchedInstance:
        """Instantiate ``template_name`` with ``parameters``.

        Raises:
          InstanceLaunchError: with any secret that may exist attached, so the
            caller can still clean it up.
        """
        logger.info("Checking that an instance can be launched from a template")
        try:
            template = self._cluster_api.get_template(namespace, template_name)
        except ClusterApiError as exc:
            logger.warning("Failed to get template %s details: %s", template_name, exc)
            raise InstanceLaunchError(SmoketestFailure.CREATE_TEMPLATE, str(exc)) from exc
        logger.debug("Fetched template %s", template.name)
        _check_parameter_keys(template, parameters)

        requested_secret = SecretResource.from_parameters(secret_name(template_name), parameters)
        try:
            secret = self._cluster_api.create_secret(namespace, requested_secret)
        except ClusterApiError as exc:
            logger.warning(
                "Failed to create secret %s for template instance: %s",
                requested_secret.name,
                exc,
            )
            raise InstanceLaunchError(
                SmoketestFailure.CREATE_INSTANCE, str(exc), secret=requested_secret
            ) from exc
        logger.debug("Created secret %s", secret.name)

        request = InstanceRequest(
            name=instance_name(template_name),
            secret_name=secret.name,
            template=template,
            labels=dict(template.labels),
        )
        launch_started = self._clock()
        try:
            instance = self._cluster_api.create_template_instance(namespace, request)
        except ClusterApiError as exc:
            logger.warning("Failed to create template instance: %s", exc)
            raise InstanceLaunchError(
                SmoketestFailure.CREATE_INSTANCE, str(exc), secret=secret
            ) from exc
        logger.debug("Created template instance %s", instance.name)
        return LaunchedInstance(
            template=template,
            secret=secret,
            instance=instance,
            launch_started=launch_started,
        )

    def delete_secret(self, namespace: str, secret: SecretResource | None) -> bool:
        return delete_best_effort(
            "secret",
            secret.name if secret is not None else None,
            lambda name: self._cluster_api.delete_secret(namespace, name),
        )

    def delete_instance(self, namespace: str, instance: InstanceRequest | None) -> bool:
        """Delete the instance; children are removed in the foreground."""
        return delete_best_effort(
            "template instance",
            instance.name if instance is not None else None,
            lambda name: self._cluster_api.delete_template_instance(namespace, name),
        )


def _check_parameter_keys(template: TemplateDefinition, parameters: ParameterSet) -> None:
    declared = set(template.parameter_names)
    provided = set(parameters)
    if declared == provided:
        return
    missing = sorted(declared - provided)
    extra = sorted(provided - declared)
    logger.error(
        "Parameters for template %s do not match its declaration (missing=%s, extra=%s)",
        template.name,
        missing,
        extra,
    )
    raise InstanceLaunchError(
        SmoketestFailure.UNKNOWN,
        f"parameter mismatch for template {template.name}: missing={missing} extra={extra}",
    )
