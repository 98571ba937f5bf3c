"""Checks that a ready template instance produced the expected objects."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping

from kubernetes import client

from template_smoketest.cluster_access.cluster_api import ClusterApi, ClusterApiError
from template_smoketest.smoketest_failures import SmoketestError, SmoketestFailure
from template_smoketest.template_provisioning.template_fixture import (
    PARAM_ID,
    PARAM_JSON,
    PARAM_SIMPLE,
    config_map_name,
    job_name,
)
from template_smoketest.template_resources.resource_models import (
    InstanceRequest,
    ParameterSet,
    TemplateDefinition,
)

logger = logging.getLogger(__name__)


def decode_expected_args(raw_value: str) -> list[str]:
    """Decode the JSON array parameter into container arguments.

    Raises:
      ValueError: if the value is not a JSON array of strings.
    """
    decoded = json.loads(raw_value)
    if not isinstance(decoded, list) or not all(isinstance(item, str) for item in decoded):
        raise ValueError(f"expected a JSON array of strings, got {raw_value!r}")
    return decoded


class InstanceValidator:
    """Compares the objects created by a template instance with the parameters used."""

    def __init__(self, cluster_api: ClusterApi) -> None:
        self._cluster_api = cluster_api

    def validate(
        self,
        namespace: str,
        instance: InstanceRequest,
        template: TemplateDefinition,
        parameters: ParameterSet,
    ) -> None:
        """Raise SmoketestError unless the instance matches the template and parameters.

        Label sets compare as unordered key/value mappings, config map data must
        match exactly, and job arguments compare as an ordered sequence.
        """
        if dict(template.labels) != dict(instance.labels):
            logger.warning(
                "Labels for template %s %s and instance %s %s do not match",
                template.name,
                dict(template.labels),
                instance.name,
                dict(instance.labels),
            )
            raise SmoketestError(SmoketestFailure.INSTANCE_INVALID, "label mismatch")

        run_id = _require_parameter(parameters, PARAM_ID)
        self._validate_config_map(
            namespace,
            config_map_name(run_id),
            {"foo": "bar", "simpleParam": _require_parameter(parameters, PARAM_SIMPLE)},
        )

        try:
            expected_args = decode_expected_args(_require_parameter(parameters, PARAM_JSON))
        except ValueError as exc:
            logger.error("Could not decode expected JSON: %s", exc)
            raise SmoketestError(SmoketestFailure.UNKNOWN, str(exc)) from exc
        self._validate_job(namespace, job_name(run_id), expected_args)

        logger.debug(
            "Validated template instance %s correctly launched from template %s",
            instance.name,
            template.name,
        )

    def _validate_config_map(
        self, namespace: str, name: str, expected_data: Mapping[str, str]
    ) -> None:
        try:
            config_map = self._cluster_api.read_config_map(namespace, name)
        except ClusterApiError as exc:
            logger.warning("Could not fetch details of config map %s: %s", name, exc)
            raise SmoketestError(SmoketestFailure.LAUNCH_INSTANCE_FAILED, str(exc)) from exc
        actual_data = dict(config_map.data or {})
        if actual_data != dict(expected_data):
            logger.warning(
                "Data in config map %s %s does not match expected value %s",
                name,
                actual_data,
                dict(expected_data),
            )
            raise SmoketestError(SmoketestFailure.INSTANCE_INVALID, "config map data mismatch")

    def _validate_job(self, namespace: str, name: str, expected_args: list[str]) -> None:
        try:
            job = self._cluster_api.read_job(namespace, name)
        except ClusterApiError as exc:
            logger.warning("Could not fetch details of job %s: %s", name, exc)
            raise SmoketestError(SmoketestFailure.LAUNCH_INSTANCE_FAILED, str(exc)) from exc
        actual_args = _first_container_args(job)
        if actual_args != expected_args:
            logger.warning(
                "Arguments for instance job %s %s do not match expected value %s",
                name,
                actual_args,
                expected_args,
            )
            raise SmoketestError(SmoketestFailure.INSTANCE_INVALID, "job arguments mismatch")


def _first_container_args(job: client.V1Job) -> list[str] | None:
    pod_spec = job.spec.template.spec if job.spec and job.spec.template else None
    if pod_spec is None or not pod_spec.containers:
        return None
    return list(pod_spec.containers[0].args or [])


def _require_parameter(parameters: ParameterSet, name: str) -> str:
    try:
        return parameters[name]
    except KeyError as exc:
        raise SmoketestError(SmoketestFailure.UNKNOWN, f"missing parameter {name}") from exc
