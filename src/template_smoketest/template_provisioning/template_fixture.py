"""Fixed diagnostic template: one config map and one batch job."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from template_smoketest.template_resources.resource_models import (
    ParameterSet,
    TemplateDefinition,
    TemplateParameter,
)

PARAM_ID = "ID"
PARAM_SIMPLE = "SIMPLE_PARAM"
PARAM_JSON = "JSON_PARAM"

SIMPLE_PARAM_VALUE = "test"
JSON_PARAM_VALUE = '[ "echo", "Hello world" ]'

SMOKETEST_APP_LABEL = "template-smoketest"
RUN_ID_LABEL = "template-smoketest/run-id"

_CONFIG_MAP_MANIFEST: dict[str, Any] = {
    "apiVersion": "v1",
    "kind": "ConfigMap",
    "metadata": {"name": "test-configmap-${ID}"},
    "data": {
        "foo": "bar",
        "simpleParam": "${SIMPLE_PARAM}",
    },
}

# centos:7 is expected to be cached on OpenShift nodes.
_JOB_MANIFEST: dict[str, Any] = {
    "apiVersion": "batch/v1",
    "kind": "Job",
    "metadata": {"name": "test-job-${ID}"},
    "spec": {
        "backoffLimit": 1,
        "template": {
            "spec": {
                "restartPolicy": "Never",
                "containers": [
                    {
                        "name": "bash",
                        "image": "centos:7",
                        "command": ["/bin/bash", "-c", "--"],
                        "args": "${{JSON_PARAM}}",
                    }
                ],
            }
        },
    },
}

_OBJECT_LABELS = {
    "this": "that",
    "google": "kubernetes",
    "redhat": "openshift",
}

_PARAMETERS = (
    TemplateParameter(
        name=PARAM_ID,
        description="An identifier for all objects in the template instance.",
        display_name="ID",
    ),
    TemplateParameter(
        name=PARAM_SIMPLE,
        description="A simple parameter for a template.",
        display_name="Simple Parameter",
    ),
    TemplateParameter(
        name=PARAM_JSON,
        description="A JSON or YAML-formatted parameter.",
        display_name="JSON Parameter",
    ),
)


def template_name(run_id: str) -> str:
    return f"smoketest-template-{run_id}"


def config_map_name(run_id: str) -> str:
    return f"test-configmap-{run_id}"


def job_name(run_id: str) -> str:
    return f"test-job-{run_id}"


def build_smoketest_template(run_id: str) -> TemplateDefinition:
    """Build the template submitted at the start of a run."""
    return TemplateDefinition(
        name=template_name(run_id),
        objects=(deepcopy(_CONFIG_MAP_MANIFEST), deepcopy(_JOB_MANIFEST)),
        parameters=_PARAMETERS,
        object_labels=dict(_OBJECT_LABELS),
        labels={"app": SMOKETEST_APP_LABEL, RUN_ID_LABEL: run_id},
    )


def build_dummy_parameters(run_id: str) -> ParameterSet:
    """Parameter values used to instantiate the smoketest template."""
    return {
        PARAM_ID: run_id,
        PARAM_SIMPLE: SIMPLE_PARAM_VALUE,
        PARAM_JSON: JSON_PARAM_VALUE,
    }
