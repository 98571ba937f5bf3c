"""Template provisioning exports."""

from .template_fixture import (
    build_dummy_parameters,
    build_smoketest_template,
    config_map_name,
    job_name,
    template_name,
)
from .template_provisioner import TemplateProvisioner

__all__ = [
    "TemplateProvisioner",
    "build_smoketest_template",
    "build_dummy_parameters",
    "template_name",
    "config_map_name",
    "job_name",
]
