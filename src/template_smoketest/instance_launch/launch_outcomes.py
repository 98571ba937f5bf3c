"""Instance launch entities."""

from __future__ import annotations

from dataclasses import dataclass

from template_smoketest.template_resources.resource_models import (
    InstanceRequest,
    SecretResource,
    TemplateDefinition,
)


@dataclass(frozen=True)
class LaunchedInstance:
    """Artifacts created while launching a template instance."""

    template: TemplateDefinition
    secret: SecretResource
    instance: InstanceRequest
    # Monotonic clock reading taken just before the instance request was submitted.
    launch_started: float
