"""Template resource domain exports."""

from .resource_models import (
    INSTANCE_INSTANTIATE_FAILURE,
    INSTANCE_READY,
    TEMPLATE_API_GROUP,
    TEMPLATE_API_VERSION,
    InstanceRequest,
    ParameterSet,
    SecretResource,
    StatusCondition,
    TemplateDefinition,
    TemplateParameter,
)

__all__ = [
    "TEMPLATE_API_GROUP",
    "TEMPLATE_API_VERSION",
    "INSTANCE_READY",
    "INSTANCE_INSTANTIATE_FAILURE",
    "ParameterSet",
    "TemplateParameter",
    "TemplateDefinition",
    "SecretResource",
    "StatusCondition",
    "InstanceRequest",
]
