"""Template, template instance and parameter secret entities."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

TEMPLATE_API_GROUP = "template.openshift.io"
TEMPLATE_API_VERSION = "v1"
_API_VERSION = f"{TEMPLATE_API_GROUP}/{TEMPLATE_API_VERSION}"

INSTANCE_READY = "Ready"
INSTANCE_INSTANTIATE_FAILURE = "InstantiateFailure"

# Matches both ${NAME} and the raw JSON form ${{NAME}}.
_PLACEHOLDER_PATTERN = re.compile(r"\$\{\{?([A-Za-z0-9_]+)\}\}?")

ParameterSet = Mapping[str, str]


@dataclass(frozen=True)
class TemplateParameter:
    """Substitution parameter declared by a template."""

    name: str
    description: str = ""
    display_name: str = ""

    def to_manifest(self) -> dict[str, str]:
        return {
            "name": self.name,
            "description": self.description,
            "displayName": self.display_name,
        }

    @staticmethod
    def from_manifest(manifest: Mapping[str, Any]) -> TemplateParameter:
        return TemplateParameter(
            name=str(manifest.get("name", "")),
            description=str(manifest.get("description", "")),
            display_name=str(manifest.get("displayName", "")),
        )


@dataclass(frozen=True)
class TemplateDefinition:
    """Parameterized bundle of object manifests."""

    name: str
    objects: tuple[Mapping[str, Any], ...]
    parameters: tuple[TemplateParameter, ...]
    object_labels: Mapping[str, str] = field(default_factory=dict)
    labels: Mapping[str, str] = field(default_factory=dict)
    namespace: str | None = None
    resource_version: str | None = None

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return tuple(parameter.name for parameter in self.parameters)

    def referenced_placeholders(self) -> tuple[str, ...]:
        """Return placeholder names used in the embedded manifests, in first-seen order."""
        seen: dict[str, None] = {}
        for manifest in self.objects:
            for name in _PLACEHOLDER_PATTERN.findall(json.dumps(manifest)):
                seen.setdefault(name, None)
        return tuple(seen)

    def undeclared_placeholders(self) -> tuple[str, ...]:
        declared = set(self.parameter_names)
        return tuple(name for name in self.referenced_placeholders() if name not in declared)

    def to_manifest(self) -> dict[str, Any]:
        metadata: dict[str, Any] = {"name": self.name}
        if self.labels:
            metadata["labels"] = dict(self.labels)
        if self.namespace:
            metadata["namespace"] = self.namespace
        if self.resource_version:
            metadata["resourceVersion"] = self.resource_version
        return {
            "apiVersion": _API_VERSION,
            "kind": "Template",
            "metadata": metadata,
            "objects": [dict(manifest) for manifest in self.objects],
            "parameters": [parameter.to_manifest() for parameter in self.parameters],
            "labels": dict(self.object_labels),
        }

    @staticmethod
    def from_manifest(manifest: Mapping[str, Any]) -> TemplateDefinition:
        metadata = manifest.get("metadata") or {}
        return TemplateDefinition(
            name=str(metadata.get("name", "")),
            objects=tuple(manifest.get("objects") or ()),
            parameters=tuple(
                TemplateParameter.from_manifest(item) for item in manifest.get("parameters") or ()
            ),
            object_labels=dict(manifest.get("labels") or {}),
            labels=dict(metadata.get("labels") or {}),
            namespace=metadata.get("namespace"),
            resource_version=metadata.get("resourceVersion"),
        )


@dataclass(frozen=True)
class SecretResource:
    """Secret holding the parameter values for one template instance."""

    name: str
    data: Mapping[str, bytes] = field(default_factory=dict)

    @staticmethod
    def from_parameters(name: str, parameters: ParameterSet) -> SecretResource:
        return SecretResource(
            name=name,
            data={key: value.encode("utf-8") for key, value in parameters.items()},
        )


@dataclass(frozen=True)
class StatusCondition:
    """Named boolean flag reported on a template instance status."""

    type: str
    status: bool

    @staticmethod
    def from_manifest(manifest: Mapping[str, Any]) -> StatusCondition:
        return StatusCondition(
            type=str(manifest.get("type", "")),
            status=str(manifest.get("status", "")) == "True",
        )


@dataclass(frozen=True)
class InstanceRequest:
    """Request to materialize a template with concrete parameter values."""

    name: str
    secret_name: str
    template: TemplateDefinition | None = None
    labels: Mapping[str, str] = field(default_factory=dict)
    conditions: tuple[StatusCondition, ...] = ()
    namespace: str | None = None
    resource_version: str | None = None

    def has_condition(self, condition_type: str) -> bool:
        """Return True when a condition of the given type is present and true."""
        return any(
            condition.type == condition_type and condition.status for condition in self.conditions
        )

    def to_manifest(self) -> dict[str, Any]:
        metadata: dict[str, Any] = {"name": self.name}
        if self.labels:
            metadata["labels"] = dict(self.labels)
        spec: dict[str, Any] = {"secret": {"name": self.secret_name}}
        if self.template is not None:
            spec["template"] = self.template.to_manifest()
        return {
            "apiVersion": _API_VERSION,
            "kind": "TemplateInstance",
            "metadata": metadata,
            "spec": spec,
        }

    @staticmethod
    def from_manifest(manifest: Mapping[str, Any]) -> InstanceRequest:
        metadata = manifest.get("metadata") or {}
        spec = manifest.get("spec") or {}
        status = manifest.get("status") or {}
        template_manifest = spec.get("template")
        return InstanceRequest(
            name=str(metadata.get("name", "")),
            secret_name=str((spec.get("secret") or {}).get("name", "")),
            template=(
                TemplateDefinition.from_manifest(template_manifest) if template_manifest else None
            ),
            labels=dict(metadata.get("labels") or {}),
            conditions=tuple(
                StatusCondition.from_manifest(item) for item in status.get("conditions") or ()
            ),
            namespace=metadata.get("namespace"),
            resource_version=metadata.get("resourceVersion"),
        )
