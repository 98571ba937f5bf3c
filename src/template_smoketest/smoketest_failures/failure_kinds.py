"""Closed set of smoketest failure classifications."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from template_smoketest.template_resources.resource_models import SecretResource


class SmoketestFailure(str, Enum):
    """Reason reported for a failed smoketest run.

    Values are the metric ``reason`` label, so they must stay stable.
    """

    INIT_TEST = "InitTestFailed"
    CREATE_TEMPLATE = "CreateTemplateFailed"
    CREATE_INSTANCE = "CreateTemplateInstanceFailed"
    LAUNCH_INSTANCE_FAILED = "LaunchTemplateInstanceFailed"
    LAUNCH_INSTANCE_TIMEOUT = "LaunchTemplateInstanceTimeout"
    INSTANCE_INVALID = "ValidateTemplateInstanceFailed"
    UNKNOWN = "Unknown"


class SmoketestError(Exception):
    """Raised when a smoketest phase fails; carries exactly one classification."""

    def __init__(self, failure: SmoketestFailure, detail: str | None = None) -> None:
        super().__init__(detail or failure.value)
        self.failure = failure


class InstanceLaunchError(SmoketestError):
    """Raised when launching fails after the parameter secret may exist."""

    def __init__(
        self,
        failure: SmoketestFailure,
        detail: str | None = None,
        *,
        secret: SecretResource | None = None,
    ) -> None:
        super().__init__(failure, detail)
        self.secret = secret
