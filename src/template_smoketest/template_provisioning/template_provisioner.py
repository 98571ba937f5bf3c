"""Creation and deletion of the diagnostic template."""

from __future__ import annotations

import logging

from template_smoketest.cluster_access.cluster_api import ClusterApi, ClusterApiError
from template_smoketest.cluster_access.resource_cleanup import delete_best_effort
from template_smoketest.smoketest_failures import SmoketestError, SmoketestFailure
from template_smoketest.template_resources.resource_models import TemplateDefinition

from .template_fixture import build_smoketest_template

logger = logging.getLogger(__name__)


class TemplateProvisioner:
    """Submits the fixed smoketest template and removes it afterwards."""

    def __init__(self, cluster_api: ClusterApi) -> None:
        self._cluster_api = cluster_api

    def create(self, namespace: str, run_id: str) -> TemplateDefinition:
        """Create the smoketest template and return the server's copy.

        Raises:
          SmoketestError: ``CreateTemplateFailed`` when the API rejects the template,
            ``Unknown`` when the built-in fixture references undeclared parameters.
        """
        logger.info("Checking that a template can be created")
        template = build_smoketest_template(run_id)
        undeclared = template.undeclared_placeholders()
        if undeclared:
            logger.error(
                "Template %s references undeclared parameters: %s",
                template.name,
                ", ".join(undeclared),
            )
            raise SmoketestError(
                SmoketestFailure.UNKNOWN,
                f"undeclared template parameters: {', '.join(undeclared)}",
            )
        try:
            created = self._cluster_api.create_template(namespace, template)
        except ClusterApiError as exc:
            logger.warning("Failed to create template: %s", exc)
            raise SmoketestError(SmoketestFailure.CREATE_TEMPLATE, str(exc)) from exc
        logger.debug("Created template %s", created.name)
        logger.info("Completed template creation check")
        return created

    def delete(self, namespace: str, template: TemplateDefinition | None) -> bool:
        """Delete the template; never raises."""
        return delete_best_effort(
            "template",
            template.name if template is not None else None,
            lambda name: self._cluster_api.delete_template(namespace, name),
        )
