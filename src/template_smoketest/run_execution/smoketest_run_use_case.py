"""Template smoketest use-case service."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from contextlib import ExitStack
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from template_smoketest.cluster_access.client_loading import (
    ClusterConnection,
    load_cluster_clients,
)
from template_smoketest.cluster_access.cluster_api import ClusterApi
from template_smoketest.configuration.runtime_settings import ClusterSettings
from template_smoketest.instance_launch import InstanceLauncher
from template_smoketest.instance_validation import InstanceValidator
from template_smoketest.readiness_watching import ReadinessWatcher
from template_smoketest.smoketest_failures import (
    InstanceLaunchError,
    SmoketestError,
    SmoketestFailure,
)
from template_smoketest.template_provisioning import (
    TemplateProvisioner,
    build_dummy_parameters,
)

from .run_contracts import RunOutcome, RunRequest

logger = logging.getLogger(__name__)


def new_run_id() -> str:
    """Identifier derived from the current Unix time in seconds."""
    return str(int(time.time()))


@dataclass
class _RunProgress:
    """Mutable collector for measurements taken while phases execute."""

    launch_duration_seconds: float = 0.0


class TemplateSmoketest:
    """Runs the template and template instance lifecycle check in one namespace.

    The run performs, in order:

    1. Create a parameterized template holding a config map and a batch job.
    2. Launch a template instance from it, with parameters supplied via a secret.
    3. Wait for the instance to become ready, fail, or time out.
    4. When ready, verify the config map and job match the parameters.

    Everything created is deleted in reverse order on every exit path unless
    objects are kept.
    """

    def __init__(
        self,
        cluster_api: ClusterApi,
        namespace: str,
        *,
        provisioner: TemplateProvisioner | None = None,
        launcher: InstanceLauncher | None = None,
        watcher: ReadinessWatcher | None = None,
        validator: InstanceValidator | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._namespace = namespace
        self._clock = clock
        self._provisioner = provisioner or TemplateProvisioner(cluster_api)
        self._launcher = launcher or InstanceLauncher(cluster_api, clock=clock)
        self._watcher = watcher or ReadinessWatcher(cluster_api, clock=clock)
        self._validator = validator or InstanceValidator(cluster_api)

    def run(
        self, keep_objects: bool, timeout_seconds: int, *, run_id: str | None = None
    ) -> RunOutcome:
        """Execute one smoketest and return its launch duration and classification."""
        resolved_run_id = run_id or new_run_id()
        started_at = datetime.now(UTC)
        start = self._clock()
        progress = _RunProgress()
        failure: SmoketestFailure | None = None
        logger.info("Started running template smoketest %s", resolved_run_id)
        try:
            self._execute_phases(resolved_run_id, keep_objects, timeout_seconds, progress)
        except SmoketestError as exc:
            failure = exc.failure
            logger.warning(
                "Failed template smoketest %s: %s (%s)", resolved_run_id, failure.value, exc
            )
        except Exception:  # pylint: disable=broad-exception-caught
            failure = SmoketestFailure.UNKNOWN
            logger.exception("Unexpected error in template smoketest %s", resolved_run_id)
        else:
            logger.info("Successfully ran template smoketest %s", resolved_run_id)
        logger.info("Completed template smoketest %s", resolved_run_id)
        return RunOutcome(
            run_id=resolved_run_id,
            started_at=started_at,
            launch_duration_seconds=progress.launch_duration_seconds,
            total_duration_seconds=max(self._clock() - start, 0.0),
            failure=failure,
        )

    def _execute_phases(
        self,
        run_id: str,
        keep_objects: bool,
        timeout_seconds: int,
        progress: _RunProgress,
    ) -> None:
        namespace = self._namespace
        parameters = build_dummy_parameters(run_id)
        with ExitStack() as cleanup:
            template = self._provisioner.create(namespace, run_id)
            if not keep_objects:
                cleanup.callback(self._provisioner.delete, namespace, template)

            try:
                launched = self._launcher.launch(namespace, template.name, parameters)
            except InstanceLaunchError as exc:
                if not keep_objects:
                    cleanup.callback(self._launcher.delete_secret, namespace, exc.secret)
                raise
            if not keep_objects:
                # Callbacks unwind last-in first-out: instance, then secret, then template.
                cleanup.callback(self._launcher.delete_secret, namespace, launched.secret)
                cleanup.callback(self._launcher.delete_instance, namespace, launched.instance)

            readiness = self._watcher.await_terminal_state(
                namespace,
                launched.instance,
                timeout_seconds,
                launch_started=launched.launch_started,
            )
            progress.launch_duration_seconds = readiness.duration_seconds
            if readiness.failure is not None:
                raise SmoketestError(
                    readiness.failure,
                    f"template instance {launched.instance.name} {readiness.state.value}",
                )
            self._validator.validate(namespace, readiness.instance, launched.template, parameters)


def execute_template_smoketest(
    request: RunRequest,
    *,
    connection_loader: Callable[[ClusterSettings], ClusterConnection] | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> RunOutcome:
    """Initialise cluster clients and execute one smoketest.

    The total duration includes client initialisation; an initialisation
    failure is reported as ``InitTestFailed`` with a zero launch duration.
    """
    resolved_loader = connection_loader or load_cluster_clients
    run_id = new_run_id()
    started_at = datetime.now(UTC)
    start = clock()
    try:
        connection = resolved_loader(request.cluster)
    except SmoketestError as exc:
        logger.error("Failed initiating smoketest: %s", exc)
        return RunOutcome(
            run_id=run_id,
            started_at=started_at,
            launch_duration_seconds=0.0,
            total_duration_seconds=max(clock() - start, 0.0),
            failure=exc.failure,
        )
    smoketest = TemplateSmoketest(connection.cluster_api, connection.namespace, clock=clock)
    outcome = smoketest.run(request.keep_objects, request.timeout_seconds, run_id=run_id)
    return replace(
        outcome,
        started_at=started_at,
        total_duration_seconds=max(clock() - start, 0.0),
    )
