"""Bounded wait for a template instance to reach a terminal condition."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from template_smoketest.cluster_access.cluster_api import (
    EVENT_MODIFIED,
    ClusterApi,
    ClusterApiError,
)
from template_smoketest.template_resources.resource_models import (
    INSTANCE_INSTANTIATE_FAILURE,
    INSTANCE_READY,
    InstanceRequest,
)

from .watch_outcomes import ReadinessResult, ReadinessState

logger = logging.getLogger(__name__)


def resolve_condition_state(instance: InstanceRequest) -> ReadinessState:
    """Map the instance conditions to a readiness state.

    Ready is checked across all conditions before InstantiateFailure, so an
    instance reporting both resolves to READY.
    """
    if instance.has_condition(INSTANCE_READY):
        return ReadinessState.READY
    if instance.has_condition(INSTANCE_INSTANTIATE_FAILURE):
        return ReadinessState.INSTANTIATE_FAILED
    return ReadinessState.PENDING


class ReadinessWatcher:
    """Watches one template instance until it is ready, fails, or the timeout expires."""

    def __init__(
        self,
        cluster_api: ClusterApi,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cluster_api = cluster_api
        self._clock = clock

    def await_terminal_state(
        self,
        namespace: str,
        instance: InstanceRequest,
        timeout_seconds: int,
        *,
        launch_started: float | None = None,
    ) -> ReadinessResult:
        """Block until a terminal state is reached.

        Durations are measured from ``launch_started`` (a reading of the same
        clock), defaulting to the moment this call starts. The subscription is
        stopped on every terminal path.
        """
        started = self._clock() if launch_started is None else launch_started
        try:
            subscription = self._cluster_api.watch_template_instance(
                namespace, instance, timeout_seconds
            )
        except ClusterApiError as exc:
            logger.warning("Failed to watch template instance %s: %s", instance.name, exc)
            return self._result(instance, started, ReadinessState.UNEXPECTED)

        logger.debug("Waiting for template instance %s to be ready...", instance.name)
        deadline = self._clock() + timeout_seconds
        current = instance
        try:
            while True:
                remaining = deadline - self._clock()
                event = subscription.next_event(remaining) if remaining > 0 else None
                if event is None:
                    logger.warning(
                        "Timed out after %ss waiting for template instance %s",
                        timeout_seconds,
                        instance.name,
                    )
                    return self._result(current, started, ReadinessState.TIMED_OUT)

                if event.event_type != EVENT_MODIFIED:
                    logger.error(
                        "Unexpected event type %s watching template instance %s",
                        event.event_type,
                        instance.name,
                    )
                    return self._result(current, started, ReadinessState.UNEXPECTED)

                if event.instance is not None:
                    current = event.instance
                state = resolve_condition_state(current)
                if not state.is_terminal:
                    continue
                if state is ReadinessState.READY:
                    logger.debug("Template instance %s is ready", current.name)
                else:
                    logger.warning("Failed to instantiate template instance %s", current.name)
                return self._result(current, started, state)
        finally:
            subscription.stop()

    def _result(
        self, instance: InstanceRequest, started: float, state: ReadinessState
    ) -> ReadinessResult:
        return ReadinessResult(
            instance=instance,
            duration_seconds=max(self._clock() - started, 0.0),
            state=state,
        )
