"""Queue-backed status subscription over a blocking watch stream."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from template_smoketest.template_resources.resource_models import InstanceRequest

from .cluster_api import EVENT_CLOSED, EVENT_ERROR, WatchEvent

logger = logging.getLogger(__name__)


class ThreadedStatusSubscription:
    """Pump a blocking watch stream on a daemon thread and expose it with a timeout.

    ``next_event`` is the single blocking call that races the next event against
    the caller's remaining time budget. ``stop`` asks the stream to release its
    connection and waits up to ``join_timeout`` for the pump to exit; a pump that
    stays blocked is a daemon and is ended by the server-side watch timeout.
    """

    def __init__(
        self,
        stream: Iterable[Mapping[str, Any]],
        *,
        stop_stream: Callable[[], None],
        name: str = "status-subscription",
        join_timeout: float = 1.0,
    ) -> None:
        self._stop_stream = stop_stream
        self._join_timeout = join_timeout
        self._events: queue.Queue[WatchEvent] = queue.Queue()
        self._stopped = threading.Event()
        self._thread = threading.Thread(
            target=self._pump, args=(stream,), name=name, daemon=True
        )
        self._thread.start()

    def next_event(self, timeout: float) -> WatchEvent | None:
        try:
            return self._events.get(timeout=max(timeout, 0.0))
        except queue.Empty:
            return None

    def stop(self) -> None:
        if self._stopped.is_set():
            return
        self._stopped.set()
        self._stop_stream()
        if threading.current_thread() is not self._thread:
            self._thread.join(self._join_timeout)

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    @property
    def pumping(self) -> bool:
        return self._thread.is_alive()

    def _pump(self, stream: Iterable[Mapping[str, Any]]) -> None:
        try:
            for raw_event in stream:
                if self._stopped.is_set():
                    return
                self._events.put(to_watch_event(raw_event))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            if not self._stopped.is_set():
                logger.warning("Status subscription failed: %s", exc)
                self._events.put(WatchEvent(event_type=EVENT_ERROR))
            return
        if not self._stopped.is_set():
            self._events.put(WatchEvent(event_type=EVENT_CLOSED))


def to_watch_event(raw_event: Mapping[str, Any]) -> WatchEvent:
    """Convert a raw watch stream item into a WatchEvent."""
    event_type = str(raw_event.get("type", ""))
    payload = raw_event.get("object")
    if event_type == EVENT_ERROR or not isinstance(payload, Mapping):
        return WatchEvent(event_type=event_type)
    return WatchEvent(event_type=event_type, instance=InstanceRequest.from_manifest(payload))
