"""Interruptible fixed-interval trigger for smoketest runs."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class PeriodicScheduler:
    """Runs a job immediately and then every ``interval_seconds`` until stopped.

    Runs never overlap: the interval is measured from the end of one run to the
    start of the next.
    """

    def __init__(self, interval_seconds: float, job: Callable[[], object]) -> None:
        self._interval_seconds = interval_seconds
        self._job = job
        self._stop_requested = threading.Event()

    def run(self) -> None:
        logger.info("Running template controller smoketests")
        while not self._stop_requested.is_set():
            try:
                self._job()
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception("Smoketest job raised an unexpected error")
            if self._stop_requested.wait(self._interval_seconds):
                break

    def stop(self) -> None:
        self._stop_requested.set()

    @property
    def stopped(self) -> bool:
        return self._stop_requested.is_set()
