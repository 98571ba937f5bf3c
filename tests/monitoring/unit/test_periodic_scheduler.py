"""Tests for the periodic smoketest scheduler."""

from __future__ import annotations

import threading

from template_smoketest.monitoring import PeriodicScheduler


def test_runs_immediately_and_stops_after_current_run() -> None:
    runs: list[int] = []
    scheduler: PeriodicScheduler

    def _job() -> None:
        runs.append(1)
        scheduler.stop()

    scheduler = PeriodicScheduler(3600, _job)
    scheduler.run()

    assert runs == [1]
    assert scheduler.stopped is True


def test_repeats_until_stopped() -> None:
    runs: list[int] = []
    scheduler: PeriodicScheduler

    def _job() -> None:
        runs.append(1)
        if len(runs) == 3:
            scheduler.stop()

    scheduler = PeriodicScheduler(0.01, _job)
    scheduler.run()

    assert runs == [1, 1, 1]


def test_job_errors_do_not_stop_the_schedule(caplog) -> None:
    runs: list[int] = []
    scheduler: PeriodicScheduler

    def _job() -> None:
        runs.append(1)
        if len(runs) == 1:
            raise RuntimeError("boom")
        scheduler.stop()

    scheduler = PeriodicScheduler(0.01, _job)
    scheduler.run()

    assert runs == [1, 1]
    assert "unexpected error" in caplog.text


def test_stop_interrupts_the_wait() -> None:
    started = threading.Event()
    scheduler = PeriodicScheduler(3600, started.set)
    worker = threading.Thread(target=scheduler.run, daemon=True)
    worker.start()

    assert started.wait(5)
    scheduler.stop()
    worker.join(5)

    assert not worker.is_alive()
