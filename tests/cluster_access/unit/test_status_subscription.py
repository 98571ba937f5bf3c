"""Tests for the threaded status subscription."""

from __future__ import annotations

import threading
import time

from template_smoketest.cluster_access import ThreadedStatusSubscription
from template_smoketest.cluster_access.status_subscription import to_watch_event


def _blocking_stream(release: threading.Event):
    release.wait(10)
    yield from ()


def test_events_are_delivered_then_closed() -> None:
    stream = [
        {"type": "MODIFIED", "object": {"metadata": {"name": "i"}}},
        {"type": "DELETED", "object": {"metadata": {"name": "i"}}},
    ]
    subscription = ThreadedStatusSubscription(iter(stream), stop_stream=lambda: None)

    types = [subscription.next_event(5).event_type for _ in range(3)]

    assert types == ["MODIFIED", "DELETED", "CLOSED"]


def test_next_event_returns_none_after_timeout() -> None:
    release = threading.Event()
    subscription = ThreadedStatusSubscription(_blocking_stream(release), stop_stream=release.set)

    started = time.monotonic()
    event = subscription.next_event(0.2)
    elapsed = time.monotonic() - started
    subscription.stop()

    assert event is None
    assert 0.15 <= elapsed < 2.0


def test_stream_error_becomes_error_event() -> None:
    def _failing_stream():
        raise ConnectionResetError("reset by peer")
        yield  # pragma: no cover

    subscription = ThreadedStatusSubscription(_failing_stream(), stop_stream=lambda: None)

    event = subscription.next_event(5)

    assert event is not None
    assert event.event_type == "ERROR"
    assert event.instance is None


def test_stop_is_idempotent() -> None:
    release = threading.Event()
    stop_calls: list[int] = []

    def _stop_stream() -> None:
        stop_calls.append(1)
        release.set()

    subscription = ThreadedStatusSubscription(_blocking_stream(release), stop_stream=_stop_stream)
    subscription.stop()
    subscription.stop()

    assert subscription.stopped is True
    assert stop_calls == [1]
    assert subscription.next_event(0.1) is None


def test_stop_waits_for_released_stream_to_exit() -> None:
    release = threading.Event()
    subscription = ThreadedStatusSubscription(_blocking_stream(release), stop_stream=release.set)

    assert subscription.pumping is True
    subscription.stop()

    assert subscription.pumping is False


def test_stop_gives_up_on_stream_that_stays_blocked() -> None:
    release = threading.Event()
    subscription = ThreadedStatusSubscription(
        _blocking_stream(release), stop_stream=lambda: None, join_timeout=0.1
    )

    started = time.monotonic()
    subscription.stop()
    elapsed = time.monotonic() - started
    release.set()

    assert elapsed < 2.0
    assert subscription.stopped is True


def test_error_payload_carries_no_instance() -> None:
    event = to_watch_event({"type": "ERROR", "object": {"code": 410, "reason": "Expired"}})

    assert event.event_type == "ERROR"
    assert event.instance is None
