"""Tests for the publish-latest MotionStateStream."""

from __future__ import annotations

import logging
import threading
from typing import List

import pytest

from motiondetector.motion.state import MotionState
from motiondetector.motion.stream import MotionStateStream


@pytest.fixture()
def stream() -> MotionStateStream:
    return MotionStateStream(MotionState())


def test_late_subscriber_sees_latest_then_updates(stream: MotionStateStream) -> None:
    stream.publish(MotionState(timestamp=1))
    stream.publish(MotionState(timestamp=2))

    seen: List[int] = []
    stream.subscribe(lambda s: seen.append(s.timestamp))
    stream.publish(MotionState(timestamp=3))

    assert seen == [2, 3]
    assert stream.value.timestamp == 3


def test_unsubscribe_stops_delivery(stream: MotionStateStream) -> None:
    seen: List[int] = []
    unsubscribe = stream.subscribe(lambda s: seen.append(s.timestamp))
    unsubscribe()
    unsubscribe()
    stream.publish(MotionState(timestamp=5))

    assert seen == [0]
    assert stream.subscriber_count == 0


def test_failing_subscriber_is_logged_and_isolated(
    stream: MotionStateStream, caplog: pytest.LogCaptureFixture
) -> None:
    def broken(state: MotionState) -> None:
        if state.timestamp:
            raise RuntimeError("boom")

    seen: List[int] = []
    stream.subscribe(broken)
    stream.subscribe(lambda s: seen.append(s.timestamp))

    with caplog.at_level(logging.ERROR, logger="motiondetector.motion.stream"):
        stream.publish(MotionState(timestamp=7))

    assert seen == [0, 7]
    assert "subscriber" in caplog.text


def test_value_readable_from_other_threads(stream: MotionStateStream) -> None:
    for ts in range(100):
        stream.publish(MotionState(timestamp=ts))

    result: List[int] = []
    t = threading.Thread(target=lambda: result.append(stream.value.timestamp))
    t.start()
    t.join()

    assert result == [99]


class InterleavingStream(MotionStateStream):
    """Starts a competing publish from another thread mid-replay."""

    def __init__(self, initial: MotionState) -> None:
        super().__init__(initial)
        self.publisher: threading.Thread | None = None

    def _deliver(self, callback, state: MotionState) -> None:
        if self.publisher is None:
            self.publisher = threading.Thread(
                target=self.publish, args=(MotionState(timestamp=2),)
            )
            self.publisher.start()
            # give the publisher a chance to run before the replay lands
            self.publisher.join(timeout=0.2)
        super()._deliver(callback, state)


def test_replay_reaches_new_subscriber_before_concurrent_publish() -> None:
    stream = InterleavingStream(MotionState(timestamp=1))

    seen: List[int] = []
    stream.subscribe(lambda s: seen.append(s.timestamp))
    stream.publisher.join(timeout=5)

    assert seen == [1, 2]
    assert stream.value.timestamp == 2


def test_subscriber_may_publish_from_callback(stream: MotionStateStream) -> None:
    seen: List[int] = []

    def echo(state: MotionState) -> None:
        seen.append(state.timestamp)
        if state.timestamp == 1:
            stream.publish(MotionState(timestamp=10))

    stream.subscribe(echo)
    stream.publish(MotionState(timestamp=1))

    assert seen == [0, 1, 10]
    assert stream.value.timestamp == 10
