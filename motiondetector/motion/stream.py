# motiondetector/motion/stream.py
# -*- coding: utf-8 -*-
"""
Publish-latest observable for motion states.
运动状态的“最新值 + 后续更新”发布器。
"""

import logging
import threading
from typing import Callable, List

from motiondetector.motion.state import MotionState

logger = logging.getLogger(__name__)

Subscriber = Callable[[MotionState], None]


class MotionStateStream:
    """
    Holds the current MotionState and pushes every new one to subscribers.
    保存当前状态，并把每个新状态按顺序推送给订阅者。

    A late subscriber receives the current value immediately.
    迟到的订阅者会立即收到当前值。
    """

    def __init__(self, initial: MotionState) -> None:
        self._value = initial
        self._subscribers: List[Subscriber] = []
        # guards value swap + delivery; re-entrant so callbacks may publish
        self._lock = threading.RLock()

    @property
    def value(self) -> MotionState:
        with self._lock:
            return self._value

    def publish(self, state: MotionState) -> None:
        with self._lock:
            self._value = state
            for cb in list(self._subscribers):
                self._deliver(cb, state)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register `callback`; it is called with the current value right away,
        before any later publish reaches it.

        Returns:
            A function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)
            self._deliver(callback, self._value)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def _deliver(self, callback: Subscriber, state: MotionState) -> None:
        try:
            callback(state)
        except Exception:
            logger.exception("Motion state subscriber %r failed", callback)
