# motiondetector/motion/state_machine.py
# -*- coding: utf-8 -*-
"""
Still / moving state machine with time-based hysteresis.
基于时间迟滞的 静止 / 运动 状态机。
"""


class MotionHysteresis:
    """
    Two-state (STILL / MOVING) machine driven by accumulated durations.
    由累计时长驱动的双状态（静止/运动）状态机。

    Between the two thresholds (dead band) neither accumulator changes.
    两个阈值之间为死区，累计量保持不变。
    """

    def __init__(
        self,
        start_threshold: float,
        stop_threshold: float,
        start_delay_ms: int,
        stop_delay_ms: int,
    ) -> None:
        self.start_threshold = start_threshold
        self.stop_threshold = stop_threshold
        self.start_delay_ms = start_delay_ms
        self.stop_delay_ms = stop_delay_ms

        self.moving_for_ms = 0
        self.still_for_ms = 0
        self.is_moving = False

    def update(self, accel: float, dt_ms: int) -> bool:
        """
        Accumulate `dt_ms` according to `accel` and apply at most one transition.
        按 `accel` 累计 `dt_ms`，每次最多发生一次状态切换。

        Args:
            accel: Decision signal (smoothed RMS or spike clamp), m/s².
            dt_ms: Time since previous sample; negative values count as 0.

        Returns:
            Current state: True for MOVING, False for STILL.
        """
        dt_ms = max(0, dt_ms)

        is_moving_ev = accel > self.start_threshold
        is_still_ev = accel < self.stop_threshold

        if is_moving_ev:
            self.moving_for_ms += dt_ms
            self.still_for_ms = 0
        elif is_still_ev:
            self.still_for_ms += dt_ms
            self.moving_for_ms = 0

        if not self.is_moving and self.moving_for_ms > self.start_delay_ms:
            self.is_moving = True
        elif self.is_moving and self.still_for_ms > self.stop_delay_ms:
            self.is_moving = False

        return self.is_moving

    def reset(self) -> None:
        self.moving_for_ms = 0
        self.still_for_ms = 0
        self.is_moving = False
