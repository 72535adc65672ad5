# motiondetector/motion/estimator.py
# -*- coding: utf-8 -*-
"""
Motion estimation from three-axis accelerometer samples.
基于三轴加速度样本的运动/静止估计。

Pipeline per sample / 每个样本的处理流程:
    1. sampling-rate re-estimation -> RMS window ~2 s
    2. low-pass gravity estimate
    3. linear acceleration = raw - gravity (X, Y only)
    4. horizontal magnitude
    5. EMA smoothing (diagnostic "filtered" value)
    6. RMS over rolling window (falls back to filtered value until full)
    7. EMA smoothing of RMS
    8. spike rejection: smoothed RMS above spike_threshold is clamped
       to motion_start_threshold
    9-10. time-based hysteresis state machine
"""

from typing import Iterable, Iterator, Optional, Sequence

from motiondetector.config.motion_config import MotionConfig
from motiondetector.diagnostics import DiagnosticLogger, StdlibDiagnosticLogger
from motiondetector.motion.signal import GravityFilter, RollingRms, SampleRateEstimator, ema
from motiondetector.motion.state import MotionState
from motiondetector.motion.state_machine import MotionHysteresis
from motiondetector.motion.stream import MotionStateStream

TAG = "MotionEstimator"


class MotionEstimator:
    """
    Stateful still/moving estimator for a single sample stream.
    单一样本流的有状态静止/运动估计器。

    Not thread-safe: feed samples from one producer (or serialize calls).
    非线程安全：请由单一生产者顺序调用。
    """

    def __init__(
        self,
        config: MotionConfig,
        logger: Optional[DiagnosticLogger] = None,
    ) -> None:
        self.config = config
        self.logger = logger if logger is not None else StdlibDiagnosticLogger()

        self.gravity = GravityFilter(config.filter_alpha)
        self.rate = SampleRateEstimator()
        self.window = RollingRms()
        self.hysteresis = MotionHysteresis(
            config.motion_start_threshold,
            config.motion_stop_threshold,
            config.start_delay_ms,
            config.stop_delay_ms,
        )

        self.smoothed_accel = 0.0
        self.last_movement_time = 0
        self.rms_smoothed = 0.0
        self.last_update_time: Optional[int] = None

        self.stream = MotionStateStream(MotionState.initial(config))
        self.logger.d(TAG, "MotionEstimator initialized")

    @property
    def state(self) -> MotionState:
        return self.stream.value

    @property
    def window_size(self) -> int:
        """Current RMS window capacity (samples)."""
        return self.rate.window_size

    @property
    def window_length(self) -> int:
        """Samples currently held in the RMS window."""
        return len(self.window)

    def reset(self) -> None:
        """
        Return to the just-initialized state; config is kept.
        恢复到刚初始化的状态（配置不变），用于回放/测试。
        """
        self.gravity.reset()
        self.rate.reset()
        self.window.clear()
        self.hysteresis.reset()
        self.smoothed_accel = 0.0
        self.rms_smoothed = 0.0
        self.last_movement_time = 0
        self.last_update_time = None
        self.stream.publish(MotionState.initial(self.config))

    def process_sample(self, x: float, y: float, z: float, timestamp: int) -> MotionState:
        """
        Consume one accelerometer sample and emit the updated state.
        处理一个加速度样本并输出新的状态。

        Args:
            x, y, z: Raw acceleration in m/s².
            timestamp: Sample time in ms, monotonically non-decreasing.

        Returns:
            New MotionState (also published on `self.stream`).
        """
        cfg = self.config

        # 1. sampling rate -> window size
        old_size = self.rate.window_size
        if self.rate.update(timestamp) and self.rate.window_size != old_size:
            self.logger.d(
                TAG,
                f"RMS window {old_size} -> {self.rate.window_size} "
                f"(~{self.rate.last_frequency:.1f} Hz)",
            )

        # 2-4. gravity, linear, horizontal magnitude
        self.gravity.update(x, y, z)
        raw_horiz = self.gravity.linear_horizontal(x, y)

        # 5. diagnostic smoothing
        self.smoothed_accel = ema(cfg.accel_smoothing_alpha, raw_horiz, self.smoothed_accel)
        filtered = self.smoothed_accel

        # 6. rolling RMS, filtered value until the window fills
        rms = self.window.push(raw_horiz, self.rate.window_size)
        if rms is None:
            rms = filtered

        # 7. RMS smoothing
        self.rms_smoothed = ema(cfg.rms_alpha, rms, self.rms_smoothed)

        # 8. spike rejection
        if self.rms_smoothed > cfg.spike_threshold:
            used_accel = cfg.motion_start_threshold
            self.logger.d(
                TAG,
                f"SPIKE REJECTED: rms={self.rms_smoothed:.2f} > {cfg.spike_threshold}, "
                f"used_accel={used_accel}",
            )
        else:
            used_accel = self.rms_smoothed

        # 9-10. hysteresis
        if self.last_update_time is None:
            dt = 0
        else:
            dt = max(0, timestamp - self.last_update_time)
        self.last_update_time = timestamp

        was_moving = self.hysteresis.is_moving
        is_moving = self.hysteresis.update(used_accel, dt)
        if is_moving != was_moving:
            self.logger.d(
                TAG,
                f"{'STILL -> MOVING' if is_moving else 'MOVING -> STILL'} at {timestamp} "
                f"(moving_for={self.hysteresis.moving_for_ms}, "
                f"still_for={self.hysteresis.still_for_ms})",
            )

        # 11. emit
        if is_moving:
            self.last_movement_time = timestamp
        state = MotionState(
            raw_accel=raw_horiz,
            filtered_accel=filtered,
            rms_accel=self.rms_smoothed,
            used_accel=used_accel,
            is_moving=is_moving,
            last_movement_time=self.last_movement_time,
            motion_start_threshold=cfg.motion_start_threshold,
            motion_stop_threshold=cfg.motion_stop_threshold,
            moving_for_ms=self.hysteresis.moving_for_ms,
            still_for_ms=self.hysteresis.still_for_ms,
            timestamp=timestamp,
        )
        self.stream.publish(state)
        return state

    def process_samples(self, samples: Iterable[Sequence[float]]) -> Iterator[MotionState]:
        """Feed (x, y, z, timestamp) rows in order, yielding one state each."""
        for x, y, z, ts in samples:
            yield self.process_sample(float(x), float(y), float(z), int(ts))
