# motiondetector/motion/state.py
# -*- coding: utf-8 -*-
"""
Motion state snapshot emitted per accelerometer sample.
每个加速度样本输出的运动状态快照。
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict

from motiondetector.config.motion_config import MotionConfig


@dataclass(frozen=True)
class MotionState:
    """Immutable estimator output. 不可变的估计器输出。"""

    raw_accel: float = 0.0
    filtered_accel: float = 0.0
    rms_accel: float = 0.0
    used_accel: float = 0.0
    is_moving: bool = False
    last_movement_time: int = 0
    motion_start_threshold: float = 0.0
    motion_stop_threshold: float = 0.0
    moving_for_ms: int = 0
    still_for_ms: int = 0
    timestamp: int = 0

    @classmethod
    def initial(cls, config: MotionConfig) -> "MotionState":
        return cls(
            motion_start_threshold=config.motion_start_threshold,
            motion_stop_threshold=config.motion_stop_threshold,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
