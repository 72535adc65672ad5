# motiondetector/motion/signal.py
# -*- coding: utf-8 -*-
"""
Gravity low-pass, sample-rate estimation and rolling RMS.
重力低通、采样率估计与滑动 RMS。
"""

from collections import deque
from math import sqrt
from typing import Deque, Optional, Tuple

import numpy as np


def ema(alpha: float, new: float, prev: float) -> float:
    """Exponential moving average step. 指数滑动平均一步。"""
    return alpha * new + (1.0 - alpha) * prev


class GravityFilter:
    """
    Per-axis low-pass estimate of gravity.
    逐轴低通估计重力分量。
    """

    def __init__(self, alpha: float) -> None:
        self.alpha = alpha
        self.gx = 0.0
        self.gy = 0.0
        self.gz = 0.0

    def update(self, x: float, y: float, z: float) -> Tuple[float, float, float]:
        """
        g = α·g + (1-α)·raw for each axis.

        Returns:
            Updated gravity vector (gx, gy, gz).
        """
        a = self.alpha
        self.gx = a * self.gx + (1.0 - a) * x
        self.gy = a * self.gy + (1.0 - a) * y
        self.gz = a * self.gz + (1.0 - a) * z
        return self.gx, self.gy, self.gz

    def linear_horizontal(self, x: float, y: float) -> float:
        """
        Horizontal magnitude of linear acceleration (Z excluded).
        线性加速度的水平模长（不含 Z 轴）。
        """
        lx = x - self.gx
        ly = y - self.gy
        return sqrt(lx * lx + ly * ly)

    def reset(self) -> None:
        self.gx = self.gy = self.gz = 0.0


class SampleRateEstimator:
    """
    Re-estimate the sampling rate about once per second and derive the
    rolling window size that spans `window_seconds`.
    大约每秒重新估计一次采样率，并据此推导覆盖 `window_seconds` 的窗口长度。
    """

    def __init__(
        self,
        default_window: int = 26,
        window_seconds: float = 2.0,
        period_ms: int = 1000,
    ) -> None:
        self.default_window = default_window
        self.window_seconds = window_seconds
        self.period_ms = period_ms
        self.reset()

    def reset(self) -> None:
        self.window_size = self.default_window
        self.last_frequency: Optional[float] = None
        self._mark: Optional[int] = None
        self._count = 0

    def update(self, timestamp: int) -> bool:
        """
        Count one sample at `timestamp`.

        Returns:
            True if a new frequency estimate was produced on this call.
        """
        if self._mark is None:
            self._mark = timestamp
        self._count += 1

        elapsed = timestamp - self._mark
        if elapsed < self.period_ms:
            return False

        frequency = self._count / (elapsed / 1000.0)
        self.last_frequency = frequency
        self.window_size = max(1, int(round(frequency * self.window_seconds)))
        self._mark = timestamp
        self._count = 0
        return True


class RollingRms:
    """
    Bounded FIFO of horizontal magnitudes with RMS over the full window.
    有界 FIFO，窗口填满后计算 RMS。
    """

    def __init__(self) -> None:
        self.values: Deque[float] = deque()

    def __len__(self) -> int:
        return len(self.values)

    def push(self, value: float, capacity: int) -> Optional[float]:
        """
        Append `value`, evict oldest while over `capacity`.

        Returns:
            sqrt(mean(v²)) once the window is full, else None (warm-up).
        """
        capacity = max(1, capacity)
        self.values.append(value)
        while len(self.values) > capacity:
            self.values.popleft()

        if len(self.values) < capacity:
            return None

        arr = np.fromiter(self.values, dtype=np.float64, count=len(self.values))
        return float(np.sqrt(np.mean(arr * arr)))

    def clear(self) -> None:
        self.values.clear()
