# motiondetector/pipeline/synthetic.py
# -*- coding: utf-8 -*-
"""
Synthetic accelerometer streams for demos and replay tests.
用于演示与回放测试的合成加速度数据。
"""

from typing import List, Optional, Tuple

import numpy as np

GRAVITY = 9.8


def still_segment(
    start_ms: int,
    duration_ms: int,
    step_ms: int = 50,
    noise: float = 0.0,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    Device at rest: (0, 0, g) plus optional Gaussian noise.
    静止：(0, 0, g)，可加高斯噪声。
    """
    ts = np.arange(start_ms, start_ms + duration_ms, step_ms, dtype=np.float64)
    out = np.zeros((len(ts), 4), dtype=np.float64)
    out[:, 2] = GRAVITY
    out[:, 3] = ts
    if noise > 0:
        rng = rng if rng is not None else np.random.default_rng(0)
        out[:, :3] += rng.normal(0.0, noise, size=(len(ts), 3))
    return out


def oscillating_segment(
    start_ms: int,
    duration_ms: int,
    amplitude: float,
    step_ms: int = 50,
) -> np.ndarray:
    """
    X axis alternating +a / -a every sample (Nyquist-rate shake).
    X 轴逐样本在 +a / -a 间交替。

    With filter_alpha=0.8 the gravity estimate settles at ±a/9, so the
    horizontal magnitude settles at 8a/9.
    """
    ts = np.arange(start_ms, start_ms + duration_ms, step_ms, dtype=np.float64)
    out = np.zeros((len(ts), 4), dtype=np.float64)
    signs = np.where(np.arange(len(ts)) % 2 == 0, 1.0, -1.0)
    out[:, 0] = amplitude * signs
    out[:, 2] = GRAVITY
    out[:, 3] = ts
    return out


def drive_scenario(step_ms: int = 50) -> Tuple[np.ndarray, List[Tuple[int, int]]]:
    """
    still 5 s -> moving 10 s -> still 8 s.

    Returns:
        samples (N, 4) and the [start, end) ms spans of true motion.
        样本，以及真实运动区间列表。
    """
    a = still_segment(0, 5000, step_ms)
    b = oscillating_segment(5000, 10000, amplitude=1.125, step_ms=step_ms)
    c = still_segment(15000, 8000, step_ms)
    return np.vstack([a, b, c]), [(5000, 15000)]
