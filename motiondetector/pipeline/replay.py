# motiondetector/pipeline/replay.py
# -*- coding: utf-8 -*-
"""
Deterministic replay of recorded accelerometer samples
+ optional state CSV / graph video export.
录制加速度数据的确定性回放 + 可选的状态 CSV / 曲线视频导出。
"""

from __future__ import annotations

import csv
import logging
import os
from dataclasses import fields
from typing import Dict, List, Optional

import cv2
import numpy as np

from motiondetector.config.loader import config_from_dict, load_yaml
from motiondetector.config.motion_config import ConfigError, MotionConfig
from motiondetector.motion.estimator import MotionEstimator
from motiondetector.motion.state import MotionState
from motiondetector.vis.draw import draw_render_frame
from motiondetector.vis.graph import GpsIndicator, MotionFrame, build_render_frames

logger = logging.getLogger(__name__)


def load_samples_csv(path: str) -> np.ndarray:
    """
    Load `x, y, z, timestamp_ms` rows (header line optional).
    读取 `x, y, z, timestamp_ms` 样本（可带表头）。

    Returns:
        float64 array of shape (N, 4).
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Samples not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        first = f.readline()
    skip = 0
    try:
        float(first.split(",")[0])
    except ValueError:
        skip = 1

    data = np.loadtxt(path, delimiter=",", skiprows=skip, ndmin=2, dtype=np.float64)
    if data.size == 0:
        return np.zeros((0, 4), dtype=np.float64)
    if data.shape[1] < 4:
        raise ValueError(f"Expected 4 columns (x, y, z, timestamp) in {path}, got {data.shape[1]}")
    return data[:, :4]


def save_states_csv(states: List[MotionState], path: str) -> None:
    """Write one row per MotionState. 每个状态写一行。"""
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    names = [f.name for f in fields(MotionState)]
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=names)
        writer.writeheader()
        for s in states:
            writer.writerow(s.to_dict())


class MotionReplayPipeline:
    def __init__(self, cfg_path: Optional[str] = None, config: Optional[MotionConfig] = None) -> None:
        self.cfg = load_yaml(cfg_path) if cfg_path else {}

        replay_cfg = self.cfg.get("replay", {}) or {}

        # --- 运动检测参数 ---
        if config is not None:
            self.motion_config = config
        else:
            self.motion_config = config_from_dict(self.cfg.get("motion", {}))

        # --- 曲线图参数 ---
        self.max_points: int = int(replay_cfg.get("max_points", 200))
        self.canvas_width: int = int(replay_cfg.get("canvas_width", 800))
        self.canvas_height: int = int(replay_cfg.get("canvas_height", 300))
        self.fps: float = float(replay_cfg.get("fps", 20.0))
        self.log_level: str = str(replay_cfg.get("log_level", "INFO"))

        if self.max_points <= 0 or self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ConfigError("replay.max_points / canvas_width / canvas_height must be > 0")

    def run(self, samples: np.ndarray) -> List[MotionState]:
        """
        Replay samples through a fresh estimator.
        用全新的估计器回放样本。
        """
        estimator = MotionEstimator(self.motion_config)
        states = list(estimator.process_samples(samples))

        transitions = sum(
            1 for a, b in zip(states, states[1:]) if a.is_moving != b.is_moving
        )
        logger.info(
            "Replayed %d samples, %d transitions, moving at end: %s",
            len(states),
            transitions,
            states[-1].is_moving if states else False,
        )
        return states

    def render_video(
        self,
        states: List[MotionState],
        out_path: str,
        gps_events: Optional[Dict[int, GpsIndicator]] = None,
    ) -> None:
        """
        Render the motion graph of `states` into an MP4.
        将状态曲线渲染为 MP4 视频。

        Args:
            gps_events: Optional {state index: GpsIndicator} markers.
        """
        out_dir = os.path.dirname(out_path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)

        vw = cv2.VideoWriter(
            out_path,
            cv2.VideoWriter_fourcc(*"mp4v"),
            self.fps,
            (self.canvas_width, self.canvas_height),
        )

        # 让 GPS 标记在后续帧中持续显示直到淡出
        gps_events = gps_events or {}
        frames = []
        current_gps: Optional[GpsIndicator] = None
        for i, s in enumerate(states):
            current_gps = gps_events.get(i, current_gps)
            frames.append(MotionFrame.from_state(s, current_gps))

        try:
            for rf, s in zip(
                build_render_frames(frames, self.max_points, self.canvas_width, self.canvas_height),
                states,
            ):
                label = f"{'MOVING' if s.is_moving else 'STILL'} rms={s.rms_accel:.2f}"
                vw.write(
                    draw_render_frame(rf, self.canvas_width, self.canvas_height, label, s.is_moving)
                )
        finally:
            vw.release()

    def run_csv(
        self,
        csv_path: str,
        out_csv: str = "",
        out_video: str = "",
    ) -> List[MotionState]:
        samples = load_samples_csv(csv_path)
        states = self.run(samples)

        if out_csv:
            save_states_csv(states, out_csv)
            print(f"[OK] Saved motion states: {out_csv}")
        if out_video:
            self.render_video(states, out_video)
            print(f"[OK] Saved motion graph video: {out_video}")
        return states
