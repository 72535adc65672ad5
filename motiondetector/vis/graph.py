# motiondetector/vis/graph.py
# -*- coding: utf-8 -*-
"""
Platform-independent graph builder: motion states -> drawable primitives.
与平台无关的曲线图构建：运动状态 -> 可绘制图元。

Adapters (OpenCV, a mobile canvas, ...) only do the actual drawing.
具体绘制交给各平台适配层（OpenCV 等）。
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, Iterator, List, Optional

from motiondetector.motion.state import MotionState

GPS_FADE_MS = 3000


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int
    alpha: float = 1.0

    def with_alpha(self, a: float) -> "Color":
        return Color(self.r, self.g, self.b, a)

    def bgr(self):
        """OpenCV channel order. OpenCV 的 BGR 顺序。"""
        return (self.b, self.g, self.r)


class GraphColors:
    BG_IDLE = Color(255, 255, 255)
    BG_THRESHOLD = Color(231, 255, 230)
    BG_MOVING = Color(203, 255, 201)
    LINE_START_THRESHOLD = Color(54, 122, 54)
    LINE_STOP_THRESHOLD = Color(255, 0, 0)
    LINE_RMS = Color(255, 0, 255)
    LINE_USED = Color(255, 128, 0)
    LINE_RAW = Color(64, 64, 64)
    LINE_SMOOTH = Color(0, 0, 255)
    GPS_VALID = Color(0, 255, 0)
    GPS_INVALID = Color(255, 0, 0)


@dataclass(frozen=True)
class GpsIndicator:
    """External location-fix event shown as a fading marker."""

    timestamp: int
    accuracy: float
    saved: bool


@dataclass(frozen=True)
class MotionFrame:
    raw: float
    filtered: float
    rms: float
    used: float
    is_moving: bool
    moving_for_ms: int
    still_for_ms: int
    motion_start_threshold: float
    motion_stop_threshold: float
    timestamp: int
    gps_event: Optional[GpsIndicator] = None

    @classmethod
    def from_state(cls, state: MotionState, gps: Optional[GpsIndicator] = None) -> "MotionFrame":
        return cls(
            raw=state.raw_accel,
            filtered=state.filtered_accel,
            rms=state.rms_accel,
            used=state.used_accel,
            is_moving=state.is_moving,
            moving_for_ms=state.moving_for_ms,
            still_for_ms=state.still_for_ms,
            motion_start_threshold=state.motion_start_threshold,
            motion_stop_threshold=state.motion_stop_threshold,
            timestamp=state.timestamp,
            gps_event=gps,
        )


@dataclass(frozen=True)
class RenderRect:
    x: float
    width: float
    color: Color


@dataclass(frozen=True)
class RenderLine:
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    color: Color
    stroke_width: float


@dataclass(frozen=True)
class RenderCircle:
    center_x: float
    center_y: float
    radius: float
    color: Color


@dataclass(frozen=True)
class RenderFrame:
    rects: List[RenderRect]
    raw_lines: List[RenderLine]
    smooth_lines: List[RenderLine]
    rms_lines: List[RenderLine]
    used_lines: List[RenderLine]
    threshold_lines: List[RenderLine]
    circle_indicators: List[RenderCircle] = field(default_factory=list)
    timestamp: int = 0
    frame_index: int = 0


def background_color(f: MotionFrame) -> Color:
    """
    Green while moving, pale green while a transition is accumulating,
    white while idle.
    运动为绿色，正在累计切换时为浅绿，静止为白色。
    """
    if f.is_moving and f.still_for_ms > 0:
        return GraphColors.BG_THRESHOLD
    if f.is_moving:
        return GraphColors.BG_MOVING
    if f.moving_for_ms > 0:
        return GraphColors.BG_THRESHOLD
    return GraphColors.BG_IDLE


def _series_lines(
    values: List[float],
    width_per_point: float,
    canvas_height: float,
    height_scale: float,
    color: Color,
    stroke_width: float,
) -> List[RenderLine]:
    return [
        RenderLine(
            start_x=i * width_per_point,
            start_y=canvas_height - values[i] * height_scale,
            end_x=(i + 1) * width_per_point,
            end_y=canvas_height - values[i + 1] * height_scale,
            color=color,
            stroke_width=stroke_width,
        )
        for i in range(len(values) - 1)
    ]


def gps_indicator(
    gps: Optional[GpsIndicator],
    now_ms: int,
    canvas_width: float,
) -> List[RenderCircle]:
    """
    Fading circle for a recent location fix (fully gone after 3 s).
    最近一次定位的渐隐圆点（3 秒后消失）。
    """
    if gps is None:
        return []
    since = now_ms - gps.timestamp
    if since >= GPS_FADE_MS:
        return []
    alpha = min(1.0, max(0.0, 1.0 - since / GPS_FADE_MS))
    base = GraphColors.GPS_VALID if gps.saved else GraphColors.GPS_INVALID
    return [
        RenderCircle(
            center_x=canvas_width - 50.0,
            center_y=50.0,
            radius=40.0,
            color=base.with_alpha(alpha),
        )
    ]


def build_render_frames(
    frames: Iterable[MotionFrame],
    max_points: int,
    canvas_width: float,
    canvas_height: float,
    now_ms: Optional[int] = None,
) -> Iterator[RenderFrame]:
    """
    Lazily build one RenderFrame per MotionFrame over a sliding history.
    基于滑动历史，为每个 MotionFrame 惰性生成一个 RenderFrame。

    Args:
        frames: MotionFrame sequence (oldest first).
        max_points: History length shown on the x axis.
        canvas_width, canvas_height: Target size in pixels.
        now_ms: Clock used for GPS fading; defaults to the latest frame's
                timestamp so output only depends on the inputs.
                用于 GPS 渐隐的当前时间，默认取最新帧的时间戳。

    Yields:
        RenderFrame with background rects, signal lines, threshold lines
        and GPS indicators.
    """
    max_points = max(1, max_points)
    window: Deque[MotionFrame] = deque(maxlen=max_points)
    width_per_point = canvas_width / max_points

    for frame_index, frame in enumerate(frames):
        window.append(frame)
        latest = frame

        data_max = max(max(f.raw, f.filtered, f.rms, f.used) for f in window)
        max_accel = max(data_max, latest.motion_start_threshold * 1.2, 0.5)
        height_scale = canvas_height / max_accel

        rects = [
            RenderRect(x=i * width_per_point, width=width_per_point, color=background_color(f))
            for i, f in enumerate(window)
        ]

        def series(attr: str, color: Color, stroke: float) -> List[RenderLine]:
            return _series_lines(
                [getattr(f, attr) for f in window],
                width_per_point,
                canvas_height,
                height_scale,
                color,
                stroke,
            )

        y_start = canvas_height - latest.motion_start_threshold * height_scale
        y_stop = canvas_height - latest.motion_stop_threshold * height_scale
        threshold_lines = [
            RenderLine(0.0, y_start, canvas_width, y_start, GraphColors.LINE_START_THRESHOLD, 2.0),
            RenderLine(0.0, y_stop, canvas_width, y_stop, GraphColors.LINE_STOP_THRESHOLD, 2.0),
        ]

        now = latest.timestamp if now_ms is None else now_ms

        yield RenderFrame(
            rects=rects,
            raw_lines=series("raw", GraphColors.LINE_RAW, 4.0),
            smooth_lines=series("filtered", GraphColors.LINE_SMOOTH, 4.0),
            rms_lines=series("rms", GraphColors.LINE_RMS, 4.0),
            used_lines=series("used", GraphColors.LINE_USED, 8.0),
            threshold_lines=threshold_lines,
            circle_indicators=gps_indicator(latest.gps_event, now, canvas_width),
            timestamp=latest.timestamp,
            frame_index=frame_index,
        )
