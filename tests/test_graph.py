"""Tests for the motion graph render-frame builder."""

from __future__ import annotations

from typing import List

import pytest

from motiondetector.motion.state import MotionState
from motiondetector.vis.graph import (
    GpsIndicator,
    GraphColors,
    MotionFrame,
    background_color,
    build_render_frames,
    gps_indicator,
)


def make_frame(value: float = 0.0, ts: int = 0, **kw) -> MotionFrame:
    base = dict(
        raw=value,
        filtered=value,
        rms=value,
        used=value,
        is_moving=False,
        moving_for_ms=0,
        still_for_ms=0,
        motion_start_threshold=0.4,
        motion_stop_threshold=0.3,
        timestamp=ts,
    )
    base.update(kw)
    return MotionFrame(**base)


def test_from_state_copies_fields() -> None:
    state = MotionState(
        raw_accel=1.0,
        filtered_accel=0.5,
        rms_accel=0.7,
        used_accel=0.7,
        is_moving=True,
        motion_start_threshold=0.4,
        motion_stop_threshold=0.3,
        moving_for_ms=3050,
        timestamp=99,
    )
    gps = GpsIndicator(timestamp=90, accuracy=5.0, saved=True)
    f = MotionFrame.from_state(state, gps)

    assert (f.raw, f.filtered, f.rms, f.used) == (1.0, 0.5, 0.7, 0.7)
    assert f.is_moving and f.moving_for_ms == 3050
    assert f.timestamp == 99
    assert f.gps_event is gps


def test_one_render_frame_per_input_with_bounded_history() -> None:
    frames = [make_frame(0.1 * i, ts=i * 50) for i in range(10)]
    out = list(build_render_frames(frames, max_points=4, canvas_width=400, canvas_height=100))

    assert len(out) == 10
    assert [rf.frame_index for rf in out] == list(range(10))
    assert [len(rf.rects) for rf in out] == [1, 2, 3, 4, 4, 4, 4, 4, 4, 4]
    assert len(out[0].raw_lines) == 0
    assert len(out[-1].raw_lines) == 3
    assert out[-1].timestamp == 450


def test_line_geometry_and_widths() -> None:
    frames = [make_frame(0.0), make_frame(1.0, ts=50)]
    rf = list(build_render_frames(frames, max_points=2, canvas_width=200, canvas_height=100))[-1]

    # max accel = 1.0 -> height scale = 100
    line = rf.raw_lines[0]
    assert (line.start_x, line.start_y, line.end_x, line.end_y) == (0.0, 100.0, 100.0, 0.0)
    assert line.stroke_width == 4.0
    assert rf.used_lines[0].stroke_width == 8.0
    assert rf.rms_lines[0].color == GraphColors.LINE_RMS
    assert rf.smooth_lines[0].color == GraphColors.LINE_SMOOTH


def test_scale_floor_and_threshold_lines() -> None:
    rf = next(build_render_frames([make_frame(0.0)], max_points=10, canvas_width=100, canvas_height=100))

    # scale floor 0.5 m/s² -> start line at 100 - 0.4 * 200, stop at 100 - 0.3 * 200
    start, stop = rf.threshold_lines
    assert start.start_y == pytest.approx(20.0)
    assert stop.start_y == pytest.approx(40.0)
    assert (start.start_x, start.end_x) == (0.0, 100)
    assert start.color == GraphColors.LINE_START_THRESHOLD
    assert stop.color == GraphColors.LINE_STOP_THRESHOLD


def test_scale_padding_above_start_threshold() -> None:
    f = make_frame(0.1, motion_start_threshold=0.7, motion_stop_threshold=0.2)
    rf = next(build_render_frames([f], max_points=1, canvas_width=100, canvas_height=84))
    # max accel = 0.7 * 1.2 = 0.84 -> scale 100
    assert rf.threshold_lines[0].start_y == pytest.approx(14.0)


@pytest.mark.parametrize(
    "kw, expected",
    [
        (dict(is_moving=False), GraphColors.BG_IDLE),
        (dict(is_moving=False, moving_for_ms=100), GraphColors.BG_THRESHOLD),
        (dict(is_moving=True), GraphColors.BG_MOVING),
        (dict(is_moving=True, still_for_ms=100), GraphColors.BG_THRESHOLD),
    ],
)
def test_background_colors(kw, expected) -> None:
    assert background_color(make_frame(**kw)) == expected


def test_gps_indicator_fades_over_three_seconds() -> None:
    gps = GpsIndicator(timestamp=1000, accuracy=4.0, saved=True)

    fresh = gps_indicator(gps, now_ms=1000, canvas_width=300)
    half = gps_indicator(gps, now_ms=2500, canvas_width=300)
    gone = gps_indicator(gps, now_ms=4000, canvas_width=300)

    assert fresh[0].color == GraphColors.GPS_VALID.with_alpha(1.0)
    assert (fresh[0].center_x, fresh[0].center_y, fresh[0].radius) == (250.0, 50.0, 40.0)
    assert half[0].color.alpha == pytest.approx(0.5)
    assert gone == []
    assert gps_indicator(None, 0, 300) == []


def test_unsaved_fix_uses_invalid_color() -> None:
    gps = GpsIndicator(timestamp=0, accuracy=50.0, saved=False)
    circles = gps_indicator(gps, now_ms=0, canvas_width=100)
    assert circles[0].color.bgr() == GraphColors.GPS_INVALID.bgr()


def test_gps_fading_uses_latest_frame_time_by_default() -> None:
    gps = GpsIndicator(timestamp=0, accuracy=4.0, saved=True)
    frames: List[MotionFrame] = [make_frame(ts=t, gps_event=gps) for t in (0, 1500, 3000)]
    out = list(build_render_frames(frames, max_points=5, canvas_width=100, canvas_height=100))

    assert out[0].circle_indicators[0].color.alpha == 1.0
    assert out[1].circle_indicators[0].color.alpha == pytest.approx(0.5)
    assert out[2].circle_indicators == []

    pinned = list(build_render_frames(frames, 5, 100, 100, now_ms=0))
    assert all(rf.circle_indicators for rf in pinned)
