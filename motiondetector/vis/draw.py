# motiondetector/vis/draw.py
# -*- coding: utf-8 -*-
"""
OpenCV drawing of motion graph frames and status labels.
用 OpenCV 绘制运动曲线帧与状态标签。
"""

import cv2
import numpy as np

from motiondetector.vis.graph import GraphColors, RenderFrame, RenderLine


def _blend(img: np.ndarray, overlay: np.ndarray, alpha: float) -> None:
    """In-place: img = alpha * overlay + (1 - alpha) * img."""
    alpha = float(min(1.0, max(0.0, alpha)))
    img[:] = cv2.addWeighted(overlay, alpha, img, 1 - alpha, 0)


def _line(img: np.ndarray, ln: RenderLine) -> None:
    cv2.line(
        img,
        (int(round(ln.start_x)), int(round(ln.start_y))),
        (int(round(ln.end_x)), int(round(ln.end_y))),
        ln.color.bgr(),
        max(1, int(round(ln.stroke_width))),
        cv2.LINE_AA,
    )


def draw_status_bar(img: np.ndarray, text: str, moving: bool = False) -> None:
    """
    Paint a full-width status strip along the bottom edge with `text` in it.
    在图像底部绘制整行状态条，例如 "MOVING rms=0.62"。
    """
    if not text:
        return

    font = cv2.FONT_HERSHEY_SIMPLEX
    (_, th), baseline = cv2.getTextSize(text, font, 0.4, 1)
    h, w = img.shape[:2]
    top = max(0, h - th - baseline - 4)

    fill = GraphColors.BG_MOVING if moving else GraphColors.LINE_RAW.with_alpha(0.15)
    overlay = img.copy()
    cv2.rectangle(overlay, (0, top), (w - 1, h - 1), fill.bgr(), -1)
    _blend(img, overlay, fill.alpha)
    cv2.putText(img, text, (4, h - baseline - 2), font, 0.4, (0, 0, 0), 1, cv2.LINE_AA)


def draw_render_frame(
    frame: RenderFrame,
    canvas_width: int,
    canvas_height: int,
    label: str = "",
    moving: bool = False,
) -> np.ndarray:
    """
    Rasterize a RenderFrame into a BGR image.
    将 RenderFrame 栅格化为 BGR 图像。

    Returns:
        uint8 array of shape (canvas_height, canvas_width, 3).
    """
    img = np.full((canvas_height, canvas_width, 3), 255, dtype=np.uint8)

    for r in frame.rects:
        xa = int(round(r.x))
        xb = int(round(r.x + r.width))
        cv2.rectangle(img, (xa, 0), (xb, canvas_height - 1), r.color.bgr(), -1)

    for ln in frame.threshold_lines:
        _line(img, ln)

    for group in (frame.raw_lines, frame.smooth_lines, frame.rms_lines, frame.used_lines):
        for ln in group:
            _line(img, ln)

    for c in frame.circle_indicators:
        overlay = img.copy()
        cv2.circle(
            overlay,
            (int(round(c.center_x)), int(round(c.center_y))),
            int(round(c.radius)),
            c.color.bgr(),
            -1,
            cv2.LINE_AA,
        )
        _blend(img, overlay, c.color.alpha)

    draw_status_bar(img, label, moving)

    return img
