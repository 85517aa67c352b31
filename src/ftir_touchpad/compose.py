from __future__ import annotations

import math
from collections.abc import Sequence

import cv2
import numpy as np

from .models import DEBUG_MODES, Ellipse
from .segment import resolve_padding

OUTLINE_COLOR = (0, 0, 255)
OUTLINE_THICKNESS = 2
CENTER_COLOR = (0, 255, 0)
CENTER_RADIUS = 5
PADDING_COLOR = (255, 0, 0)
PADDING_ALPHA = 0.5


def draw_ellipses(frame: np.ndarray, ellipses: Sequence[Ellipse]) -> np.ndarray:
    """Copy of ``frame`` with each ellipse outlined and its center marked."""
    canvas = frame.copy()
    for ellipse in ellipses:
        box = (
            (ellipse.center_x, ellipse.center_y),
            (ellipse.major_axis, ellipse.minor_axis),
            math.degrees(ellipse.angle_rad),
        )
        cv2.ellipse(canvas, box, OUTLINE_COLOR, OUTLINE_THICKNESS)
        center = (int(round(ellipse.center_x)), int(round(ellipse.center_y)))
        cv2.circle(canvas, center, CENTER_RADIUS, CENTER_COLOR, -1)
    return canvas


def render_threshold_overlay(mask: np.ndarray) -> np.ndarray:
    return cv2.applyColorMap(mask, cv2.COLORMAP_JET)


def render_padding_overlay(frame: np.ndarray, padding_pixels: int) -> np.ndarray:
    """Frame with semi-transparent bands over the padded rows."""
    canvas = frame.copy()
    height = canvas.shape[0]
    band_rows, fully_masked = resolve_padding(padding_pixels, height)

    if fully_masked:
        regions = [(0, height)]
    elif band_rows > 0:
        regions = [(0, band_rows), (height - band_rows, height)]
    else:
        regions = []

    for start, stop in regions:
        band = canvas[start:stop]
        tint = np.empty_like(band)
        tint[:] = PADDING_COLOR
        canvas[start:stop] = cv2.addWeighted(band, 1.0 - PADDING_ALPHA, tint, PADDING_ALPHA, 0.0)
    return canvas


def composite(
    frame: np.ndarray,
    ellipses: Sequence[Ellipse],
    threshold_mask: np.ndarray,
    padding_pixels: int,
    debug_mode: str = "normal",
) -> np.ndarray:
    """Build the display image for one frame according to ``debug_mode``."""
    if debug_mode == "normal":
        return draw_ellipses(frame, ellipses)
    if debug_mode == "threshold_overlay":
        return render_threshold_overlay(threshold_mask)
    if debug_mode == "padding_overlay":
        return render_padding_overlay(frame, padding_pixels)
    raise ValueError(f"debug_mode must be one of {', '.join(DEBUG_MODES)} (got {debug_mode!r})")
