from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import cv2
import numpy as np

from .models import Ellipse

logger = logging.getLogger(__name__)

MIN_FIT_POINTS = 5


def normalize_ellipse(
    center: tuple[float, float], axes: tuple[float, float], angle_deg: float
) -> Ellipse:
    """Convert an OpenCV rotated box into an :class:`Ellipse`.

    The larger axis becomes ``major_axis`` and the angle is rotated with it, so
    ``angle_rad`` always describes the major axis and lies in ``[0, pi)``.
    Angles follow image coordinates (y axis pointing down), as in OpenCV.
    """
    width, height = float(axes[0]), float(axes[1])
    if width >= height:
        major, minor, angle = width, height, float(angle_deg)
    else:
        major, minor, angle = height, width, float(angle_deg) + 90.0

    angle_rad = math.radians(angle) % math.pi
    if angle_rad >= math.pi:
        angle_rad = 0.0

    return Ellipse(
        center_x=float(center[0]),
        center_y=float(center[1]),
        major_axis=max(major, 0.0),
        minor_axis=max(minor, 0.0),
        angle_rad=angle_rad,
    )


def fit_ellipse(contour: np.ndarray | Sequence[tuple[int, int]]) -> Ellipse | None:
    """Least-squares ellipse through the contour points.

    Returns ``None`` for contours with fewer than five points, which cannot
    pin down a conic, and for fits that come back degenerate.
    """
    points = np.asarray(contour, dtype=np.float32).reshape(-1, 2)
    if len(points) < MIN_FIT_POINTS:
        return None

    try:
        center, axes, angle_deg = cv2.fitEllipse(points)
    except cv2.error as error:
        logger.debug("Ellipse fit rejected for %d-point contour: %s", len(points), error)
        return None

    values = (center[0], center[1], axes[0], axes[1], angle_deg)
    if not all(math.isfinite(value) for value in values):
        logger.debug("Ellipse fit returned non-finite values for %d-point contour", len(points))
        return None

    return normalize_ellipse(center, axes, angle_deg)


def fit_ellipses(contours: Sequence[np.ndarray]) -> tuple[list[Ellipse], int]:
    """Fit every contour; returns the ellipses and the number of skipped contours."""
    ellipses: list[Ellipse] = []
    skipped = 0
    for contour in contours:
        ellipse = fit_ellipse(contour)
        if ellipse is None:
            skipped += 1
            continue
        ellipses.append(ellipse)
    return ellipses, skipped
