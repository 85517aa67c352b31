from __future__ import annotations

import cv2
import numpy as np


def extract_contours(mask: np.ndarray) -> list[np.ndarray]:
    """Outer boundaries of the 8-connected bright components of ``mask``.

    Each contour is an ``(N, 2)`` int32 array of ``(x, y)`` points forming a
    closed polygon. Holes are not reported and the order of the returned
    contours carries no meaning.
    """
    if mask.ndim != 2:
        raise ValueError("extract_contours expects a single-channel mask")
    if mask.size == 0:
        return []

    binary = np.where(mask > 0, 255, 0).astype(np.uint8)
    found, _ = cv2.findContours(binary, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
    return [contour.reshape(-1, 2).astype(np.int32) for contour in found]


def contour_area(contour: np.ndarray) -> float:
    """Polygon area enclosed by a contour (shoelace), in square pixels."""
    if len(contour) < 3:
        return 0.0
    return float(cv2.contourArea(np.asarray(contour, dtype=np.int32).reshape(-1, 1, 2)))
