from __future__ import annotations

import numpy as np


def resolve_padding(padding_pixels: int, height: int) -> tuple[int, bool]:
    """Return ``(band_rows, fully_masked)`` for a requested padding.

    Bands must satisfy ``2 * band_rows < height``. A request that does not fit
    is clamped to the largest valid band and the whole frame is masked.
    """
    if height <= 0:
        raise ValueError("height must be positive")

    padding = max(int(padding_pixels), 0)
    if 2 * padding < height:
        return padding, False
    return (height - 1) // 2, True


def threshold_mask(blurred: np.ndarray, threshold_value: int) -> np.ndarray:
    """255 where ``blurred >= threshold_value``, 0 elsewhere."""
    if blurred.ndim != 2:
        raise ValueError("threshold_mask expects a single-channel grid")

    threshold = min(max(int(threshold_value), 0), 255)
    return np.where(blurred >= threshold, 255, 0).astype(np.uint8)


def apply_vertical_padding(mask: np.ndarray, padding_pixels: int) -> np.ndarray:
    """Zero the top and bottom bands of ``mask`` in place and return it."""
    height = mask.shape[0]
    band_rows, fully_masked = resolve_padding(padding_pixels, height)
    if fully_masked:
        mask[:] = 0
        return mask

    if band_rows > 0:
        mask[:band_rows, ...] = 0
        mask[height - band_rows :, ...] = 0
    return mask


def segment(blurred: np.ndarray, threshold_value: int, padding_pixels: int) -> tuple[np.ndarray, np.ndarray]:
    """Threshold and pad a blurred grid.

    Returns the raw threshold mask together with the padded copy; the raw mask
    is kept for the threshold overlay.
    """
    thresholded = threshold_mask(blurred, threshold_value)
    padded = apply_vertical_padding(thresholded.copy(), padding_pixels)
    return thresholded, padded
