from __future__ import annotations

import cv2
import numpy as np


class InvalidFrameError(ValueError):
    """Raised when a frame is missing, empty or has an unsupported layout."""


def as_bgr_frame(frame: np.ndarray | None) -> np.ndarray:
    """Validate a source frame and return it as a 3-channel uint8 BGR image."""
    if frame is None:
        raise InvalidFrameError("frame is missing")

    image = np.asarray(frame)
    if image.size == 0 or image.ndim < 2 or image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidFrameError("frame is empty")
    if image.dtype != np.uint8:
        raise InvalidFrameError(f"frame must be uint8 (got {image.dtype})")

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.ndim == 3 and image.shape[2] == 3:
        return np.ascontiguousarray(image)
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    if image.ndim == 3 and image.shape[2] == 1:
        return cv2.cvtColor(np.ascontiguousarray(image[:, :, 0]), cv2.COLOR_GRAY2BGR)

    raise InvalidFrameError(f"unsupported frame shape {image.shape}")


def to_grayscale(frame: np.ndarray) -> np.ndarray:
    # ITU-R BT.601 luma: 0.299 R + 0.587 G + 0.114 B
    return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)


def gaussian_blur(gray: np.ndarray, kernel_size: int = 7, sigma: float = 1.5) -> np.ndarray:
    if kernel_size <= 0 or kernel_size % 2 == 0:
        raise ValueError("kernel_size must be a positive odd integer")
    if sigma <= 0:
        raise ValueError("sigma must be positive")

    return cv2.GaussianBlur(
        gray,
        (kernel_size, kernel_size),
        sigmaX=sigma,
        sigmaY=sigma,
        borderType=cv2.BORDER_REFLECT_101,
    )


def preprocess_frame(frame: np.ndarray, kernel_size: int = 7, sigma: float = 1.5) -> np.ndarray:
    """BGR frame -> blurred single-channel intensity grid of the same size."""
    return gaussian_blur(to_grayscale(frame), kernel_size=kernel_size, sigma=sigma)
