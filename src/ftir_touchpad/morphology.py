from __future__ import annotations

import cv2
import numpy as np


def structuring_element(size: int = 10) -> np.ndarray:
    if size <= 0:
        raise ValueError("structuring element size must be positive")
    return cv2.getStructuringElement(cv2.MORPH_RECT, (size, size))


def erode_mask(mask: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    anchor = (kernel.shape[1] // 2, kernel.shape[0] // 2)
    return cv2.erode(mask, kernel, anchor=anchor, borderType=cv2.BORDER_CONSTANT, borderValue=255)


def dilate_mask(mask: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    # Mirrored anchor: erode then dilate with an even-sized element would
    # otherwise shift the opened mask by one pixel.
    anchor = (kernel.shape[1] - 1 - kernel.shape[1] // 2, kernel.shape[0] - 1 - kernel.shape[0] // 2)
    return cv2.dilate(mask, kernel, anchor=anchor, borderType=cv2.BORDER_CONSTANT, borderValue=0)


def open_mask(mask: np.ndarray, kernel_size: int = 10) -> np.ndarray:
    """Morphological opening with a square element.

    Bright components narrower than the element in either direction disappear;
    larger ones come back with their shape preserved up to the element size.
    The input mask is left untouched.
    """
    kernel = structuring_element(kernel_size)
    return dilate_mask(erode_mask(mask, kernel), kernel)
