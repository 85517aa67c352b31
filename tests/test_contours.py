from __future__ import annotations

import cv2
import numpy as np

from ftir_touchpad.contours import contour_area, extract_contours


def _bounding_boxes(contours: list[np.ndarray]) -> list[tuple[int, int, int, int]]:
    return sorted(cv2.boundingRect(contour.reshape(-1, 1, 2)) for contour in contours)


def test_empty_mask_has_no_contours() -> None:
    assert extract_contours(np.zeros((30, 40), dtype=np.uint8)) == []


def test_each_component_gets_one_outer_contour() -> None:
    mask = np.zeros((100, 100), dtype=np.uint8)
    cv2.circle(mask, (25, 25), 12, 255, -1)
    mask[60:80, 55:90] = 255

    contours = extract_contours(mask)

    boxes = _bounding_boxes(contours)
    assert len(boxes) == 2
    assert (55, 60, 35, 20) in boxes
    circle_box = next(box for box in boxes if box != (55, 60, 35, 20))
    assert abs(circle_box[0] - 13) <= 1 and abs(circle_box[2] - 25) <= 2
    for contour in contours:
        assert contour.ndim == 2 and contour.shape[1] == 2
        assert contour.dtype == np.int32


def test_contour_set_does_not_depend_on_component_layout_order() -> None:
    first = np.zeros((80, 80), dtype=np.uint8)
    first[5:20, 5:20] = 255
    first[50:70, 40:75] = 255
    second = np.zeros((80, 80), dtype=np.uint8)
    second[50:70, 40:75] = 255
    second[5:20, 5:20] = 255

    assert _bounding_boxes(extract_contours(first)) == _bounding_boxes(extract_contours(second))


def test_holes_are_not_reported() -> None:
    mask = np.zeros((60, 60), dtype=np.uint8)
    mask[10:50, 10:50] = 255
    mask[20:40, 20:40] = 0

    contours = extract_contours(mask)

    assert len(contours) == 1
    assert _bounding_boxes(contours) == [(10, 10, 40, 40)]


def test_diagonal_pixels_are_one_component() -> None:
    mask = np.zeros((10, 10), dtype=np.uint8)
    for index in range(2, 8):
        mask[index, index] = 255

    assert len(extract_contours(mask)) == 1


def test_contour_area_of_degenerate_contours_is_zero() -> None:
    assert contour_area(np.array([[3, 3]], dtype=np.int32)) == 0.0
    assert contour_area(np.array([[3, 3], [4, 4]], dtype=np.int32)) == 0.0
