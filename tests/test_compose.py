from __future__ import annotations

import math

import numpy as np
import pytest

from ftir_touchpad.compose import (
    CENTER_COLOR,
    OUTLINE_COLOR,
    composite,
    draw_ellipses,
    render_padding_overlay,
    render_threshold_overlay,
)
from ftir_touchpad.models import Ellipse


def _frame() -> np.ndarray:
    return np.full((120, 160, 3), 40, dtype=np.uint8)


def _has_color(region: np.ndarray, color: tuple[int, int, int]) -> bool:
    return bool(np.all(region == np.array(color, dtype=np.uint8), axis=-1).any())


def _ellipse() -> Ellipse:
    return Ellipse(center_x=80.0, center_y=60.0, major_axis=50.0, minor_axis=30.0, angle_rad=0.0)


def test_draw_ellipses_marks_center_and_outline_on_a_copy() -> None:
    frame = _frame()

    canvas = draw_ellipses(frame, [_ellipse()])

    assert canvas.shape == frame.shape
    assert tuple(int(v) for v in canvas[60, 80]) == CENTER_COLOR
    # Right end of the major axis: (80 + 25, 60)
    assert _has_color(canvas[58:63, 102:109], OUTLINE_COLOR)
    assert int(frame.max()) == 40


def test_draw_ellipses_without_ellipses_is_plain_copy() -> None:
    frame = _frame()

    canvas = draw_ellipses(frame, [])

    assert np.array_equal(canvas, frame)
    assert canvas is not frame


def test_threshold_overlay_is_false_color_of_mask() -> None:
    mask = np.zeros((120, 160), dtype=np.uint8)
    mask[:, 80:] = 255

    overlay = render_threshold_overlay(mask)

    assert overlay.shape == (120, 160, 3)
    assert not np.array_equal(overlay[0, 0], overlay[0, 159])
    assert np.array_equal(overlay[10, 10], overlay[100, 40])


def test_padding_overlay_tints_only_the_bands() -> None:
    frame = _frame()

    overlay = render_padding_overlay(frame, 15)

    assert overlay.shape == frame.shape
    assert int(overlay[5, 50, 0]) > 40
    assert int(overlay[-5, 50, 0]) > 40
    assert np.array_equal(overlay[15:105], frame[15:105])


def test_padding_overlay_covers_frame_when_padding_overflows() -> None:
    overlay = render_padding_overlay(_frame(), 500)

    assert (overlay[:, :, 0] > 40).all()


def test_padding_overlay_without_padding_matches_frame() -> None:
    frame = _frame()

    assert np.array_equal(render_padding_overlay(frame, 0), frame)


def test_composite_selects_by_debug_mode() -> None:
    frame = _frame()
    mask = np.zeros((120, 160), dtype=np.uint8)
    ellipses = [_ellipse()]

    normal = composite(frame, ellipses, mask, padding_pixels=10, debug_mode="normal")
    thresh = composite(frame, ellipses, mask, padding_pixels=10, debug_mode="threshold_overlay")
    padded = composite(frame, ellipses, mask, padding_pixels=10, debug_mode="padding_overlay")

    assert np.array_equal(normal, draw_ellipses(frame, ellipses))
    assert np.array_equal(thresh, render_threshold_overlay(mask))
    assert np.array_equal(padded, render_padding_overlay(frame, 10))
    for image in (normal, thresh, padded):
        assert image.shape == frame.shape


def test_composite_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError):
        composite(_frame(), [], np.zeros((120, 160), dtype=np.uint8), 0, debug_mode="mask")


def test_rotated_ellipse_outline_follows_angle() -> None:
    ellipse = Ellipse(80.0, 60.0, 60.0, 10.0, math.pi / 2)

    canvas = draw_ellipses(_frame(), [ellipse])

    # Major axis vertical: ends near (80, 30) and (80, 90), nothing drawn at (110, 60)
    assert _has_color(canvas[27:34, 78:83], OUTLINE_COLOR)
    assert _has_color(canvas[87:94, 78:83], OUTLINE_COLOR)
    assert tuple(int(v) for v in canvas[60, 110]) == (40, 40, 40)
