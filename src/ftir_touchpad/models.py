from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Literal

DebugMode = Literal["normal", "threshold_overlay", "padding_overlay"]
DEBUG_MODES: tuple[str, ...] = ("normal", "threshold_overlay", "padding_overlay")

DEFAULT_THRESHOLD = 128
DEFAULT_PADDING = 0


@dataclass(frozen=True)
class TouchPadConfig:
    """Per-frame configuration snapshot for the blob detection pipeline."""

    threshold_value: int = DEFAULT_THRESHOLD
    padding_pixels: int = DEFAULT_PADDING
    blur_kernel_size: int = 7
    blur_sigma: float = 1.5
    morph_kernel_size: int = 10
    debug_mode: DebugMode = "normal"

    def validate(self) -> None:
        if self.blur_kernel_size <= 0 or self.blur_kernel_size % 2 == 0:
            raise ValueError("blur_kernel_size must be a positive odd integer")
        if not math.isfinite(self.blur_sigma) or self.blur_sigma <= 0:
            raise ValueError("blur_sigma must be positive")
        if self.morph_kernel_size <= 0:
            raise ValueError("morph_kernel_size must be positive")
        if self.debug_mode not in DEBUG_MODES:
            raise ValueError(
                f"debug_mode must be one of {', '.join(DEBUG_MODES)} (got {self.debug_mode!r})"
            )

    def clamped(self) -> TouchPadConfig:
        """Return a copy with operator-facing values forced into range.

        Threshold is rounded and clamped to [0, 255]; negative padding becomes 0.
        Padding that does not fit the frame is resolved by the segmenter, which
        knows the frame height.
        """
        threshold = coerce_int(self.threshold_value, default=DEFAULT_THRESHOLD)
        padding = coerce_int(self.padding_pixels, default=DEFAULT_PADDING)
        return replace(
            self,
            threshold_value=min(max(threshold, 0), 255),
            padding_pixels=max(padding, 0),
        )


@dataclass(frozen=True)
class Ellipse:
    """Fitted blob ellipse.

    Axis lengths are full lengths (diameters) with ``major_axis >= minor_axis``.
    ``angle_rad`` is the orientation of the major axis in ``[0, pi)``.
    """

    center_x: float
    center_y: float
    major_axis: float
    minor_axis: float
    angle_rad: float

    @property
    def center(self) -> tuple[float, float]:
        return self.center_x, self.center_y

    def to_dict(self) -> dict[str, float]:
        return {
            "center_x": self.center_x,
            "center_y": self.center_y,
            "major_axis": self.major_axis,
            "minor_axis": self.minor_axis,
            "angle_rad": self.angle_rad,
        }


def coerce_int(value: object, default: int) -> int:
    """Round to int, bounding infinities and mapping NaN or junk to ``default``."""
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return int(round(min(max(number, -1e9), 1e9)))
