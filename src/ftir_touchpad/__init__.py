"""Finger blob detection for FTIR touch surfaces."""

from .capture import ImageFrameSource, VideoFrameSource, load_image
from .compose import composite, draw_ellipses, render_padding_overlay, render_threshold_overlay
from .contours import contour_area, extract_contours
from .control import ControlState
from .fitting import MIN_FIT_POINTS, fit_ellipse, fit_ellipses, normalize_ellipse
from .loop import FrameLoopConfig, FrameLoopStats, run_frame_loop
from .models import DEBUG_MODES, DebugMode, Ellipse, TouchPadConfig
from .morphology import open_mask, structuring_element
from .pipeline import FrameResult, StageMasks, TouchPadPipeline, detect_touches
from .preprocess import InvalidFrameError, as_bgr_frame, gaussian_blur, preprocess_frame, to_grayscale
from .segment import apply_vertical_padding, resolve_padding, segment, threshold_mask
from .synthetic import (
    TOUCH_SCENARIOS,
    SyntheticTouchConfig,
    SyntheticTouchFrame,
    TouchScenario,
    available_scenarios,
    generate_touch_frame,
)

__all__ = [
    "TouchPadConfig",
    "DebugMode",
    "DEBUG_MODES",
    "Ellipse",
    "InvalidFrameError",
    "as_bgr_frame",
    "to_grayscale",
    "gaussian_blur",
    "preprocess_frame",
    "threshold_mask",
    "apply_vertical_padding",
    "resolve_padding",
    "segment",
    "structuring_element",
    "open_mask",
    "extract_contours",
    "contour_area",
    "MIN_FIT_POINTS",
    "fit_ellipse",
    "fit_ellipses",
    "normalize_ellipse",
    "composite",
    "draw_ellipses",
    "render_threshold_overlay",
    "render_padding_overlay",
    "StageMasks",
    "FrameResult",
    "detect_touches",
    "TouchPadPipeline",
    "VideoFrameSource",
    "ImageFrameSource",
    "load_image",
    "FrameLoopConfig",
    "FrameLoopStats",
    "run_frame_loop",
    "ControlState",
    "TouchScenario",
    "SyntheticTouchConfig",
    "SyntheticTouchFrame",
    "TOUCH_SCENARIOS",
    "available_scenarios",
    "generate_touch_frame",
]

try:
    from .control_panel import create_control_panel_app  # noqa: F401
except ModuleNotFoundError:
    # HTTP control panel dependencies (fastapi) are optional.
    pass
else:
    __all__.append("create_control_panel_app")
