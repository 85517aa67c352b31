from __future__ import annotations

import cv2
from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from .control import ControlState
from .models import DebugMode, TouchPadConfig, coerce_int


class ConfigView(BaseModel):
    threshold_value: int
    padding_pixels: int
    blur_kernel_size: int
    blur_sigma: float
    morph_kernel_size: int
    debug_mode: DebugMode


class ConfigUpdate(BaseModel):
    # No range checks here: the pipeline clamps operator values per frame.
    threshold_value: float | None = None
    padding_pixels: float | None = None
    debug_mode: DebugMode | None = None


class EllipseView(BaseModel):
    center_x: float
    center_y: float
    major_axis: float
    minor_axis: float
    angle_rad: float


class TouchesView(BaseModel):
    frame_index: int
    frame_width: int | None = None
    frame_height: int | None = None
    ellipses: list[EllipseView]


def _config_view(config: TouchPadConfig) -> ConfigView:
    return ConfigView(
        threshold_value=config.threshold_value,
        padding_pixels=config.padding_pixels,
        blur_kernel_size=config.blur_kernel_size,
        blur_sigma=config.blur_sigma,
        morph_kernel_size=config.morph_kernel_size,
        debug_mode=config.debug_mode,
    )


def create_control_panel_app(state: ControlState) -> FastAPI:
    """HTTP stand-in for the operator window: sliders, debug toggles and display."""
    app = FastAPI(
        title="FTIR Touchpad Control Panel",
        version="0.1.0",
        description="Tune blob detection and inspect the latest processed frame.",
    )
    app.state.control = state

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/v1/config", response_model=ConfigView)
    def get_config() -> ConfigView:
        return _config_view(state.snapshot())

    @app.patch("/api/v1/config", response_model=ConfigView)
    def patch_config(payload: ConfigUpdate) -> ConfigView:
        current = state.snapshot()
        changes: dict[str, object] = {}
        # NaN keeps the current value; infinities are bounded and later clamped.
        if payload.threshold_value is not None:
            changes["threshold_value"] = coerce_int(
                payload.threshold_value, default=current.threshold_value
            )
        if payload.padding_pixels is not None:
            changes["padding_pixels"] = coerce_int(
                payload.padding_pixels, default=current.padding_pixels
            )
        if payload.debug_mode is not None:
            changes["debug_mode"] = payload.debug_mode
        return _config_view(state.update(**changes))

    @app.get("/api/v1/touches", response_model=TouchesView)
    def get_touches() -> TouchesView:
        frame_index, result = state.latest()
        if result is None:
            return TouchesView(frame_index=frame_index, ellipses=[])

        height = width = None
        if result.display is not None:
            height, width = result.display.shape[:2]
        return TouchesView(
            frame_index=frame_index,
            frame_width=width,
            frame_height=height,
            ellipses=[EllipseView(**ellipse.to_dict()) for ellipse in result.ellipses],
        )

    @app.get("/api/v1/display.png")
    def get_display() -> Response:
        _, result = state.latest()
        if result is None or result.display is None:
            raise HTTPException(status_code=404, detail="no frame has been processed yet")

        ok, encoded = cv2.imencode(".png", result.display)
        if not ok:
            raise HTTPException(status_code=500, detail="failed to encode display image")
        return Response(content=encoded.tobytes(), media_type="image/png")

    return app
