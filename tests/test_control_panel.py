from __future__ import annotations

import numpy as np
import pytest
from fastapi.testclient import TestClient

from ftir_touchpad.control import ControlState
from ftir_touchpad.control_panel import create_control_panel_app
from ftir_touchpad.models import TouchPadConfig
from ftir_touchpad.pipeline import TouchPadPipeline, detect_touches
from ftir_touchpad.synthetic import SyntheticTouchConfig, generate_touch_frame


def _frame() -> np.ndarray:
    return generate_touch_frame(
        SyntheticTouchConfig(width=320, height=240, blobs=((160.0, 120.0, 24.0, 24.0, 0.0),))
    ).frame


def test_control_panel_config_roundtrip_and_display() -> None:
    state = ControlState(TouchPadConfig(threshold_value=120))
    app = create_control_panel_app(state)

    with TestClient(app) as client:
        health = client.get("/health")
        assert health.status_code == 200
        assert health.json()["status"] == "ok"

        config = client.get("/api/v1/config")
        assert config.status_code == 200
        assert config.json()["threshold_value"] == 120
        assert config.json()["debug_mode"] == "normal"

        touches = client.get("/api/v1/touches")
        assert touches.status_code == 200
        assert touches.json() == {
            "frame_index": 0,
            "frame_width": None,
            "frame_height": None,
            "ellipses": [],
        }

        missing = client.get("/api/v1/display.png")
        assert missing.status_code == 404

        state.publish(detect_touches(_frame(), state.snapshot()))

        touches = client.get("/api/v1/touches")
        body = touches.json()
        assert body["frame_index"] == 1
        assert body["frame_width"] == 320
        assert body["frame_height"] == 240
        assert len(body["ellipses"]) == 1
        assert body["ellipses"][0]["center_x"] == pytest.approx(160.0, abs=1.0)

        display = client.get("/api/v1/display.png")
        assert display.status_code == 200
        assert display.headers["content-type"] == "image/png"
        assert display.content.startswith(b"\x89PNG")


def test_control_panel_stores_raw_values_and_pipeline_clamps() -> None:
    state = ControlState()
    app = create_control_panel_app(state)

    with TestClient(app) as client:
        updated = client.patch(
            "/api/v1/config",
            json={"threshold_value": 300, "padding_pixels": -4, "debug_mode": "padding_overlay"},
        )
        assert updated.status_code == 200
        assert updated.json()["threshold_value"] == 300
        assert updated.json()["debug_mode"] == "padding_overlay"

    result = TouchPadPipeline().process(_frame(), state.snapshot())
    assert result.config.threshold_value == 255
    assert result.config.padding_pixels == 0


def test_control_panel_accepts_non_finite_values_without_failing() -> None:
    state = ControlState(TouchPadConfig(threshold_value=140, padding_pixels=6))
    app = create_control_panel_app(state)
    headers = {"content-type": "application/json"}

    with TestClient(app) as client:
        huge = client.patch("/api/v1/config", content='{"threshold_value": 1e400}', headers=headers)
        assert huge.status_code == 200

        nan = client.patch("/api/v1/config", content='{"padding_pixels": NaN}', headers=headers)
        assert nan.status_code == 200
        assert nan.json()["padding_pixels"] == 6

    result = TouchPadPipeline().process(_frame(), state.snapshot())
    assert result.config.threshold_value == 255
    assert result.config.padding_pixels == 6


def test_control_panel_rejects_unknown_debug_mode() -> None:
    state = ControlState()
    app = create_control_panel_app(state)

    with TestClient(app) as client:
        response = client.patch("/api/v1/config", json={"debug_mode": "mask"})
        assert response.status_code == 422

    assert state.snapshot().debug_mode == "normal"


def test_skipped_frames_are_not_published() -> None:
    state = ControlState()
    pipeline = TouchPadPipeline()

    state.publish(pipeline.process(None))

    assert state.latest() == (0, None)


def test_control_state_rejects_unknown_fields() -> None:
    with pytest.raises(ValueError):
        ControlState().update(exposure=12)
