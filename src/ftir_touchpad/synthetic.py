from __future__ import annotations

from dataclasses import dataclass, field

import cv2
import numpy as np

from .models import Ellipse


@dataclass(frozen=True)
class TouchScenario:
    """Noise and artifact envelope for a simulated FTIR camera."""

    sensor_noise_sigma: float
    speck_count: int
    speck_size_px: int
    edge_bleed_count: int
    edge_bleed_rows: int


@dataclass(frozen=True)
class SyntheticTouchConfig:
    """Configuration for a synthetic FTIR frame.

    ``blobs`` holds ``(center_x, center_y, radius_x, radius_y, angle_deg)``
    tuples; a circle has equal radii.
    """

    width: int = 640
    height: int = 480
    background: int = 20
    blob_intensity: int = 220
    blobs: tuple[tuple[float, float, float, float, float], ...] = field(
        default_factory=lambda: ((320.0, 240.0, 25.0, 25.0, 0.0),)
    )
    scenario: str = "clean_glass"
    seed: int = 42


@dataclass(frozen=True)
class SyntheticTouchFrame:
    """Synthetic BGR frame with the ground-truth blob ellipses."""

    frame: np.ndarray
    blobs: tuple[Ellipse, ...]


TOUCH_SCENARIOS: dict[str, TouchScenario] = {
    "clean_glass": TouchScenario(
        sensor_noise_sigma=0.0,
        speck_count=0,
        speck_size_px=0,
        edge_bleed_count=0,
        edge_bleed_rows=0,
    ),
    "noisy_sensor": TouchScenario(
        sensor_noise_sigma=6.0,
        speck_count=25,
        speck_size_px=3,
        edge_bleed_count=0,
        edge_bleed_rows=0,
    ),
    "edge_bleed": TouchScenario(
        sensor_noise_sigma=3.0,
        speck_count=0,
        speck_size_px=0,
        edge_bleed_count=8,
        edge_bleed_rows=16,
    ),
}


def available_scenarios() -> tuple[str, ...]:
    return tuple(sorted(TOUCH_SCENARIOS))


def _blob_ground_truth(blob: tuple[float, float, float, float, float]) -> Ellipse:
    center_x, center_y, radius_x, radius_y, angle_deg = blob
    if radius_x >= radius_y:
        major, minor, angle = 2.0 * radius_x, 2.0 * radius_y, angle_deg
    else:
        major, minor, angle = 2.0 * radius_y, 2.0 * radius_x, angle_deg + 90.0
    return Ellipse(
        center_x=float(center_x),
        center_y=float(center_y),
        major_axis=float(major),
        minor_axis=float(minor),
        angle_rad=float(np.deg2rad(angle) % np.pi),
    )


def generate_touch_frame(config: SyntheticTouchConfig | None = None) -> SyntheticTouchFrame:
    """Render bright elliptical touch blobs on a dark FTIR background."""
    cfg = config or SyntheticTouchConfig()
    if cfg.width <= 0 or cfg.height <= 0:
        raise ValueError("width and height must be positive")
    if not 0 <= cfg.background <= 255 or not 0 <= cfg.blob_intensity <= 255:
        raise ValueError("intensities must be within [0, 255]")
    if cfg.scenario not in TOUCH_SCENARIOS:
        raise ValueError(f"Unknown scenario '{cfg.scenario}'. Available: {', '.join(available_scenarios())}")

    scenario = TOUCH_SCENARIOS[cfg.scenario]
    rng = np.random.default_rng(cfg.seed)
    gray = np.full((cfg.height, cfg.width), cfg.background, dtype=np.uint8)

    for center_x, center_y, radius_x, radius_y, angle_deg in cfg.blobs:
        if radius_x <= 0 or radius_y <= 0:
            raise ValueError("blob radii must be positive")
        cv2.ellipse(
            gray,
            (int(round(center_x)), int(round(center_y))),
            (int(round(radius_x)), int(round(radius_y))),
            float(angle_deg),
            0.0,
            360.0,
            int(cfg.blob_intensity),
            -1,
        )

    for _ in range(scenario.speck_count):
        x = int(rng.integers(0, max(cfg.width - scenario.speck_size_px, 1)))
        y = int(rng.integers(0, max(cfg.height - scenario.speck_size_px, 1)))
        gray[y : y + scenario.speck_size_px, x : x + scenario.speck_size_px] = cfg.blob_intensity

    for _ in range(scenario.edge_bleed_count):
        x = int(rng.integers(0, cfg.width))
        rows = min(scenario.edge_bleed_rows, cfg.height)
        radius = max(rows // 2, 1)
        y = radius if rng.random() < 0.5 else cfg.height - radius - 1
        cv2.circle(gray, (x, y), radius, int(cfg.blob_intensity), -1)

    if scenario.sensor_noise_sigma > 0:
        noise = rng.normal(0.0, scenario.sensor_noise_sigma, size=gray.shape)
        gray = np.clip(gray.astype(np.float64) + noise, 0, 255).astype(np.uint8)

    frame = cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)
    return SyntheticTouchFrame(
        frame=frame,
        blobs=tuple(_blob_ground_truth(blob) for blob in cfg.blobs),
    )
