from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .compose import composite
from .contours import extract_contours
from .fitting import fit_ellipses
from .models import Ellipse, TouchPadConfig
from .morphology import open_mask
from .preprocess import InvalidFrameError, as_bgr_frame, preprocess_frame
from .segment import segment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageMasks:
    """Intermediate masks of one pipeline run."""

    threshold: np.ndarray
    padded: np.ndarray
    cleaned: np.ndarray


@dataclass(frozen=True)
class FrameResult:
    """Output of one frame: detected ellipses and the image to display."""

    ellipses: tuple[Ellipse, ...]
    display: np.ndarray | None
    config: TouchPadConfig
    masks: StageMasks | None = None
    contour_count: int = 0
    skipped_contours: int = 0
    updated: bool = True


def detect_touches(frame: np.ndarray | None, config: TouchPadConfig | None = None) -> FrameResult:
    """Run the full detection pipeline on one frame.

    Pure with respect to its inputs: the same frame and configuration always
    produce the same ellipses and display image. Raises
    :class:`InvalidFrameError` for missing or empty frames.
    """
    cfg = (config or TouchPadConfig()).clamped()
    cfg.validate()

    source = as_bgr_frame(frame)
    blurred = preprocess_frame(source, kernel_size=cfg.blur_kernel_size, sigma=cfg.blur_sigma)
    thresholded, padded = segment(blurred, cfg.threshold_value, cfg.padding_pixels)
    cleaned = open_mask(padded, kernel_size=cfg.morph_kernel_size)
    contours = extract_contours(cleaned)
    ellipses, skipped = fit_ellipses(contours)
    if skipped:
        logger.debug("Skipped %d degenerate contour(s) of %d", skipped, len(contours))

    display = composite(
        source,
        ellipses,
        threshold_mask=thresholded,
        padding_pixels=cfg.padding_pixels,
        debug_mode=cfg.debug_mode,
    )

    return FrameResult(
        ellipses=tuple(ellipses),
        display=display,
        config=cfg,
        masks=StageMasks(threshold=thresholded, padded=padded, cleaned=cleaned),
        contour_count=len(contours),
        skipped_contours=skipped,
    )


class TouchPadPipeline:
    """Frame-by-frame driver that keeps the last display image on screen.

    Empty or invalid frames do not raise; they produce an empty ellipse list
    and leave :attr:`last_display` untouched.
    """

    def __init__(self, config: TouchPadConfig | None = None) -> None:
        self.config = config or TouchPadConfig()
        self.last_display: np.ndarray | None = None
        self.frames_processed = 0
        self.frames_skipped = 0

    def process(self, frame: np.ndarray | None, config: TouchPadConfig | None = None) -> FrameResult:
        cfg = config or self.config
        try:
            result = detect_touches(frame, cfg)
        except InvalidFrameError as error:
            self.frames_skipped += 1
            logger.debug("Frame skipped: %s", error)
            return FrameResult(
                ellipses=(),
                display=self.last_display,
                config=cfg.clamped(),
                updated=False,
            )

        self.frames_processed += 1
        self.last_display = result.display
        return result
