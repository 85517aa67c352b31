from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from .models import TouchPadConfig
from .pipeline import FrameResult, TouchPadPipeline

logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    def read(self) -> np.ndarray | None: ...


@dataclass(frozen=True)
class FrameLoopConfig:
    """Cadence and stop conditions for the capture loop."""

    interval_s: float = 0.030
    max_frames: int | None = None
    max_idle_cycles: int | None = None


@dataclass(frozen=True)
class FrameLoopStats:
    ticks: int
    processed: int
    skipped: int


def run_frame_loop(
    source: FrameSource,
    config_provider: Callable[[], TouchPadConfig],
    display_sink: Callable[[np.ndarray], None],
    pipeline: TouchPadPipeline | None = None,
    config: FrameLoopConfig | None = None,
    result_sink: Callable[[FrameResult], None] | None = None,
    should_stop: Callable[[], bool] | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> FrameLoopStats:
    """Pull frames at a fixed cadence and run each one through the pipeline.

    Every tick requests one frame, takes a single configuration snapshot and
    runs the whole pipeline before the next tick; display images are handed to
    ``display_sink`` in capture order. Ticks without a usable frame are skipped
    and leave the sink untouched.
    """
    cfg = config or FrameLoopConfig()
    if cfg.interval_s < 0:
        raise ValueError("interval_s must be non-negative")

    runner = pipeline or TouchPadPipeline()
    ticks = 0
    processed = 0
    skipped = 0
    idle_cycles = 0

    while True:
        if should_stop is not None and should_stop():
            break
        if cfg.max_frames is not None and processed >= cfg.max_frames:
            break
        if cfg.max_idle_cycles is not None and idle_cycles >= cfg.max_idle_cycles:
            logger.info("No frames for %d cycles; stopping", idle_cycles)
            break

        started = clock()
        ticks += 1

        frame = source.read()
        snapshot = config_provider()
        result = runner.process(frame, snapshot)

        if result.updated and result.display is not None:
            processed += 1
            idle_cycles = 0
            display_sink(result.display)
            if result_sink is not None:
                result_sink(result)
        else:
            skipped += 1
            idle_cycles += 1

        remaining = cfg.interval_s - (clock() - started)
        if remaining > 0:
            sleep(remaining)

    return FrameLoopStats(ticks=ticks, processed=processed, skipped=skipped)
