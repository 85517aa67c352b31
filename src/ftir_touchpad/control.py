from __future__ import annotations

import threading
from dataclasses import fields, replace

from .models import TouchPadConfig
from .pipeline import FrameResult

_CONFIG_FIELDS = {field.name for field in fields(TouchPadConfig)}


class ControlState:
    """Operator-facing settings and the latest published frame.

    The settings play the role of the threshold/padding sliders and debug
    checkboxes. Writers may update them at any time; the frame loop reads one
    immutable snapshot per frame, so a change never lands halfway through a
    frame.
    """

    def __init__(self, config: TouchPadConfig | None = None) -> None:
        self._lock = threading.Lock()
        self._config = config or TouchPadConfig()
        self._latest: FrameResult | None = None
        self._frame_index = 0

    def snapshot(self) -> TouchPadConfig:
        with self._lock:
            return self._config

    def update(self, **changes: object) -> TouchPadConfig:
        unknown = set(changes) - _CONFIG_FIELDS
        if unknown:
            raise ValueError(f"unknown configuration fields: {', '.join(sorted(unknown))}")

        with self._lock:
            candidate = replace(self._config, **changes)
            candidate.validate()
            self._config = candidate
            return candidate

    def publish(self, result: FrameResult) -> None:
        if not result.updated:
            return
        with self._lock:
            self._latest = result
            self._frame_index += 1

    def latest(self) -> tuple[int, FrameResult | None]:
        with self._lock:
            return self._frame_index, self._latest
