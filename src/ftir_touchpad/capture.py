from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

import cv2
import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_CAMERA_INDEX = 1

Notifier = Callable[[str], None]


class VideoFrameSource:
    """Pull-based frame source over ``cv2.VideoCapture``.

    ``source`` is a camera index or a path to a video file. A device that cannot
    be opened is reported once, through the log and the optional ``notify``
    callback, after which :meth:`read` keeps returning ``None``.
    """

    def __init__(
        self,
        source: int | str | Path = DEFAULT_CAMERA_INDEX,
        api_preference: int | None = None,
        width: int | None = None,
        height: int | None = None,
        notify: Notifier | None = None,
    ) -> None:
        self.source = str(source) if isinstance(source, Path) else source
        self.api_preference = api_preference
        self.width = width
        self.height = height
        self.notify = notify
        self._capture: cv2.VideoCapture | None = None
        self._opened = False
        self._failure_reported = False

    @property
    def available(self) -> bool:
        return self._capture is not None and self._opened

    def open(self) -> bool:
        if self.available:
            return True

        try:
            if self.api_preference is None:
                capture = cv2.VideoCapture(self.source)
            else:
                capture = cv2.VideoCapture(self.source, self.api_preference)
        except cv2.error as error:
            self._report_failure(f"Unable to access camera {self.source!r}: {error}")
            return False

        if not capture.isOpened():
            capture.release()
            self._report_failure(f"Unable to access camera {self.source!r}")
            return False

        if self.width:
            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        if self.height:
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

        self._capture = capture
        self._opened = True
        logger.info("Opened frame source %r", self.source)
        return True

    def read(self) -> np.ndarray | None:
        """Next frame, or ``None`` when nothing is available this cycle."""
        if not self.available:
            return None

        ok, frame = self._capture.read()
        if not ok or frame is None or frame.size == 0:
            return None
        return frame

    def close(self) -> None:
        if self._capture is not None:
            self._capture.release()
        self._capture = None
        self._opened = False

    def _report_failure(self, message: str) -> None:
        if self._failure_reported:
            return
        self._failure_reported = True
        logger.error(message)
        if self.notify is not None:
            self.notify(message)

    def __enter__(self) -> VideoFrameSource:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ImageFrameSource:
    """Frame source over still images on disk, one image per read."""

    def __init__(self, paths: Iterable[str | Path]) -> None:
        self.paths = [Path(path) for path in paths]
        self._iterator: Iterator[Path] = iter(self.paths)

    def open(self) -> bool:
        missing = [path for path in self.paths if not path.exists()]
        if missing:
            raise FileNotFoundError(missing[0])
        return True

    def read(self) -> np.ndarray | None:
        path = next(self._iterator, None)
        if path is None:
            return None
        frame = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if frame is None:
            logger.warning("Unreadable image skipped: %s", path)
        return frame

    def close(self) -> None:
        self._iterator = iter(())


def load_image(path: str | Path) -> np.ndarray:
    image_path = Path(path)
    if not image_path.exists():
        raise FileNotFoundError(image_path)

    frame = cv2.imread(str(image_path), cv2.IMREAD_COLOR)
    if frame is None:
        raise RuntimeError(f"failed to read image: {image_path}")
    return frame
