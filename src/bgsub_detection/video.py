from __future__ import annotations

from pathlib import Path
from typing import Protocol

import cv2
import numpy as np

BACKGROUND_WINDOW = "Background Frame"
RAW_WINDOW = "Raw Frame"
GRAY_DIFF_WINDOW = "Grayscale Difference Frame"
BINARY_DIFF_WINDOW = "Binary Difference Frame"
DENOISED_DIFF_WINDOW = "Denoised Difference Frame"
FINAL_WINDOW = "Final Frame"

WINDOW_NAMES = (
    BACKGROUND_WINDOW,
    RAW_WINDOW,
    GRAY_DIFF_WINDOW,
    BINARY_DIFF_WINDOW,
    DENOISED_DIFF_WINDOW,
    FINAL_WINDOW,
)


class VideoSourceError(RuntimeError):
    """Raised when a video source cannot deliver frames."""


class FrameSource(Protocol):
    """Sequential colour frame provider that can be rewound."""

    def is_open(self) -> bool:
        ...

    def read(self) -> np.ndarray | None:
        ...

    def seek(self, frame_index: int) -> None:
        ...

    def release(self) -> None:
        ...


class FrameDisplay(Protocol):
    """Named image outputs plus a blocking key wait."""

    def show(self, name: str, image: np.ndarray) -> None:
        ...

    def wait_key(self, delay_ms: int = 0) -> int:
        ...

    def close(self) -> None:
        ...


class VideoSource:
    """Thin wrapper over ``cv2.VideoCapture`` for a video file."""

    def __init__(self, video_path: str | Path) -> None:
        self.path = Path(video_path)
        self._capture = cv2.VideoCapture(str(self.path))

    def __enter__(self) -> VideoSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def is_open(self) -> bool:
        return bool(self._capture.isOpened())

    def read(self) -> np.ndarray | None:
        ok, frame = self._capture.read()
        if not ok:
            return None
        return frame

    def seek(self, frame_index: int) -> None:
        self._capture.set(cv2.CAP_PROP_POS_FRAMES, frame_index)

    def release(self) -> None:
        self._capture.release()


class WindowDisplay:
    """HighGUI windows; ``wait_key`` returns the low byte of the key code."""

    def __enter__(self) -> WindowDisplay:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def show(self, name: str, image: np.ndarray) -> None:
        cv2.imshow(name, image)

    def wait_key(self, delay_ms: int = 0) -> int:
        key = cv2.waitKey(delay_ms)
        if key < 0:
            return key
        return key & 0xFF

    def close(self) -> None:
        cv2.destroyAllWindows()


def open_video_source(video_path: str | Path) -> VideoSource:
    return VideoSource(video_path)
