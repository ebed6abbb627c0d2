from __future__ import annotations

from dataclasses import dataclass

import cv2
import numpy as np

from .models import DetectionConfig

_KERNEL_SHAPES = {
    "rect": cv2.MORPH_RECT,
    "cross": cv2.MORPH_CROSS,
    "ellipse": cv2.MORPH_ELLIPSE,
}


class FrameShapeMismatchError(ValueError):
    """Raised when a frame does not match the reference frame layout."""


@dataclass(frozen=True)
class MotionMask:
    """Denoised motion mask plus the intermediate frames that produced it."""

    mask: np.ndarray
    diff: np.ndarray
    gray: np.ndarray
    binary: np.ndarray

    @property
    def changed_pixels(self) -> int:
        return int(np.count_nonzero(self.mask))


class FrameBuffers:
    """Scratch buffers reused across frames, one per named stage.

    Buffers are reallocated only when the colour frame shape changes, so
    arrays handed out by one call are overwritten by the next call that
    shares the pool.
    """

    def __init__(self) -> None:
        self.shape: tuple[int, ...] | None = None
        self.diff = np.empty((0, 0, 3), dtype=np.uint8)
        self.gray = np.empty((0, 0), dtype=np.uint8)
        self.binary = np.empty((0, 0), dtype=np.uint8)
        self.denoised = np.empty((0, 0), dtype=np.uint8)
        self.final = np.empty((0, 0, 3), dtype=np.uint8)

    def ensure(self, shape: tuple[int, ...]) -> None:
        if self.shape == shape:
            return
        height, width = shape[:2]
        self.diff = np.zeros(shape, dtype=np.uint8)
        self.gray = np.zeros((height, width), dtype=np.uint8)
        self.binary = np.zeros((height, width), dtype=np.uint8)
        self.denoised = np.zeros((height, width), dtype=np.uint8)
        self.final = np.zeros(shape, dtype=np.uint8)
        self.shape = shape


def validate_color_frame(frame: np.ndarray, name: str) -> None:
    if frame is None:
        raise ValueError(f"{name} frame is missing")
    if frame.dtype != np.uint8:
        raise ValueError(f"{name} frame must be uint8, got {frame.dtype}")
    if frame.ndim != 3 or frame.shape[2] != 3:
        raise ValueError(f"{name} frame must have shape (H, W, 3), got {frame.shape}")


def check_matching_frames(reference: np.ndarray, current: np.ndarray) -> None:
    if reference.shape != current.shape or reference.dtype != current.dtype:
        raise FrameShapeMismatchError(
            f"current frame {current.shape}/{current.dtype} does not match "
            f"reference frame {reference.shape}/{reference.dtype}"
        )


def structuring_element(config: DetectionConfig) -> np.ndarray:
    size = config.kernel_size
    return cv2.getStructuringElement(_KERNEL_SHAPES[config.kernel_shape], (size, size))


def compute_motion_mask(
    reference: np.ndarray,
    current: np.ndarray,
    config: DetectionConfig | None = None,
    buffers: FrameBuffers | None = None,
) -> MotionMask:
    """Difference two BGR frames and turn the change into a denoised binary mask."""

    cfg = config or DetectionConfig()
    validate_color_frame(reference, "reference")
    validate_color_frame(current, "current")
    check_matching_frames(reference, current)

    pool = buffers or FrameBuffers()
    pool.ensure(reference.shape)

    diff = cv2.absdiff(reference, current, dst=pool.diff)
    gray = cv2.cvtColor(diff, cv2.COLOR_BGR2GRAY, dst=pool.gray)
    _, binary = cv2.threshold(gray, cfg.threshold, 255, cv2.THRESH_BINARY, dst=pool.binary)

    kernel = structuring_element(cfg)
    denoised = cv2.erode(binary, kernel, dst=pool.denoised, iterations=cfg.erode_iterations)
    denoised = cv2.dilate(
        denoised, kernel, dst=pool.denoised, iterations=cfg.effective_dilate_iterations
    )

    return MotionMask(mask=denoised, diff=diff, gray=gray, binary=binary)
