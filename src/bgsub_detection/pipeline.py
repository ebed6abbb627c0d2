from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from .models import DetectionConfig
from .motion_mask import (
    FrameBuffers,
    check_matching_frames,
    compute_motion_mask,
    validate_color_frame,
)
from .overlay import write_frame_info
from .selection import Detection, select_and_annotate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameResult:
    """Everything one pipeline run produced for a single frame."""

    frame_number: int
    detection: Detection | None
    processing_ms: int
    raw: np.ndarray
    diff: np.ndarray
    gray: np.ndarray
    binary: np.ndarray
    denoised: np.ndarray
    final: np.ndarray

    @property
    def detected(self) -> bool:
        return self.detection is not None


class BackgroundSubtractionPipeline:
    """Static background subtraction: every frame is compared to one reference."""

    def __init__(self, reference: np.ndarray, config: DetectionConfig | None = None) -> None:
        validate_color_frame(reference, "reference")
        self.config = config or DetectionConfig()
        self.reference = reference.copy()
        self.reference.flags.writeable = False
        self.buffers = FrameBuffers()
        self.buffers.ensure(self.reference.shape)

    @property
    def frame_shape(self) -> tuple[int, ...]:
        return self.reference.shape

    def process(self, current: np.ndarray, frame_number: int) -> FrameResult:
        validate_color_frame(current, "current")
        check_matching_frames(self.reference, current)

        started = time.perf_counter()
        motion = compute_motion_mask(self.reference, current, self.config, self.buffers)
        final = self.buffers.final
        np.copyto(final, current)
        detection = select_and_annotate(motion.mask, final, self.config)
        elapsed_ms = int((time.perf_counter() - started) * 1000)

        write_frame_info(final, frame_number, elapsed_ms, self.config)

        if detection is None:
            logger.debug("frame %d: no motion (%d ms)", frame_number, elapsed_ms)
        else:
            logger.debug(
                "frame %d: area=%s box=%s center=%s (%d ms)",
                frame_number,
                detection.area,
                detection.box,
                detection.center,
                elapsed_ms,
            )

        return FrameResult(
            frame_number=frame_number,
            detection=detection,
            processing_ms=elapsed_ms,
            raw=current,
            diff=motion.diff,
            gray=motion.gray,
            binary=motion.binary,
            denoised=motion.mask,
            final=final,
        )
