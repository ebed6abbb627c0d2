from __future__ import annotations

import logging

from .models import DetectionConfig, PlaybackConfig
from .pipeline import BackgroundSubtractionPipeline, FrameResult
from .video import (
    BACKGROUND_WINDOW,
    BINARY_DIFF_WINDOW,
    DENOISED_DIFF_WINDOW,
    FINAL_WINDOW,
    GRAY_DIFF_WINDOW,
    RAW_WINDOW,
    FrameDisplay,
    FrameSource,
    VideoSourceError,
)

logger = logging.getLogger(__name__)


def show_processing_stages(display: FrameDisplay, result: FrameResult) -> None:
    display.show(RAW_WINDOW, result.raw)
    display.show(GRAY_DIFF_WINDOW, result.gray)
    display.show(BINARY_DIFF_WINDOW, result.binary)
    display.show(DENOISED_DIFF_WINDOW, result.denoised)
    display.show(FINAL_WINDOW, result.final)


def run_playback(
    source: FrameSource,
    display: FrameDisplay,
    config: DetectionConfig | None = None,
    playback: PlaybackConfig | None = None,
) -> int:
    """Step through ``source`` one key press per frame until the exit key.

    The first frame becomes the reference. At end of stream the source is
    rewound to frame 0 and numbering restarts at 1. Returns the number of
    frames processed.
    """

    player_cfg = playback or PlaybackConfig()

    reference = source.read()
    if reference is None:
        raise VideoSourceError("video source returned no reference frame")
    display.show(BACKGROUND_WINDOW, reference)
    pipeline = BackgroundSubtractionPipeline(reference, config)

    frame_number = 1
    frames_since_rewind = 1
    processed = 0
    while True:
        frame = source.read()
        if frame is None:
            if frames_since_rewind == 0:
                raise VideoSourceError("video source returned no frames after rewind")
            logger.info("end of stream after frame %d, rewinding", frame_number)
            source.seek(0)
            frame_number = 0
            frames_since_rewind = 0
            continue

        frames_since_rewind += 1
        frame_number += 1
        result = pipeline.process(frame, frame_number)
        show_processing_stages(display, result)
        processed += 1

        key = display.wait_key(0)
        if key == player_cfg.exit_key:
            return processed
