from __future__ import annotations

import numpy as np
import pytest

from bgsub_detection.models import DetectionConfig
from bgsub_detection.motion_mask import FrameShapeMismatchError
from bgsub_detection.pipeline import BackgroundSubtractionPipeline
from bgsub_detection.synthetic import blank_frame, paint_block


def test_white_block_on_black_reference_end_to_end() -> None:
    reference = blank_frame(320, 240)
    current = paint_block(reference, 10, 10, 100, 60)
    pipeline = BackgroundSubtractionPipeline(
        reference, DetectionConfig(threshold=50, erode_iterations=3, dilate_iterations=3)
    )

    result = pipeline.process(current, frame_number=2)

    assert result.detected is True
    assert result.frame_number == 2
    assert result.detection.box == (10, 10, 100, 60)
    assert result.detection.center == (60, 40)
    assert result.detection.area == 99.0 * 59.0
    assert result.processing_ms >= 0
    assert np.count_nonzero(result.denoised) == 6000


def test_static_scene_has_no_detection_and_leaves_raw_untouched() -> None:
    reference = paint_block(blank_frame(160, 120, (40, 40, 40)), 30, 30, 20, 20, (90, 10, 10))
    current = reference.copy()
    pipeline = BackgroundSubtractionPipeline(reference)

    result = pipeline.process(current, frame_number=5)

    assert result.detection is None
    assert np.array_equal(current, reference)
    assert not np.array_equal(result.final, current)
    assert np.array_equal(result.final[60:], current[60:])


def test_reference_is_copied_and_read_only() -> None:
    reference = blank_frame(80, 60)
    pipeline = BackgroundSubtractionPipeline(reference)

    reference[:, :] = 255

    assert not pipeline.reference.any()
    assert pipeline.reference.flags.writeable is False
    assert pipeline.frame_shape == (60, 80, 3)


def test_mismatched_frame_is_rejected_before_drawing() -> None:
    reference = blank_frame(80, 60)
    pipeline = BackgroundSubtractionPipeline(reference)
    pipeline.process(paint_block(reference, 10, 10, 30, 20), frame_number=2)
    final_before = pipeline.buffers.final.copy()

    with pytest.raises(FrameShapeMismatchError):
        pipeline.process(blank_frame(60, 80), frame_number=3)

    assert np.array_equal(pipeline.buffers.final, final_before)


def test_buffers_are_reused_between_frames() -> None:
    reference = blank_frame(100, 80)
    pipeline = BackgroundSubtractionPipeline(reference)

    first = pipeline.process(paint_block(reference, 10, 10, 30, 30), frame_number=2)
    second = pipeline.process(paint_block(reference, 50, 40, 30, 30), frame_number=3)

    assert first.final is second.final
    assert second.detection.box == (50, 40, 30, 30)


def test_grayscale_reference_is_rejected() -> None:
    with pytest.raises(ValueError):
        BackgroundSubtractionPipeline(np.zeros((20, 20), dtype=np.uint8))
