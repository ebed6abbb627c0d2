from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .models import DetectionConfig
from .pipeline import BackgroundSubtractionPipeline, FrameResult
from .video import FrameSource, VideoSourceError


@dataclass(frozen=True)
class ScanRecord:
    """Per-frame detection outcome of a headless scan."""

    frame_number: int
    processing_ms: int
    detected: bool
    area: float | None
    box: tuple[int, int, int, int] | None
    center: tuple[int, int] | None


@dataclass(frozen=True)
class ScanSummary:
    frames_processed: int
    frames_with_detection: int
    detection_ratio: float
    mean_processing_ms: float
    max_area: float | None


def record_from_result(result: FrameResult) -> ScanRecord:
    detection = result.detection
    if detection is None:
        return ScanRecord(
            frame_number=result.frame_number,
            processing_ms=result.processing_ms,
            detected=False,
            area=None,
            box=None,
            center=None,
        )
    return ScanRecord(
        frame_number=result.frame_number,
        processing_ms=result.processing_ms,
        detected=True,
        area=detection.area,
        box=detection.box,
        center=detection.center,
    )


def scan_source(source: FrameSource, config: DetectionConfig | None = None) -> list[ScanRecord]:
    """Process every frame after the reference once, without display or rewind."""

    reference = source.read()
    if reference is None:
        raise VideoSourceError("video source returned no reference frame")
    pipeline = BackgroundSubtractionPipeline(reference, config)

    records: list[ScanRecord] = []
    frame_number = 1
    while True:
        frame = source.read()
        if frame is None:
            break
        frame_number += 1
        records.append(record_from_result(pipeline.process(frame, frame_number)))
    return records


def summarize_scan(records: Sequence[ScanRecord]) -> ScanSummary:
    if not records:
        return ScanSummary(
            frames_processed=0,
            frames_with_detection=0,
            detection_ratio=0.0,
            mean_processing_ms=0.0,
            max_area=None,
        )

    detected = [record for record in records if record.detected]
    areas = [record.area for record in detected if record.area is not None]
    return ScanSummary(
        frames_processed=len(records),
        frames_with_detection=len(detected),
        detection_ratio=len(detected) / len(records),
        mean_processing_ms=sum(record.processing_ms for record in records) / len(records),
        max_area=max(areas) if areas else None,
    )
