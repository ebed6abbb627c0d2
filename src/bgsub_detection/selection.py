from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import cv2
import numpy as np

from .models import DetectionConfig
from .overlay import draw_text_lines


@dataclass(frozen=True)
class Detection:
    """Dominant connected region of change in one frame."""

    contour: np.ndarray
    area: float
    box: tuple[int, int, int, int]
    center: tuple[int, int]

    @property
    def right(self) -> int:
        x, _, w, _ = self.box
        return x + w


def find_contours(mask: np.ndarray) -> list[np.ndarray]:
    contours, _ = cv2.findContours(mask, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)
    return list(contours)


def select_largest_contour(contours: Sequence[np.ndarray]) -> tuple[int, float] | None:
    """Return (index, area) of the largest contour; the first one wins ties."""

    if not contours:
        return None

    best_index = 0
    best_area = float(cv2.contourArea(contours[0]))
    for index in range(1, len(contours)):
        area = float(cv2.contourArea(contours[index]))
        if area > best_area:
            best_index = index
            best_area = area
    return best_index, best_area


def box_center(box: tuple[int, int, int, int]) -> tuple[int, int]:
    x, y, w, h = box
    return x + w // 2, y + h // 2


def detect_object(mask: np.ndarray) -> Detection | None:
    contours = find_contours(mask)
    selected = select_largest_contour(contours)
    if selected is None:
        return None

    index, area = selected
    contour = contours[index]
    x, y, w, h = cv2.boundingRect(contour)
    box = (int(x), int(y), int(w), int(h))
    return Detection(contour=contour, area=area, box=box, center=box_center(box))


def format_area(area: float) -> str:
    if float(area).is_integer():
        return f"{int(area)}"
    return f"{area:.1f}"


def detection_lines(detection: Detection) -> list[str]:
    cx, cy = detection.center
    return [
        f"Area: {format_area(detection.area)}",
        f"Position: ({cx}, {cy})",
    ]


def mark_detection(
    frame: np.ndarray, detection: Detection, config: DetectionConfig | None = None
) -> None:
    cfg = config or DetectionConfig()
    x, y, w, h = detection.box
    cv2.polylines(frame, [detection.contour], True, cfg.highlight_color)
    cv2.rectangle(frame, (x, y), (x + w - 1, y + h - 1), cfg.highlight_color)
    anchor = (detection.right + cfg.label_offset, detection.center[1])
    draw_text_lines(frame, detection_lines(detection), anchor, cfg)


def select_and_annotate(
    mask: np.ndarray, display_frame: np.ndarray, config: DetectionConfig | None = None
) -> Detection | None:
    """Pick the largest region in ``mask`` and draw it onto ``display_frame``."""

    detection = detect_object(mask)
    if detection is not None:
        mark_detection(display_frame, detection, config)
    return detection
