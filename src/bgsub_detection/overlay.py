from __future__ import annotations

from collections.abc import Sequence

import cv2
import numpy as np

from .models import DetectionConfig

FONT_FACE = cv2.FONT_HERSHEY_PLAIN


def line_height(config: DetectionConfig) -> int:
    (_, text_height), baseline = cv2.getTextSize(
        "Ag", FONT_FACE, config.font_scale, config.font_thickness
    )
    return text_height + baseline + config.line_gap


def draw_text_lines(
    frame: np.ndarray,
    lines: Sequence[str],
    anchor: tuple[int, int],
    config: DetectionConfig | None = None,
) -> None:
    """Draw each line separately, stacking baselines downward from the anchor."""

    cfg = config or DetectionConfig()
    x, y = anchor
    step = line_height(cfg)
    for index, text in enumerate(lines):
        cv2.putText(
            frame,
            text,
            (int(x), int(y) + index * step),
            FONT_FACE,
            cfg.font_scale,
            cfg.highlight_color,
            cfg.font_thickness,
            cv2.LINE_8,
        )


def frame_info_lines(frame_number: int, elapsed_ms: int) -> list[str]:
    return [
        f"Frame Number: {frame_number}",
        f"Processing Time: {elapsed_ms} ms",
    ]


def write_frame_info(
    frame: np.ndarray,
    frame_number: int,
    elapsed_ms: int,
    config: DetectionConfig | None = None,
) -> None:
    cfg = config or DetectionConfig()
    draw_text_lines(frame, frame_info_lines(frame_number, elapsed_ms), cfg.info_anchor, cfg)
