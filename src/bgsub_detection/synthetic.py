from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class SyntheticSceneConfig:
    """Configuration for a synthetic scene with one moving block."""

    width: int = 320
    height: int = 240
    background_bgr: tuple[int, int, int] = (0, 0, 0)
    block_bgr: tuple[int, int, int] = (255, 255, 255)
    block_size: tuple[int, int] = (100, 60)
    start: tuple[int, int] = (10, 10)
    step: tuple[int, int] = (8, 4)
    frames: int = 10


def blank_frame(width: int, height: int, bgr: Sequence[int] = (0, 0, 0)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")
    frame = np.empty((height, width, 3), dtype=np.uint8)
    frame[:, :] = bgr
    return frame


def paint_block(
    frame: np.ndarray,
    x: int,
    y: int,
    w: int,
    h: int,
    bgr: Sequence[int] = (255, 255, 255),
) -> np.ndarray:
    """Return a copy of ``frame`` with a filled axis-aligned block."""

    painted = frame.copy()
    painted[y : y + h, x : x + w] = bgr
    return painted


def generate_scene(config: SyntheticSceneConfig | None = None) -> Iterator[np.ndarray]:
    """Yield the empty background first, then frames with a block moving by ``step``."""

    cfg = config or SyntheticSceneConfig()
    background = blank_frame(cfg.width, cfg.height, cfg.background_bgr)
    yield background

    w, h = cfg.block_size
    x, y = cfg.start
    dx, dy = cfg.step
    for _ in range(cfg.frames):
        clamped_x = min(max(x, 0), max(cfg.width - w, 0))
        clamped_y = min(max(y, 0), max(cfg.height - h, 0))
        yield paint_block(background, clamped_x, clamped_y, w, h, cfg.block_bgr)
        x += dx
        y += dy
