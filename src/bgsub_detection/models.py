from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

KERNEL_SHAPES = ("rect", "cross", "ellipse")
INT_FIELDS = (
    "threshold",
    "erode_iterations",
    "dilate_iterations",
    "kernel_size",
    "font_thickness",
    "line_gap",
    "label_offset",
)
ESCAPE_KEY = 27


@dataclass(frozen=True)
class DetectionConfig:
    """Configuration for the differencing, denoising and annotation stages."""

    threshold: int = 50
    erode_iterations: int = 3
    # None reuses erode_iterations for dilation.
    dilate_iterations: int | None = None
    kernel_shape: str = "rect"
    kernel_size: int = 3
    highlight_color: tuple[int, int, int] = (0, 0, 255)
    font_scale: float = 1.0
    font_thickness: int = 1
    line_gap: int = 4
    info_anchor: tuple[int, int] = (5, 10)
    label_offset: int = 5

    def __post_init__(self) -> None:
        for name in INT_FIELDS:
            value = getattr(self, name)
            if value is None and name == "dilate_iterations":
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer")
        if isinstance(self.font_scale, bool) or not isinstance(self.font_scale, (int, float)):
            raise ValueError("font_scale must be a number")
        if not 0 <= self.threshold <= 255:
            raise ValueError("threshold must be within 0..255")
        if self.erode_iterations < 0:
            raise ValueError("erode_iterations must be non-negative")
        if self.dilate_iterations is not None and self.dilate_iterations < 0:
            raise ValueError("dilate_iterations must be non-negative")
        if self.kernel_shape not in KERNEL_SHAPES:
            raise ValueError(f"kernel_shape must be one of {', '.join(KERNEL_SHAPES)}")
        if self.kernel_size <= 0 or self.kernel_size % 2 == 0:
            raise ValueError("kernel_size must be a positive odd integer")
        if len(self.highlight_color) != 3 or any(
            not 0 <= channel <= 255 for channel in self.highlight_color
        ):
            raise ValueError("highlight_color must be three BGR values within 0..255")
        if self.font_scale <= 0:
            raise ValueError("font_scale must be positive")
        if self.font_thickness <= 0:
            raise ValueError("font_thickness must be positive")
        if len(self.info_anchor) != 2:
            raise ValueError("info_anchor must be an (x, y) pair")

    @property
    def effective_dilate_iterations(self) -> int:
        if self.dilate_iterations is None:
            return self.erode_iterations
        return self.dilate_iterations


@dataclass(frozen=True)
class PlaybackConfig:
    """Configuration for the interactive step-through player."""

    exit_key: int = ESCAPE_KEY

    def __post_init__(self) -> None:
        if isinstance(self.exit_key, bool) or not isinstance(self.exit_key, int):
            raise ValueError("exit_key must be an integer")
        if not 0 <= self.exit_key <= 255:
            raise ValueError("exit_key must be within 0..255")


def _coerce_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as error:
        raise ValueError(f"{field_name} must be an integer") from error


def _coerce_pair(value: Any, field_name: str, size: int) -> tuple[int, ...]:
    if not isinstance(value, (list, tuple)) or len(value) != size:
        raise ValueError(f"{field_name} must be a list of {size} integers")
    try:
        return tuple(int(item) for item in value)
    except (TypeError, ValueError) as error:
        raise ValueError(f"{field_name} must be a list of {size} integers") from error


def config_from_mapping(payload: dict[str, Any]) -> DetectionConfig:
    known = {item.name for item in fields(DetectionConfig)}
    unknown = sorted(set(payload) - known)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")

    values = dict(payload)
    for name in INT_FIELDS:
        if name in values and values[name] is not None:
            values[name] = _coerce_int(values[name], name)
    if "font_scale" in values:
        try:
            values["font_scale"] = float(values["font_scale"])
        except (TypeError, ValueError) as error:
            raise ValueError("font_scale must be a number") from error
    if "highlight_color" in values:
        values["highlight_color"] = _coerce_pair(values["highlight_color"], "highlight_color", 3)
    if "info_anchor" in values:
        values["info_anchor"] = _coerce_pair(values["info_anchor"], "info_anchor", 2)
    return DetectionConfig(**values)


def load_detection_config(path: Path) -> DetectionConfig:
    """Load detection settings from a YAML or JSON file."""

    if not path.exists():
        raise FileNotFoundError(path)

    suffix = path.suffix.strip().lower()
    raw_text = path.read_text(encoding="utf-8")

    if suffix == ".json":
        payload = json.loads(raw_text)
    else:
        try:
            import yaml
        except ModuleNotFoundError as error:
            raise ModuleNotFoundError(
                "PyYAML is required for YAML config support. Install package 'PyYAML'."
            ) from error
        payload = yaml.safe_load(raw_text)

    if payload is None:
        return DetectionConfig()
    if not isinstance(payload, dict):
        raise ValueError("config document must be an object")
    return config_from_mapping(payload)


def config_to_dict(config: DetectionConfig) -> dict[str, Any]:
    return {
        "threshold": config.threshold,
        "erode_iterations": config.erode_iterations,
        "dilate_iterations": config.effective_dilate_iterations,
        "kernel_shape": config.kernel_shape,
        "kernel_size": config.kernel_size,
    }
