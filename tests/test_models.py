from __future__ import annotations

import json
from pathlib import Path

import pytest

from bgsub_detection.models import (
    DetectionConfig,
    PlaybackConfig,
    config_from_mapping,
    config_to_dict,
    load_detection_config,
)


def test_defaults_match_reference_settings() -> None:
    config = DetectionConfig()

    assert config.threshold == 50
    assert config.erode_iterations == 3
    assert config.effective_dilate_iterations == 3
    assert config.kernel_shape == "rect"
    assert config.kernel_size == 3
    assert config.highlight_color == (0, 0, 255)


def test_explicit_dilate_iterations_override_shared_count() -> None:
    config = DetectionConfig(erode_iterations=2, dilate_iterations=5)

    assert config.effective_dilate_iterations == 5
    assert config_to_dict(config)["dilate_iterations"] == 5


@pytest.mark.parametrize(
    "kwargs",
    [
        {"threshold": 256},
        {"erode_iterations": -1},
        {"dilate_iterations": -2},
        {"kernel_shape": "diamond"},
        {"kernel_size": 4},
        {"highlight_color": (0, 0, 300)},
        {"font_scale": 0.0},
        {"threshold": "50"},
        {"erode_iterations": 1.5},
        {"kernel_size": True},
    ],
)
def test_invalid_config_raises(kwargs: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        DetectionConfig(**kwargs)


@pytest.mark.parametrize(
    "payload",
    [
        {"threshold": "fifty"},
        {"erode_iterations": 1.5},
        {"dilate_iterations": "2.5"},
        {"line_gap": None},
        {"font_scale": "large"},
    ],
)
def test_malformed_mapping_values_raise_value_error(payload: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        config_from_mapping(payload)


def test_mapping_values_are_coerced_to_integers() -> None:
    config = config_from_mapping({"threshold": "40", "erode_iterations": 2.0, "kernel_size": 5})

    assert config.threshold == 40
    assert isinstance(config.erode_iterations, int)
    assert config.erode_iterations == 2
    assert config.kernel_size == 5


@pytest.mark.parametrize("exit_key", [-1, 256, 27.0])
def test_invalid_exit_key_raises(exit_key: object) -> None:
    with pytest.raises(ValueError):
        PlaybackConfig(exit_key=exit_key)


def test_load_json_config(tmp_path: Path) -> None:
    path = tmp_path / "detect.json"
    path.write_text(
        json.dumps({"threshold": 30, "highlight_color": [255, 0, 0], "info_anchor": [8, 16]}),
        encoding="utf-8",
    )

    config = load_detection_config(path)

    assert config.threshold == 30
    assert config.highlight_color == (255, 0, 0)
    assert config.info_anchor == (8, 16)
    assert config.erode_iterations == 3


def test_load_yaml_config(tmp_path: Path) -> None:
    path = tmp_path / "detect.yaml"
    path.write_text("erode_iterations: 1\nkernel_shape: cross\n", encoding="utf-8")

    config = load_detection_config(path)

    assert config.erode_iterations == 1
    assert config.kernel_shape == "cross"


def test_empty_yaml_config_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")

    assert load_detection_config(path) == DetectionConfig()


def test_unknown_config_key_raises(tmp_path: Path) -> None:
    path = tmp_path / "detect.json"
    path.write_text(json.dumps({"threshhold": 30}), encoding="utf-8")

    with pytest.raises(ValueError, match="threshhold"):
        load_detection_config(path)


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_detection_config(tmp_path / "absent.json")
