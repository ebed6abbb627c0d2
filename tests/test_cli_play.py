from __future__ import annotations

import numpy as np
import pytest

from bgsub_detection import cli
from bgsub_detection.cli import main as cli_main
from bgsub_detection.synthetic import SyntheticSceneConfig, generate_scene


class _FakeSource:
    def __init__(self, frames: list[np.ndarray], opened: bool = True) -> None:
        self.frames = frames
        self.opened = opened
        self.position = 0
        self.released = False

    def __enter__(self) -> _FakeSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def is_open(self) -> bool:
        return self.opened

    def read(self) -> np.ndarray | None:
        if self.position >= len(self.frames):
            return None
        frame = self.frames[self.position]
        self.position += 1
        return frame

    def seek(self, frame_index: int) -> None:
        self.position = frame_index

    def release(self) -> None:
        self.released = True


class _FakeDisplay:
    keys: list[int] = []

    def __enter__(self) -> _FakeDisplay:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def show(self, name: str, image: np.ndarray) -> None:
        pass

    def wait_key(self, delay_ms: int = 0) -> int:
        return _FakeDisplay.keys.pop(0)

    def close(self) -> None:
        pass


def test_play_reports_open_failure_and_waits(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _FakeSource([], opened=False)
    prompts: list[str] = []
    monkeypatch.setattr(cli, "open_video_source", lambda path: source)
    monkeypatch.setattr("builtins.input", lambda prompt="": prompts.append(prompt) or "")

    exit_code = cli_main(["play", "missing.mp4"])

    assert exit_code == 1
    assert "Unable to open missing.mp4" in capsys.readouterr().out
    assert prompts == ["Press Enter to exit"]
    assert source.released is True


def test_play_prompts_for_path_and_exits_on_escape(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    frames = list(generate_scene(SyntheticSceneConfig(width=160, height=120, frames=2)))
    opened: list[str] = []

    def fake_open(path: str) -> _FakeSource:
        opened.append(path)
        return _FakeSource(frames)

    monkeypatch.setattr(cli, "open_video_source", fake_open)
    monkeypatch.setattr(cli, "WindowDisplay", _FakeDisplay)
    monkeypatch.setattr(_FakeDisplay, "keys", [13, 27])
    monkeypatch.setattr("builtins.input", lambda prompt="": " clip.avi ")

    exit_code = cli_main(["play", "--threshold", "40"])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert opened == ["clip.avi"]
    assert "clip.avi is opened" in output
    assert "Press ESCAPE key to exit" in output
    assert _FakeDisplay.keys == []


def test_play_reports_stream_without_frames(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli, "open_video_source", lambda path: _FakeSource([]))
    monkeypatch.setattr(cli, "WindowDisplay", _FakeDisplay)

    exit_code = cli_main(["play", "empty.avi"])

    assert exit_code == 1
    assert "ERROR: video source returned no reference frame" in capsys.readouterr().out


def test_play_rejects_exit_key_outside_byte_range(monkeypatch: pytest.MonkeyPatch) -> None:
    opened: list[str] = []
    monkeypatch.setattr(cli, "open_video_source", lambda path: opened.append(path))

    with pytest.raises(ValueError, match="exit_key"):
        cli_main(["play", "clip.avi", "--exit-key", "300"])

    assert opened == []
