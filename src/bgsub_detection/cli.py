from __future__ import annotations

import argparse
import csv
import dataclasses
import json
import logging
from pathlib import Path

import cv2

from .models import (
    ESCAPE_KEY,
    KERNEL_SHAPES,
    DetectionConfig,
    PlaybackConfig,
    config_to_dict,
    load_detection_config,
)
from .motion_mask import FrameShapeMismatchError
from .playback import run_playback
from .scan import ScanRecord, ScanSummary, scan_source, summarize_scan
from .synthetic import SyntheticSceneConfig, generate_scene
from .video import VideoSourceError, WindowDisplay, open_video_source

_OVERRIDABLE_FIELDS = (
    "threshold",
    "erode_iterations",
    "dilate_iterations",
    "kernel_shape",
    "kernel_size",
)


def _parse_pair(value: str) -> tuple[int, int]:
    parts = [item.strip() for item in value.split(",")]
    if len(parts) != 2:
        raise argparse.ArgumentTypeError("value must be in format a,b")
    try:
        first, second = (int(part) for part in parts)
    except ValueError as error:
        raise argparse.ArgumentTypeError("values must be integers") from error
    return first, second


def _build_config(args: argparse.Namespace) -> DetectionConfig:
    config = load_detection_config(Path(args.config)) if args.config else DetectionConfig()
    overrides = {
        name: getattr(args, name)
        for name in _OVERRIDABLE_FIELDS
        if getattr(args, name) is not None
    }
    if overrides:
        config = dataclasses.replace(config, **overrides)
    return config


def _add_detection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="JSON or YAML file with detection settings.")
    parser.add_argument("--threshold", type=int, default=None, help="Default: 50")
    parser.add_argument("--erode-iterations", type=int, default=None, help="Default: 3")
    parser.add_argument(
        "--dilate-iterations",
        type=int,
        default=None,
        help="Default: same as --erode-iterations",
    )
    parser.add_argument("--kernel-shape", choices=KERNEL_SHAPES, default=None)
    parser.add_argument("--kernel-size", type=int, default=None, help="Default: 3")


def _record_to_row(record: ScanRecord) -> list[str]:
    if not record.detected:
        return [str(record.frame_number), str(record.processing_ms), "false"] + [""] * 7
    x, y, w, h = record.box
    cx, cy = record.center
    return [
        str(record.frame_number),
        str(record.processing_ms),
        "true",
        f"{record.area:.1f}",
        str(x),
        str(y),
        str(w),
        str(h),
        str(cx),
        str(cy),
    ]


def _write_scan_csv(path: Path, records: list[ScanRecord]) -> None:
    with path.open("w", newline="", encoding="utf-8") as file:
        writer = csv.writer(file)
        writer.writerow(
            [
                "frame_number",
                "processing_ms",
                "detected",
                "area",
                "box_x",
                "box_y",
                "box_w",
                "box_h",
                "center_x",
                "center_y",
            ]
        )
        for record in records:
            writer.writerow(_record_to_row(record))


def _summary_to_dict(summary: ScanSummary) -> dict[str, float | int | None]:
    return {
        "frames_processed": summary.frames_processed,
        "frames_with_detection": summary.frames_with_detection,
        "detection_ratio": summary.detection_ratio,
        "mean_processing_ms": summary.mean_processing_ms,
        "max_area": summary.max_area,
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bgsub-detection",
        description="Object detection in video by static background subtraction.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    play = subparsers.add_parser(
        "play",
        help="Step through a video one key press per frame, showing every stage.",
    )
    play.add_argument(
        "video_path",
        nargs="?",
        help="Path to the video file. Prompted for when omitted.",
    )
    play.add_argument(
        "--exit-key", type=int, default=ESCAPE_KEY, help="Key code 0..255. Default: 27 (ESC)"
    )
    _add_detection_arguments(play)

    scan = subparsers.add_parser(
        "scan",
        help="Run detection over every frame once and export per-frame results.",
    )
    scan.add_argument("video_path", help="Path to the video file.")
    scan.add_argument(
        "--output-csv",
        help="Path for per-frame CSV. Default: <video_stem>_detections.csv",
    )
    scan.add_argument(
        "--output-json",
        help="Path for summary JSON. Default: <video_stem>_scan_summary.json",
    )
    _add_detection_arguments(scan)

    synth = subparsers.add_parser(
        "generate-synthetic-video",
        help="Write a synthetic video with a block moving over a flat background.",
    )
    synth.add_argument("output_path", help="Path of the .avi file to write.")
    synth.add_argument("--width", type=int, default=320)
    synth.add_argument("--height", type=int, default=240)
    synth.add_argument("--block-size", type=_parse_pair, default=(100, 60), help="w,h")
    synth.add_argument("--start", type=_parse_pair, default=(10, 10), help="x,y")
    synth.add_argument("--step", type=_parse_pair, default=(8, 4), help="dx,dy")
    synth.add_argument("--frames", type=int, default=10)
    synth.add_argument("--fps", type=float, default=10.0)

    return parser


def _handle_play(args: argparse.Namespace) -> int:
    video_path = args.video_path
    if not video_path:
        video_path = input("Enter video file: ").strip()

    config = _build_config(args)
    playback = PlaybackConfig(exit_key=args.exit_key)
    with open_video_source(video_path) as source:
        if not source.is_open():
            print(f"Unable to open {video_path}")
            input("Press Enter to exit")
            return 1

        print(f"{video_path} is opened")
        print("Press ESCAPE key to exit")
        print("Press any other key to go to the next frame")

        with WindowDisplay() as display:
            try:
                run_playback(source, display, config, playback)
            except (VideoSourceError, FrameShapeMismatchError) as error:
                print(f"ERROR: {error}")
                return 1
    return 0


def _handle_scan(args: argparse.Namespace) -> int:
    video_path = Path(args.video_path)
    if not video_path.exists():
        raise FileNotFoundError(video_path)

    config = _build_config(args)
    with open_video_source(video_path) as source:
        if not source.is_open():
            print(f"Unable to open {video_path}")
            return 1
        try:
            records = scan_source(source, config)
        except (VideoSourceError, FrameShapeMismatchError) as error:
            print(f"ERROR: {error}")
            return 1

    summary = summarize_scan(records)

    output_csv = Path(args.output_csv) if args.output_csv else video_path.with_name(
        f"{video_path.stem}_detections.csv"
    )
    output_json = Path(args.output_json) if args.output_json else video_path.with_name(
        f"{video_path.stem}_scan_summary.json"
    )

    _write_scan_csv(output_csv, records)
    output_json.write_text(
        json.dumps(
            {
                "video_path": str(video_path),
                "config": config_to_dict(config),
                "summary": _summary_to_dict(summary),
            },
            ensure_ascii=False,
            indent=2,
        ),
        encoding="utf-8",
    )

    print(f"Video scanned: {video_path}")
    print(f"Detections CSV: {output_csv}")
    print(f"Summary JSON: {output_json}")
    print(f"Frames processed: {summary.frames_processed}")
    print(f"Frames with detection: {summary.frames_with_detection}")
    print(f"Mean processing time: {summary.mean_processing_ms:.2f} ms")
    return 0


def _handle_generate_synthetic_video(args: argparse.Namespace) -> int:
    config = SyntheticSceneConfig(
        width=args.width,
        height=args.height,
        block_size=args.block_size,
        start=args.start,
        step=args.step,
        frames=args.frames,
    )
    output_path = Path(args.output_path)
    writer = cv2.VideoWriter(
        str(output_path),
        cv2.VideoWriter_fourcc(*"MJPG"),
        args.fps,
        (config.width, config.height),
    )
    if not writer.isOpened():
        raise VideoSourceError(f"failed to open video writer: {output_path}")

    written = 0
    try:
        for frame in generate_scene(config):
            writer.write(frame)
            written += 1
    finally:
        writer.release()

    print(f"Synthetic video written: {output_path}")
    print(f"Frames: {written}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s"
        )

    if args.command == "play":
        return _handle_play(args)
    if args.command == "scan":
        return _handle_scan(args)
    if args.command == "generate-synthetic-video":
        return _handle_generate_synthetic_video(args)

    parser.error(f"unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
