"""Object detection in video by static background subtraction."""

from .models import (
    ESCAPE_KEY,
    KERNEL_SHAPES,
    DetectionConfig,
    PlaybackConfig,
    config_from_mapping,
    load_detection_config,
)
from .motion_mask import (
    FrameBuffers,
    FrameShapeMismatchError,
    MotionMask,
    compute_motion_mask,
    structuring_element,
)
from .overlay import draw_text_lines, frame_info_lines, write_frame_info
from .pipeline import BackgroundSubtractionPipeline, FrameResult
from .playback import run_playback, show_processing_stages
from .scan import ScanRecord, ScanSummary, scan_source, summarize_scan
from .selection import (
    Detection,
    box_center,
    detect_object,
    find_contours,
    mark_detection,
    select_and_annotate,
    select_largest_contour,
)
from .synthetic import SyntheticSceneConfig, blank_frame, generate_scene, paint_block
from .video import (
    WINDOW_NAMES,
    FrameDisplay,
    FrameSource,
    VideoSource,
    VideoSourceError,
    WindowDisplay,
)

__all__ = [
    "ESCAPE_KEY",
    "KERNEL_SHAPES",
    "DetectionConfig",
    "PlaybackConfig",
    "config_from_mapping",
    "load_detection_config",
    "FrameBuffers",
    "FrameShapeMismatchError",
    "MotionMask",
    "compute_motion_mask",
    "structuring_element",
    "draw_text_lines",
    "frame_info_lines",
    "write_frame_info",
    "Detection",
    "box_center",
    "detect_object",
    "find_contours",
    "mark_detection",
    "select_and_annotate",
    "select_largest_contour",
    "BackgroundSubtractionPipeline",
    "FrameResult",
    "run_playback",
    "show_processing_stages",
    "ScanRecord",
    "ScanSummary",
    "scan_source",
    "summarize_scan",
    "SyntheticSceneConfig",
    "blank_frame",
    "generate_scene",
    "paint_block",
    "WINDOW_NAMES",
    "FrameDisplay",
    "FrameSource",
    "VideoSource",
    "VideoSourceError",
    "WindowDisplay",
]
