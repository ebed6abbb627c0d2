from bgsub_detection.models import DetectionConfig
from bgsub_detection.pipeline import BackgroundSubtractionPipeline
from bgsub_detection.synthetic import SyntheticSceneConfig, generate_scene


def main() -> None:
    frames = generate_scene(SyntheticSceneConfig(frames=5, step=(15, 5)))
    reference = next(frames)
    pipeline = BackgroundSubtractionPipeline(reference, DetectionConfig())

    print("Synthetic scene detections")
    for frame_number, frame in enumerate(frames, start=2):
        result = pipeline.process(frame, frame_number)
        detection = result.detection
        if detection is None:
            print(f"Frame {frame_number}: no motion")
            continue
        print(
            f"Frame {frame_number}: area={detection.area:.0f} "
            f"box={detection.box} center={detection.center} "
            f"time={result.processing_ms} ms"
        )


if __name__ == "__main__":
    main()
