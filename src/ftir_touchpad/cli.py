from __future__ import annotations

import argparse
import json
import logging
import threading
from pathlib import Path

import cv2
import numpy as np

from .capture import DEFAULT_CAMERA_INDEX, VideoFrameSource, load_image
from .control import ControlState
from .loop import FrameLoopConfig, run_frame_loop
from .models import DEBUG_MODES, TouchPadConfig
from .pipeline import FrameResult, TouchPadPipeline, detect_touches
from .synthetic import SyntheticTouchConfig, available_scenarios, generate_touch_frame

logger = logging.getLogger(__name__)

WINDOW_NAME = "FTIR touchpad"


def _parse_source(value: str) -> int | str:
    try:
        return int(value)
    except ValueError:
        return value


def _parse_blob(value: str) -> tuple[float, float, float, float, float]:
    parts = [item.strip() for item in value.split(",")]
    if len(parts) not in (3, 5):
        raise argparse.ArgumentTypeError("blob must be cx,cy,r or cx,cy,rx,ry,angle_deg")
    try:
        numbers = [float(part) for part in parts]
    except ValueError as error:
        raise argparse.ArgumentTypeError("blob values must be numeric") from error
    if len(numbers) == 3:
        center_x, center_y, radius = numbers
        return center_x, center_y, radius, radius, 0.0
    center_x, center_y, radius_x, radius_y, angle_deg = numbers
    return center_x, center_y, radius_x, radius_y, angle_deg


def _config_from_args(args: argparse.Namespace) -> TouchPadConfig:
    return TouchPadConfig(
        threshold_value=args.threshold,
        padding_pixels=args.padding,
        blur_kernel_size=args.blur_kernel_size,
        blur_sigma=args.blur_sigma,
        morph_kernel_size=args.morph_kernel_size,
        debug_mode=args.debug_mode,
    )


def _result_to_dict(result: FrameResult) -> dict[str, object]:
    return {
        "threshold_value": result.config.threshold_value,
        "padding_pixels": result.config.padding_pixels,
        "debug_mode": result.config.debug_mode,
        "contour_count": result.contour_count,
        "skipped_contours": result.skipped_contours,
        "ellipses": [ellipse.to_dict() for ellipse in result.ellipses],
    }


def _add_pipeline_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--threshold", type=int, default=128)
    parser.add_argument("--padding", type=int, default=0)
    parser.add_argument("--blur-kernel-size", type=int, default=7)
    parser.add_argument("--blur-sigma", type=float, default=1.5)
    parser.add_argument("--morph-kernel-size", type=int, default=10)
    parser.add_argument("--debug-mode", choices=DEBUG_MODES, default="normal")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ftir-touchpad", description="Finger blob detection for FTIR touch surfaces."
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect = subparsers.add_parser(
        "detect-image",
        help="Detect touch blobs in a still image and print them as JSON.",
    )
    detect.add_argument("image_path", help="Path to a camera frame (any format OpenCV reads).")
    detect.add_argument("--output-image", help="Optional path for the composited display image.")
    _add_pipeline_arguments(detect)

    run = subparsers.add_parser(
        "run",
        help="Run the live detection loop on a camera or video file.",
    )
    run.add_argument(
        "--source",
        default=str(DEFAULT_CAMERA_INDEX),
        help="Camera index or video file path.",
    )
    run.add_argument("--interval-ms", type=float, default=30.0)
    run.add_argument("--max-frames", type=int, default=None)
    run.add_argument(
        "--max-idle-cycles",
        type=int,
        default=None,
        help="Stop after this many consecutive cycles without a frame.",
    )
    run.add_argument("--show", action="store_true", help="Display frames in an OpenCV window.")
    run.add_argument("--print-touches", action="store_true")
    run.add_argument("--control-host", default="127.0.0.1")
    run.add_argument(
        "--control-port",
        type=int,
        default=None,
        help="Serve the HTTP control panel on this port.",
    )
    _add_pipeline_arguments(run)

    synth = subparsers.add_parser(
        "generate-synthetic-frame",
        help="Render a synthetic FTIR frame with known touch blobs.",
    )
    synth.add_argument("output_image", help="Path for the generated frame image.")
    synth.add_argument("--width", type=int, default=640)
    synth.add_argument("--height", type=int, default=480)
    synth.add_argument("--background", type=int, default=20)
    synth.add_argument("--blob-intensity", type=int, default=220)
    synth.add_argument(
        "--blob",
        type=_parse_blob,
        action="append",
        default=None,
        help="Blob as cx,cy,r or cx,cy,rx,ry,angle_deg. Repeatable.",
    )
    synth.add_argument("--scenario", choices=available_scenarios(), default="clean_glass")
    synth.add_argument("--seed", type=int, default=42)
    synth.add_argument(
        "--output-json",
        help="Path for ground-truth JSON. Default: <output_image_stem>_truth.json",
    )

    return parser


def _handle_detect_image(args: argparse.Namespace) -> int:
    try:
        frame = load_image(args.image_path)
    except (FileNotFoundError, RuntimeError) as error:
        print(f"Unable to read image: {error}")
        return 1
    result = detect_touches(frame, _config_from_args(args))

    if args.output_image:
        output_image = Path(args.output_image)
        if not cv2.imwrite(str(output_image), result.display):
            raise RuntimeError(f"failed to write image: {output_image}")

    print(json.dumps(_result_to_dict(result), ensure_ascii=False, indent=2))
    return 0


def _start_control_panel(state: ControlState, host: str, port: int) -> threading.Thread:
    import uvicorn

    from .control_panel import create_control_panel_app

    server = uvicorn.Server(
        uvicorn.Config(create_control_panel_app(state), host=host, port=port, log_level="warning")
    )
    thread = threading.Thread(target=server.run, name="control-panel", daemon=True)
    thread.start()
    logger.info("Control panel listening on http://%s:%d", host, port)
    return thread


def _handle_run(args: argparse.Namespace) -> int:
    state = ControlState(_config_from_args(args))
    if args.control_port is not None:
        _start_control_panel(state, args.control_host, args.control_port)

    stop_requested = False

    def display_sink(image: np.ndarray) -> None:
        nonlocal stop_requested
        if not args.show:
            return
        cv2.imshow(WINDOW_NAME, image)
        if cv2.waitKey(1) & 0xFF == ord("q"):
            stop_requested = True

    def result_sink(result: FrameResult) -> None:
        state.publish(result)
        if args.print_touches:
            payload = [ellipse.to_dict() for ellipse in result.ellipses]
            print(json.dumps(payload, ensure_ascii=False))

    source = VideoFrameSource(_parse_source(args.source), notify=print)
    source.open()
    try:
        stats = run_frame_loop(
            source,
            config_provider=state.snapshot,
            display_sink=display_sink,
            pipeline=TouchPadPipeline(),
            config=FrameLoopConfig(
                interval_s=args.interval_ms / 1000.0,
                max_frames=args.max_frames,
                max_idle_cycles=args.max_idle_cycles,
            ),
            result_sink=result_sink,
            should_stop=lambda: stop_requested,
        )
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0
    finally:
        source.close()
        if args.show:
            cv2.destroyAllWindows()

    logger.info(
        "Loop finished: ticks=%d processed=%d skipped=%d",
        stats.ticks,
        stats.processed,
        stats.skipped,
    )
    return 0


def _handle_generate_synthetic_frame(args: argparse.Namespace) -> int:
    defaults = SyntheticTouchConfig()
    config = SyntheticTouchConfig(
        width=args.width,
        height=args.height,
        background=args.background,
        blob_intensity=args.blob_intensity,
        blobs=tuple(args.blob) if args.blob else defaults.blobs,
        scenario=args.scenario,
        seed=args.seed,
    )
    synthetic = generate_touch_frame(config)

    output_image = Path(args.output_image)
    output_json = Path(args.output_json) if args.output_json else output_image.with_name(
        f"{output_image.stem}_truth.json"
    )
    if not cv2.imwrite(str(output_image), synthetic.frame):
        raise RuntimeError(f"failed to write image: {output_image}")

    payload = {
        "width": config.width,
        "height": config.height,
        "scenario": config.scenario,
        "seed": config.seed,
        "blobs": [blob.to_dict() for blob in synthetic.blobs],
    }
    output_json.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    print(f"Synthetic frame generated: scenario={config.scenario}, blobs={len(synthetic.blobs)}")
    print(f"Frame: {output_image}")
    print(f"Ground truth JSON: {output_json}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "detect-image":
        return _handle_detect_image(args)
    if args.command == "run":
        return _handle_run(args)
    if args.command == "generate-synthetic-frame":
        return _handle_generate_synthetic_frame(args)

    parser.error(f"unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
