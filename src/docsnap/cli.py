"""Command-line interface for docsnap.

Provides the main entry point for running a watch session, plus small
commands for checking the camera and the extractor on their own.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="docsnap",
        description="Motion-triggered document capture and text extraction",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/docsnap.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    watch_parser = subparsers.add_parser(
        "watch", help="Watch the camera and extract text from each new document",
    )
    watch_parser.add_argument(
        "--serve", action="store_true",
        help="Also serve session status over HTTP",
    )
    watch_parser.add_argument(
        "--threshold", type=float, default=None,
        help="Difference score that triggers a capture (overrides config)",
    )
    watch_parser.add_argument(
        "--cooldown", type=float, default=None,
        help="Seconds to wait before re-arming (overrides config)",
    )

    capture_parser = subparsers.add_parser("capture-test", help="Test camera capture (saves a frame)")
    capture_parser.add_argument(
        "-o", "--output", type=Path, default=Path("capture_test.png"),
        help="Where to save the frame",
    )

    extract_parser = subparsers.add_parser("extract", help="Run the configured extractor on an image file")
    extract_parser.add_argument("image", type=Path, help="Image file to read")

    return parser.parse_args(argv)


def _build_capture(settings):
    from docsnap.capture.webcam import WebcamCapture

    resolution = None
    if settings.capture.resolution_width and settings.capture.resolution_height:
        resolution = (settings.capture.resolution_width, settings.capture.resolution_height)
    return WebcamCapture(device=settings.capture.device, resolution=resolution)


def _build_extractor(settings):
    """Build the text extractor selected in the configuration."""
    ex = settings.extractor
    if ex.backend == "tesseract":
        from docsnap.extractor.tesseract import TesseractExtractor

        return TesseractExtractor(language=ex.language, tesseract_cmd=ex.tesseract_cmd)

    from docsnap.extractor.openai import OpenAIExtractor

    api_key = settings.openai_api_key.get_secret_value()
    base_url = ex.base_url
    # If OpenRouter key is set, use it
    or_key = settings.openrouter_api_key.get_secret_value()
    if or_key:
        api_key = or_key
        if not base_url:
            base_url = "https://openrouter.ai/api/v1"
    return OpenAIExtractor(
        api_key=api_key,
        model=ex.model,
        base_url=base_url,
        max_tokens=ex.max_tokens,
    )


async def _watch(settings, serve: bool) -> None:
    """Initialize all components and run a watch session."""
    from docsnap.capture.sampler import FrameSampler
    from docsnap.watcher.invoker import CaptureInvoker
    from docsnap.watcher.loop import WatchLoop
    from docsnap.watcher.machine import CaptureStateMachine
    from docsnap.watcher.reporter import ConsoleStatusReporter, FanOutReporter, StatusBoard

    capture = _build_capture(settings)
    extractor = _build_extractor(settings)
    if not await extractor.health_check():
        logger.warning("Extractor backend %r failed its health check", extractor.backend)

    board = StatusBoard(history_size=settings.endpoint.history_size)
    reporter = FanOutReporter(ConsoleStatusReporter(), board)

    det = settings.detection
    machine = CaptureStateMachine(
        sampler=FrameSampler(capture),
        invoker=CaptureInvoker(extractor, reporter),
        reporter=reporter,
        threshold=det.threshold,
        cooldown_delay=det.cooldown_delay,
        channel=det.channel,
        stride=det.stride,
    )
    watch = WatchLoop(
        capture=capture,
        machine=machine,
        reporter=reporter,
        tick_interval=settings.capture.tick_interval,
        max_consecutive_errors=settings.capture.max_consecutive_errors,
    )

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, watch.stop)
        except NotImplementedError:
            # add_signal_handler is unavailable on Windows event loops
            pass

    server = server_task = None
    if serve or settings.endpoint.enabled:
        from docsnap.endpoint.server import build_server, create_app

        ep = settings.endpoint
        server = build_server(create_app(board, machine), host=ep.host, port=ep.port)
        server_task = asyncio.create_task(server.serve())
        print(f"Status endpoint: http://{ep.host}:{ep.port}/status")

    print(f"Threshold: {det.threshold}, cooldown: {det.cooldown_delay}s. Press Ctrl+C to stop.")
    try:
        session = await watch.run()
    finally:
        if server is not None:
            server.should_exit = True
            await server_task

    print(f"\nSession {session.session_id} finished after {session.duration_minutes:.1f} min")
    print(f"Frames sampled: {session.frames_sampled}")
    print(f"Captures: {session.captures} ({session.failed_captures} failed)")
    if session.error:
        print(f"Error: {session.error}")


async def _capture_test(settings, output: Path) -> None:
    """Capture a single frame and save to file."""
    import cv2

    from docsnap.capture.sampler import FrameSampler

    capture = _build_capture(settings)
    sampler = FrameSampler(capture)

    async with capture:
        frame = None
        # The camera may report a zero size for the first few reads.
        for _ in range(30):
            frame = await sampler.sample()
            if frame is not None:
                break
            await asyncio.sleep(0.1)
        if frame is None:
            print("Camera never became ready")
            return
        cv2.imwrite(str(output), frame.image)
        print(f"Saved frame to {output} ({frame.width}x{frame.height})")


async def _extract(settings, image_path: Path) -> None:
    """Run the extractor on an image file and print the text."""
    import cv2

    from docsnap.domain.models import Frame
    from docsnap.extractor.base import ExtractionError

    image = cv2.imread(str(image_path))
    if image is None:
        print(f"Could not read image {image_path}")
        return
    extractor = _build_extractor(settings)
    frame = Frame(image=image, frame_number=0, source_device=f"file:{image_path}")
    try:
        text = await extractor.extract(frame)
    except ExtractionError as e:
        logger.error("Extraction failed: %s", e)
        print(f"Error: {e}")
        return
    print(text)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the docsnap CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from docsnap.config.settings import load_settings
    from docsnap.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "watch":
        if args.threshold is not None:
            settings.detection.threshold = args.threshold
        if args.cooldown is not None:
            settings.detection.cooldown_delay = args.cooldown
        logger.info("Starting watch session")
        asyncio.run(_watch(settings, serve=args.serve))

    elif args.command == "capture-test":
        logger.info("Running capture test")
        asyncio.run(_capture_test(settings, args.output))

    elif args.command == "extract":
        logger.info("Extracting text from %s", args.image)
        asyncio.run(_extract(settings, args.image))


if __name__ == "__main__":
    main()
