#!/usr/bin/env python3
"""Entry point for reading the Pac-Man board from a game window.

This script runs the vision pipeline:
1. Load the vision model
2. Find the game window
3. Capture it on a regular interval
4. Match every tile of every frame to a tile type

Usage:
    # Live capture of the window declared in the config
    python run_agent.py --config configs/mame.json --model models/tiles.pt

    # Classify a saved screenshot
    python run_agent.py --model models/tiles.pt --image screenshot.png

    # Stop after 100 frames
    python run_agent.py --config configs/mame.json --frames 100
"""

import argparse
import logging
import sys
from pathlib import Path

from pacman_agent.agent import FrameProcessor
from pacman_agent.config import Config
from pacman_agent.game.grid import TileGrid
from pacman_agent.graphics.sources import MssWindowSource, StaticWindowSource
from pacman_agent.graphics.window_capture import WindowCapture
from pacman_agent.learn.tile_matcher import TileMatcher

logger = logging.getLogger("pacman_agent")


def classify_image(config: Config, matcher: TileMatcher, image_path: Path) -> TileGrid:
    """Classify a single saved screenshot of the game window.

    Args:
        config: Configuration object
        matcher: TileMatcher with a loaded model
        image_path: Path to the screenshot

    Returns:
        TileGrid of the screenshot
    """
    source = StaticWindowSource.from_image(
        image_path,
        app_name=config.capture.target_application,
        window_name=config.capture.target_window,
    )
    capture = WindowCapture(source, config.capture, config.screen)
    if capture.acquire_target_window_metadata() is None:
        raise RuntimeError(f"Could not read a window from {image_path}")

    frame = capture.capture_frame()
    return matcher.match_frame(frame)


def run_live(config: Config, matcher: TileMatcher, max_frames: int | None) -> int:
    """Capture the game window until interrupted or max_frames is reached.

    Args:
        config: Configuration object
        matcher: TileMatcher with a loaded model
        max_frames: Number of frames to process, or None for no limit

    Returns:
        Process exit status
    """
    if not config.capture.windows:
        logger.error("No window regions configured under capture.windows")
        return 1

    source = MssWindowSource(config.capture.windows)
    capture = WindowCapture(source, config.capture, config.screen)

    def on_grid(grid: TileGrid) -> None:
        if max_frames is not None and processor.frame_count >= max_frames:
            processor.done.set()

    processor = FrameProcessor(matcher, capture, on_grid=on_grid)

    try:
        with capture:
            capture.start_metadata_acquisition()
            processor.done.wait()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        source.close()

    logger.info(f"Processed {processor.frame_count} frames")
    if processor.latest_grid is not None:
        logger.info(f"Last board:\n{processor.latest_grid.to_text()}")

    return 1 if processor.acquisition_failed else 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Read the Pac-Man board from a game window",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to JSON config file. Defaults are used if not provided.",
    )
    parser.add_argument(
        "--model",
        type=Path,
        default=None,
        help="Vision model checkpoint, overrides vision.model_path",
    )
    parser.add_argument(
        "--image",
        type=Path,
        default=None,
        help="Classify a saved screenshot instead of capturing live",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=None,
        help="Stop after this many frames",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every frame",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    config = Config.from_json(args.config) if args.config else Config()
    if args.model is not None:
        config.vision.model_path = args.model

    matcher = TileMatcher(config.vision, config.screen)
    if not matcher.load_vision_model():
        logger.error("Unable to load the vision model")
        return 1

    if args.image is not None:
        grid = classify_image(config, matcher, args.image)
        print(grid.to_text())
        for name, count in sorted(grid.summary().items()):
            logger.info(f"{name}: {count}")
        return 0

    return run_live(config, matcher, args.frames)


if __name__ == "__main__":
    sys.exit(main())
