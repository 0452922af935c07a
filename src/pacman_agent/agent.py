"""Frame processing: turns captured frames into tile grids."""

import logging
import threading
from typing import Callable, Optional

import numpy as np

from .game.grid import TileGrid
from .graphics.sources import WindowMetadata
from .graphics.window_capture import WindowCapture, WindowCaptureDelegate
from .learn.tile_matcher import TileMatcher

logger = logging.getLogger(__name__)


class FrameProcessor(WindowCaptureDelegate):
    """Window capture delegate that matches every frame's tiles.

    Starts capturing as soon as the target window is acquired, and keeps
    the grid of the most recent frame for whoever consumes game state.

    Attributes:
        matcher: TileMatcher with a loaded vision model
        capture: WindowCapture this processor is the delegate of
        latest_grid: Grid of the last processed frame
        frame_count: Number of frames processed
        acquisition_failed: Whether the target window was never found
    """

    def __init__(
        self,
        matcher: TileMatcher,
        capture: Optional[WindowCapture] = None,
        on_grid: Optional[Callable[[TileGrid], None]] = None,
    ):
        """Initialize frame processor.

        Args:
            matcher: TileMatcher to classify frames with
            capture: WindowCapture to drive; becomes its delegate
            on_grid: Optional callback invoked with every new grid
        """
        self.matcher = matcher
        self.on_grid = on_grid
        self.latest_grid: Optional[TileGrid] = None
        self.frame_count = 0
        self.acquisition_failed = False
        self.done = threading.Event()

        self.capture = capture
        if capture is not None:
            capture.delegate = self

    def did_capture_window(self, frame: np.ndarray) -> None:
        grid = self.matcher.match_frame(frame)
        self.latest_grid = grid
        self.frame_count += 1

        logger.debug(
            f"Frame {self.frame_count}: pacman at {grid.find_pacman()}, "
            f"{grid.remaining_pellets()} pellets left"
            + (", ghosts frightened" if grid.frightened() else "")
        )

        if self.on_grid is not None:
            self.on_grid(grid)

    def did_fail_to_acquire_window_metadata(self) -> None:
        self.acquisition_failed = True
        logger.error("Could not find the game window")
        self.done.set()

    def did_acquire_window_metadata(self, metadata: WindowMetadata) -> None:
        logger.info(f"Found game window '{metadata.window_name}' ({metadata.app_name})")
        if self.capture is not None:
            self.capture.start_window_capture()
