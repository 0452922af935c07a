"""Capture of the game window on a regular interval."""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

import numpy as np

from ..config import CaptureConfig, ScreenConfig
from .frame import crop_game_window, resize_to_game
from .sources import WindowMetadata, WindowSource

logger = logging.getLogger(__name__)


class WindowCaptureDelegate(ABC):
    """Receives the results of a WindowCapture."""

    @abstractmethod
    def did_capture_window(self, frame: np.ndarray) -> None:
        """Invoked when the target window was captured.

        Args:
            frame: Cropped and resized RGB frame (game_height, game_width, 3)
        """
        raise NotImplementedError

    @abstractmethod
    def did_fail_to_acquire_window_metadata(self) -> None:
        """Invoked when the target window cannot be found."""
        raise NotImplementedError

    @abstractmethod
    def did_acquire_window_metadata(self, metadata: WindowMetadata) -> None:
        """Invoked when the target window's metadata was acquired."""
        raise NotImplementedError


class _RepeatingTimer:
    """Calls a function every ``interval`` seconds on a daemon thread."""

    def __init__(self, interval: float, function: Callable[[], None], name: str):
        self.interval = interval
        self.function = function
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        """Signal the timer to stop without waiting for it."""
        self._stopped.set()

    def cancel(self) -> None:
        """Stop the timer and wait for a running call to finish."""
        self._stopped.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.interval + 1.0)

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive() and not self._stopped.is_set()

    def _run(self) -> None:
        # A failing call only skips its tick
        while not self._stopped.wait(self.interval):
            try:
                self.function()
            except Exception:
                logger.exception(f"Error in {self._thread.name} timer")


class WindowCapture:
    """Captures a target window.

    Acquisition first polls the window source until a window with the
    target application and title shows up, giving up after the acquisition
    timeout. Once acquired, the window is captured every refresh interval,
    cropped to the board and resized to game resolution, and handed to the
    delegate.

    Attributes:
        source: Where windows are listed and captured from
        config: Target window and timing configuration
        screen: Game geometry used for post-processing
        delegate: Receiver of captured frames and acquisition results
        target_window_metadata: Acquired target window, if any
    """

    def __init__(
        self,
        source: WindowSource,
        config: Optional[CaptureConfig] = None,
        screen: Optional[ScreenConfig] = None,
        delegate: Optional[WindowCaptureDelegate] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.source = source
        self.config = config or CaptureConfig()
        self.screen = screen or ScreenConfig()
        self.delegate = delegate
        self.clock = clock

        self.target_window_metadata: Optional[WindowMetadata] = None

        self._lock = threading.RLock()
        self._acquisition_timer: Optional[_RepeatingTimer] = None
        self._acquisition_start_time: Optional[float] = None
        self._capture_timer: Optional[_RepeatingTimer] = None

    def __enter__(self) -> "WindowCapture":
        return self

    def __exit__(self, *exc) -> None:
        self.stop()

    @property
    def is_acquiring(self) -> bool:
        return self._acquisition_timer is not None and self._acquisition_timer.is_running

    @property
    def is_capturing(self) -> bool:
        return self._capture_timer is not None and self._capture_timer.is_running

    def start_metadata_acquisition(self) -> None:
        """Start polling for the target window on a background thread.

        Restarting cancels any acquisition already in progress and resets
        the timeout.
        """
        with self._lock:
            previous = self._acquisition_timer
            self._acquisition_start_time = self.clock()
            self._acquisition_timer = _RepeatingTimer(
                self.config.acquisition_interval,
                self.acquire_target_window_metadata,
                name="window-acquisition",
            )
            self._acquisition_timer.start()
        _cancel(previous)
        logger.info(
            f"Looking for window '{self.config.target_window}' "
            f"of '{self.config.target_application}'"
        )

    def acquire_target_window_metadata(self) -> Optional[WindowMetadata]:
        """Check the on-screen windows once for the target window.

        Returns:
            The target window's metadata, or None if it wasn't found
        """
        with self._lock:
            if self._acquisition_start_time is None:
                self._acquisition_start_time = self.clock()

            target = next(
                (
                    w for w in self.source.list_windows()
                    if w.matches(self.config.target_application, self.config.target_window)
                ),
                None,
            )
            self.target_window_metadata = target

            if target is not None:
                self._finish_acquisition()
                logger.info(f"Acquired target window {target.window_id}: {target.bounds}")
                if self.delegate:
                    self.delegate.did_acquire_window_metadata(target)
            elif self.clock() - self._acquisition_start_time > self.config.acquisition_timeout:
                self._finish_acquisition()
                logger.error(
                    f"Target window not found after {self.config.acquisition_timeout}s"
                )
                if self.delegate:
                    self.delegate.did_fail_to_acquire_window_metadata()

            return target

    def start_window_capture(self) -> bool:
        """Start capturing the target window on a regular interval.

        Returns:
            False if no target window has been acquired
        """
        with self._lock:
            if self.target_window_metadata is None:
                logger.warning("Cannot start capture without a target window")
                return False

            previous = self._capture_timer
            self._capture_timer = _RepeatingTimer(
                self.config.refresh_interval,
                self.capture_frame,
                name="window-capture",
            )
            self._capture_timer.start()
        _cancel(previous)
        logger.debug(f"Capturing every {self.config.refresh_interval:.3f}s")
        return True

    def capture_frame(self) -> Optional[np.ndarray]:
        """Capture the target window once.

        The capture is cropped and resized so that it is ready for tile
        matching, then passed to the delegate.

        Returns:
            The processed frame, or None if nothing was captured
        """
        metadata = self.target_window_metadata
        if metadata is None:
            return None

        image = self.source.capture(metadata.window_id)
        if image is None:
            logger.debug(f"No image for window {metadata.window_id}")
            return None

        frame = resize_to_game(crop_game_window(image, self.screen), self.screen)
        if self.delegate:
            self.delegate.did_capture_window(frame)
        return frame

    def end_window_capture(self) -> None:
        """Stop capturing the target window."""
        with self._lock:
            timer, self._capture_timer = self._capture_timer, None
        _cancel(timer)

    def stop(self) -> None:
        """Stop acquisition and capture."""
        with self._lock:
            timers = [self._acquisition_timer, self._capture_timer]
            self._acquisition_timer = self._capture_timer = None
            self._acquisition_start_time = None
        for timer in timers:
            _cancel(timer)

    def _finish_acquisition(self) -> None:
        # Runs under the lock, possibly on the acquisition thread: signal only
        if self._acquisition_timer is not None:
            self._acquisition_timer.stop()
            self._acquisition_timer = None
        self._acquisition_start_time = None


def _cancel(timer: Optional[_RepeatingTimer]) -> None:
    if timer is not None:
        timer.cancel()
