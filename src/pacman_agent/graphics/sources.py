"""Window sources: where window metadata and raw window images come from."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image

from ..config import WindowRegion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindowMetadata:
    """Metadata of an on-screen window.

    Attributes:
        window_id: Source-specific window identifier
        app_name: Name of the application owning the window
        window_name: Window title
        bounds: (left, top, width, height) in screen pixels
    """
    window_id: int
    app_name: str
    window_name: str
    bounds: tuple[int, int, int, int] = (0, 0, 0, 0)

    def matches(self, app_name: str, window_name: str) -> bool:
        """Whether this is the window of the given application and title."""
        return self.app_name == app_name and self.window_name == window_name


class WindowSource(ABC):
    """Interface for listing and capturing on-screen windows.

    Example implementations:
    - MssWindowSource: Grabs declared screen regions with mss
    - StaticWindowSource: Returns fixed images for tests and replays
    """

    @abstractmethod
    def list_windows(self) -> list[WindowMetadata]:
        """List the windows currently on screen.

        Returns:
            Metadata for every visible window
        """
        raise NotImplementedError

    @abstractmethod
    def capture(self, window_id: int) -> Optional[np.ndarray]:
        """Capture the contents of a window.

        Args:
            window_id: Identifier from list_windows()

        Returns:
            RGB image array (H, W, 3) with dtype uint8, or None if the
            window can't be captured
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release any resources held by the source."""


class MssWindowSource(WindowSource):
    """Window source grabbing screen regions through mss.

    mss cannot enumerate windows, so the game window is declared by its
    screen region in the capture configuration. Window ids are indices
    into the declared regions.
    """

    def __init__(self, windows: list[WindowRegion]):
        """Initialize mss source.

        Args:
            windows: Declared window regions
        """
        import mss

        self.windows = list(windows)
        self._sct = mss.mss()

    def list_windows(self) -> list[WindowMetadata]:
        return [
            WindowMetadata(
                window_id=i,
                app_name=region.app_name,
                window_name=region.window_name,
                bounds=(region.left, region.top, region.width, region.height),
            )
            for i, region in enumerate(self.windows)
        ]

    def capture(self, window_id: int) -> Optional[np.ndarray]:
        if not 0 <= window_id < len(self.windows):
            logger.warning(f"Unknown window id: {window_id}")
            return None

        region = self.windows[window_id]
        monitor = {
            "left": region.left,
            "top": region.top,
            "width": region.width,
            "height": region.height,
        }
        try:
            shot = self._sct.grab(monitor)
        except Exception as e:
            logger.warning(f"Failed to capture window {window_id}: {e}")
            return None

        # mss returns BGRA
        return np.array(shot)[:, :, 2::-1].copy()

    def close(self) -> None:
        self._sct.close()


class StaticWindowSource(WindowSource):
    """Window source serving fixed images.

    Useful for:
    - Unit testing without a running game
    - Classifying saved screenshots offline
    """

    def __init__(
        self,
        windows: Optional[list[WindowMetadata]] = None,
        images: Optional[dict[int, np.ndarray]] = None,
    ):
        """Initialize static source.

        Args:
            windows: Windows to report as on screen
            images: Image to return per window id
        """
        self.windows = list(windows or [])
        self.images = dict(images or {})
        self.capture_count = 0

    @classmethod
    def from_image(
        cls,
        image_path: Path | str,
        app_name: str,
        window_name: str,
    ) -> "StaticWindowSource":
        """Create a source with a single window showing an image file.

        Args:
            image_path: Path to a screenshot
            app_name: Application name to report
            window_name: Window title to report

        Returns:
            StaticWindowSource with one window

        Raises:
            FileNotFoundError: If the image doesn't exist
        """
        image_path = Path(image_path)
        if not image_path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")

        with Image.open(image_path) as image:
            pixels = np.array(image.convert("RGB"))

        height, width = pixels.shape[:2]
        window = WindowMetadata(0, app_name, window_name, (0, 0, width, height))
        return cls(windows=[window], images={0: pixels})

    def list_windows(self) -> list[WindowMetadata]:
        return list(self.windows)

    def capture(self, window_id: int) -> Optional[np.ndarray]:
        image = self.images.get(window_id)
        if image is None:
            return None
        self.capture_count += 1
        return image.copy()
