"""Window capture and frame post-processing."""

from .sources import MssWindowSource, StaticWindowSource, WindowMetadata, WindowSource
from .window_capture import WindowCapture, WindowCaptureDelegate

__all__ = [
    "MssWindowSource",
    "StaticWindowSource",
    "WindowMetadata",
    "WindowSource",
    "WindowCapture",
    "WindowCaptureDelegate",
]
