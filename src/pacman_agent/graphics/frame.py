"""Frame post-processing: cropping, resizing and tiling captured windows."""

import math

import cv2
import numpy as np
import torch

from ..config import ScreenConfig


def crop_region(
    image: np.ndarray, x: float, y: float, width: float, height: float
) -> np.ndarray:
    """Crop a pixel region from an image, clamped to the image bounds."""
    img_h, img_w = image.shape[:2]
    x1 = max(0, min(int(x), img_w))
    y1 = max(0, min(int(y), img_h))
    x2 = max(0, min(int(x + width), img_w))
    y2 = max(0, min(int(y + height), img_h))
    return image[y1:y2, x1:x2]


def crop_game_window(image: np.ndarray, screen: ScreenConfig) -> np.ndarray:
    """Crop a window screenshot to the game's aspect ratio.

    Strips the title bar and bottom border, then takes a horizontally
    centred slice whose width matches the board's aspect ratio.

    Args:
        image: Raw window capture (H, W, 3)
        screen: Screen geometry

    Returns:
        Cropped image

    Raises:
        ValueError: If the borders leave nothing to crop
    """
    img_h, img_w = image.shape[:2]
    top = screen.top_border * screen.backing_scale_factor
    bottom = screen.bottom_border * screen.backing_scale_factor

    height = img_h - top - bottom
    if height <= 0:
        raise ValueError(
            f"Window too small to crop: height {img_h}px with "
            f"{top + bottom:.0f}px of borders"
        )

    width = math.floor(
        height * (screen.game_width - screen.tile_width) / screen.game_height
    )
    width = min(width, img_w)
    x_origin = (img_w - width) / 2

    return crop_region(image, x_origin, top, width, height)


def resize_to_game(image: np.ndarray, screen: ScreenConfig) -> np.ndarray:
    """Resize a cropped frame to the arcade game's dimensions.

    A window is typically over 1000 pixels tall while the board is 288, so
    this also shrinks each tile down to a handful of pixels.

    Args:
        image: Cropped frame (H, W, 3)
        screen: Screen geometry

    Returns:
        Frame of shape (game_height, game_width, 3)
    """
    target = (screen.game_width, screen.game_height)
    if image.shape[1] == target[0] and image.shape[0] == target[1]:
        return image
    return cv2.resize(image, target, interpolation=cv2.INTER_AREA)


def split_tiles(frame: np.ndarray, tile_size: tuple[int, int]) -> np.ndarray:
    """Split a frame into a grid of tiles.

    Args:
        frame: Game frame (H, W, 3)
        tile_size: Tile size as (width, height)

    Returns:
        Array of shape (rows, cols, tile_h, tile_w, 3)

    Raises:
        ValueError: If the frame is not a whole number of tiles
    """
    if frame.ndim != 3:
        raise ValueError(f"Expected an (H, W, C) frame, got shape {frame.shape}")

    tile_w, tile_h = tile_size
    img_h, img_w, channels = frame.shape
    if img_h % tile_h or img_w % tile_w:
        raise ValueError(
            f"Frame {img_w}x{img_h} is not a whole number of "
            f"{tile_w}x{tile_h} tiles"
        )

    rows, cols = img_h // tile_h, img_w // tile_w
    tiles = frame.reshape(rows, tile_h, cols, tile_w, channels)
    return tiles.swapaxes(1, 2)


def preprocess_tiles(tiles: np.ndarray) -> torch.Tensor:
    """Preprocess tiles for neural network input.

    Args:
        tiles: Batch of RGB tiles (N, H, W, 3) with uint8 values

    Returns:
        Float tensor (N, 3, H, W) normalized to [0, 1]
    """
    tensor = tiles.astype(np.float32) / 255.0

    # NHWC to NCHW
    tensor = np.ascontiguousarray(np.transpose(tensor, (0, 3, 1, 2)))

    return torch.from_numpy(tensor)
