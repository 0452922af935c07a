"""Vision model and matcher for classifying tiles into tile types."""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import torch
import torch.nn as nn
import torch.nn.functional as F

from ..config import ScreenConfig, VisionConfig
from ..game.grid import TileGrid
from ..game.tile_types import TileType
from ..graphics.frame import preprocess_tiles, split_tiles

logger = logging.getLogger(__name__)


class ConvBlock(nn.Module):
    """Convolution + BatchNorm + LeakyReLU block."""

    def __init__(
        self,
        in_channels: int,
        out_channels: int,
        kernel_size: int = 3,
        stride: int = 1,
        padding: int = 1,
    ):
        super().__init__()
        self.conv = nn.Conv2d(
            in_channels, out_channels, kernel_size,
            stride=stride, padding=padding, bias=False
        )
        self.bn = nn.BatchNorm2d(out_channels)
        self.act = nn.LeakyReLU(0.1, inplace=True)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.act(self.bn(self.conv(x)))


class TileClassifier(nn.Module):
    """Classifier for single board tiles.

    Tiles are tiny (8x8 at game resolution), so the network only pools
    once before averaging down to a fixed 2x2 feature map.

    Attributes:
        num_classes: Number of outputs, one per TileType value
    """

    def __init__(self, num_classes: int = len(TileType)):
        """Initialize tile classifier.

        Args:
            num_classes: Number of tile types to classify
        """
        super().__init__()
        self.num_classes = num_classes

        self.features = nn.Sequential(
            ConvBlock(3, 16),
            ConvBlock(16, 32),
            nn.MaxPool2d(2),
            ConvBlock(32, 64),
            nn.AdaptiveAvgPool2d((2, 2)),
        )

        self.classifier = nn.Sequential(
            nn.Flatten(),
            nn.Linear(64 * 2 * 2, 128),
            nn.ReLU(inplace=True),
            nn.Dropout(0.25),
            nn.Linear(128, num_classes),
        )

    def forward(self, tiles: torch.Tensor) -> torch.Tensor:
        """Classify tile images.

        Args:
            tiles: Batch of tile images (B, 3, H, W)

        Returns:
            Class logits (B, num_classes)
        """
        return self.classifier(self.features(tiles))


class TileMatcher:
    """Matches a bitmap image with a tile type.

    The vision model must be loaded with load_vision_model() before any
    matching. Predictions below the configured confidence threshold are
    reported as TileType.UNKNOWN.

    Attributes:
        config: Vision configuration
        screen: Screen geometry, used to split frames into tiles
        model: Loaded TileClassifier, or None
    """

    def __init__(
        self,
        config: Optional[VisionConfig] = None,
        screen: Optional[ScreenConfig] = None,
    ):
        self.config = config or VisionConfig()
        self.screen = screen or ScreenConfig()
        self.device = torch.device(self.config.device)
        self.model: Optional[TileClassifier] = None

    @property
    def is_loaded(self) -> bool:
        """Whether a vision model is ready for matching."""
        return self.model is not None

    def load_vision_model(self) -> bool:
        """Load the vision model from the configured checkpoint.

        Failures are logged rather than raised. A previously loaded model
        stays in place when loading fails.

        Returns:
            True if the model was loaded
        """
        path = self.config.model_path
        if path is None:
            logger.error("No vision model path configured")
            return False

        path = Path(path)
        if not path.is_file():
            logger.error(f"Vision model not found: {path}")
            return False

        try:
            checkpoint = torch.load(path, map_location="cpu", weights_only=True)
        except Exception as e:
            logger.error(f"Failed to read vision model {path}: {e}")
            return False

        if not isinstance(checkpoint, dict) or "model_state_dict" not in checkpoint:
            logger.error(f"Vision model {path} has no model_state_dict")
            return False

        num_classes = checkpoint.get("num_classes", len(TileType))
        if not isinstance(num_classes, int) or num_classes != len(TileType):
            logger.error(
                f"Vision model {path} predicts {num_classes} classes, "
                f"expected {len(TileType)}"
            )
            return False

        tile_size = checkpoint.get("tile_size", self.screen.tile_size)
        try:
            tile_size = tuple(int(v) for v in tile_size)
        except (TypeError, ValueError):
            logger.error(f"Vision model {path} has an invalid tile_size: {tile_size!r}")
            return False
        if tile_size != self.screen.tile_size:
            logger.warning(
                f"Vision model trained on {tile_size} tiles, "
                f"matching {self.screen.tile_size} tiles"
            )

        model = TileClassifier(num_classes=num_classes)
        try:
            model.load_state_dict(checkpoint["model_state_dict"])
        except (RuntimeError, TypeError, ValueError) as e:
            logger.error(f"Vision model {path} does not fit the classifier: {e}")
            return False

        model.to(self.device)
        model.eval()
        self.model = model
        logger.info(f"Loaded vision model from {path}")
        return True

    def save_vision_model(self, path: Path | str) -> None:
        """Save the current vision model as a checkpoint.

        Args:
            path: Path to save checkpoint

        Raises:
            RuntimeError: If no model is loaded
        """
        model = self._require_model()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        torch.save({
            "model_state_dict": model.state_dict(),
            "num_classes": model.num_classes,
            "tile_size": list(self.screen.tile_size),
        }, path)
        logger.debug(f"Saved vision model to {path}")

    def match_tile(self, tile: np.ndarray) -> TileType:
        """Classify a single tile.

        Args:
            tile: RGB tile (H, W, 3) with uint8 values

        Returns:
            Matched tile type
        """
        if tile.ndim != 3:
            raise ValueError(f"Expected an (H, W, 3) tile, got shape {tile.shape}")
        return self.match_tiles(tile[np.newaxis])[0]

    def match_tiles(self, tiles: np.ndarray) -> list[TileType]:
        """Classify a batch of tiles.

        Args:
            tiles: RGB tiles (N, H, W, 3) with uint8 values

        Returns:
            Matched tile type per tile
        """
        if tiles.ndim != 4 or tiles.shape[-1] != 3:
            raise ValueError(f"Expected (N, H, W, 3) tiles, got shape {tiles.shape}")
        return [TileType(int(v)) for v in self._predict(tiles)]

    def match_frame(self, frame: np.ndarray) -> TileGrid:
        """Classify every tile of a game-resolution frame.

        Args:
            frame: RGB frame (game_height, game_width, 3)

        Returns:
            TileGrid of matched tile types
        """
        tiles = split_tiles(frame, self.screen.tile_size)
        rows, cols = tiles.shape[:2]

        ignored = np.zeros((rows, cols), dtype=bool)
        for row, col, height, width in self.config.ignore_regions:
            ignored[row:row + height, col:col + width] = True

        values = np.full((rows, cols), int(TileType.IGNORE), dtype=np.int8)
        wanted = ~ignored
        if wanted.any():
            values[wanted] = self._predict(tiles[wanted])

        return TileGrid(values)

    def _predict(self, tiles: np.ndarray) -> np.ndarray:
        """Run the model and apply the confidence threshold."""
        model = self._require_model()
        batch = preprocess_tiles(tiles).to(self.device)

        with torch.no_grad():
            probs = F.softmax(model(batch), dim=-1)
        confidence, predicted = probs.max(dim=-1)

        predicted[confidence < self.config.confidence_threshold] = int(TileType.UNKNOWN)
        return predicted.cpu().numpy().astype(np.int8)

    def _require_model(self) -> TileClassifier:
        if self.model is None:
            raise RuntimeError(
                "Vision model not loaded. Call load_vision_model() first."
            )
        return self.model
