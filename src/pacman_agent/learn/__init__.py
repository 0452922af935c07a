"""Vision model for matching board tiles to tile types."""

from ..game.tile_types import TileType
from .tile_matcher import TileClassifier, TileMatcher

__all__ = [
    "TileType",
    "TileClassifier",
    "TileMatcher",
]
