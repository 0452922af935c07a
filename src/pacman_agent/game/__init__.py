"""Game board vocabulary and state for Pac-Man."""

from .tile_types import TileType
from .grid import TileGrid

__all__ = [
    "TileType",
    "TileGrid",
]
