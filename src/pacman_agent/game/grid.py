"""Tile grid representation of a classified game frame."""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .tile_types import TileType

# One character per tile for debug output
_TILE_CHARS = {
    TileType.UNKNOWN: "?",
    TileType.PACMAN: "C",
    TileType.WALL: "#",
    TileType.BLANK: " ",
    TileType.FRUIT: "F",
    TileType.BLINKY: "B",
    TileType.INKY: "I",
    TileType.PINKY: "P",
    TileType.CLYDE: "Y",
    TileType.FRIGHTENED_GHOST: "G",
    TileType.PELLET: ".",
    TileType.POWER_PELLET: "o",
    TileType.TEXT: "T",
    TileType.IGNORE: "_",
}


@dataclass
class TileGrid:
    """Classified tiles of a single game frame.

    Attributes:
        tiles: Integer array (rows, cols) of TileType values
    """
    tiles: np.ndarray

    def __post_init__(self):
        if self.tiles.ndim != 2:
            raise ValueError(
                f"TileGrid needs a 2-D array, got shape {self.tiles.shape}"
            )

    @classmethod
    def filled(cls, rows: int, cols: int, tile_type: TileType = TileType.UNKNOWN) -> "TileGrid":
        """Create a grid with every tile set to one type."""
        return cls(np.full((rows, cols), int(tile_type), dtype=np.int8))

    @property
    def shape(self) -> tuple[int, int]:
        return self.tiles.shape

    @property
    def rows(self) -> int:
        return self.tiles.shape[0]

    @property
    def cols(self) -> int:
        return self.tiles.shape[1]

    def __getitem__(self, index: tuple[int, int]) -> TileType:
        row, col = index
        return TileType.from_value(self.tiles[row, col])

    def count(self, tile_type: TileType) -> int:
        """Number of tiles of the given type."""
        return int(np.count_nonzero(self.tiles == int(tile_type)))

    def positions(self, tile_type: TileType) -> list[tuple[int, int]]:
        """(row, col) of every tile of the given type, row-major order."""
        rows, cols = np.nonzero(self.tiles == int(tile_type))
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def find_pacman(self) -> Optional[tuple[int, int]]:
        """Position of the first pacman tile, or None if pacman isn't visible."""
        positions = self.positions(TileType.PACMAN)
        return positions[0] if positions else None

    def remaining_pellets(self) -> int:
        """Regular and power pellets still on the board."""
        return self.count(TileType.PELLET) + self.count(TileType.POWER_PELLET)

    def frightened(self) -> bool:
        """Whether any frightened ghost is on the board."""
        return self.count(TileType.FRIGHTENED_GHOST) > 0

    def summary(self) -> dict[str, int]:
        """Tile counts keyed by lowercase type name, for types that are present."""
        values, counts = np.unique(self.tiles, return_counts=True)
        return {
            TileType.from_value(v).name.lower(): int(n)
            for v, n in zip(values, counts)
        }

    def to_text(self) -> str:
        """Render the grid with one character per tile."""
        return "\n".join(
            "".join(_TILE_CHARS[TileType.from_value(v)] for v in row)
            for row in self.tiles
        )
