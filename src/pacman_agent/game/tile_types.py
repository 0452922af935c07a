"""Tile categories of the Pac-Man game board."""

from enum import IntEnum


class TileType(IntEnum):
    """Enumeration of all of the different tile types.

    The integer values are stable: they index the vision model's outputs and
    are what gets stored in a TileGrid.
    """
    UNKNOWN = 0
    PACMAN = 1  # contains a majority of pacman
    WALL = 2
    BLANK = 3
    FRUIT = 4  # cherry, apple, etc.

    # Ghosts, not frightened
    BLINKY = 5
    INKY = 6
    PINKY = 7
    CLYDE = 8

    FRIGHTENED_GHOST = 9  # any ghost
    PELLET = 10
    POWER_PELLET = 11  # causes ghosts to be frightened
    TEXT = 12  # text of any kind
    IGNORE = 13  # not important tile

    @property
    def description(self) -> str:
        """Human-readable name of the tile type."""
        return _DESCRIPTIONS.get(self, "")

    @property
    def is_ghost(self) -> bool:
        """Whether the tile holds a ghost, frightened or not."""
        return self in _GHOSTS or self == TileType.FRIGHTENED_GHOST

    @property
    def is_collectible(self) -> bool:
        """Whether pacman scores by eating this tile."""
        return self in (TileType.PELLET, TileType.POWER_PELLET, TileType.FRUIT)

    @classmethod
    def all_tile_types(cls) -> list["TileType"]:
        """All classifiable tile types, in value order.

        IGNORE is left out: it marks tiles that are never classified.
        """
        return [t for t in cls if t != cls.IGNORE]

    @classmethod
    def ghosts(cls) -> list["TileType"]:
        """The four ghosts in their normal state."""
        return list(_GHOSTS)

    @classmethod
    def from_value(cls, value: int) -> "TileType":
        """Convert an integer to a TileType, UNKNOWN if out of range."""
        try:
            return cls(int(value))
        except ValueError:
            return cls.UNKNOWN


_DESCRIPTIONS = {
    TileType.UNKNOWN: "Unknown",
    TileType.PACMAN: "PacMan",
    TileType.WALL: "Wall",
    TileType.BLANK: "Blank",
    TileType.FRUIT: "Fruit",
    TileType.BLINKY: "Blinky",
    TileType.INKY: "Inky",
    TileType.PINKY: "Pinky",
    TileType.CLYDE: "Clyde",
    TileType.FRIGHTENED_GHOST: "Frightened Ghost",
    TileType.PELLET: "Pellet",
    TileType.POWER_PELLET: "Power Pellet",
    TileType.TEXT: "Text",
}

_GHOSTS = (TileType.BLINKY, TileType.INKY, TileType.PINKY, TileType.CLYDE)
