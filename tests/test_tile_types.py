"""Tests for the TileType vocabulary."""

from __future__ import annotations

import pytest

from pacman_agent.game.tile_types import TileType


class TestEncoding:
    """Integer encoding of the tile types."""

    def test_fourteen_members(self):
        """The vocabulary is closed at fourteen tile types."""
        assert len(TileType) == 14

    def test_values_distinct_and_contiguous(self):
        """Values are distinct and cover 0 to 13."""
        assert sorted(int(t) for t in TileType) == list(range(14))

    def test_unknown_is_zero(self):
        """UNKNOWN is the zero value."""
        assert TileType.UNKNOWN == 0

    @pytest.mark.parametrize(
        "tile_type,value",
        [
            (TileType.PACMAN, 1),
            (TileType.WALL, 2),
            (TileType.BLANK, 3),
            (TileType.FRUIT, 4),
            (TileType.BLINKY, 5),
            (TileType.INKY, 6),
            (TileType.PINKY, 7),
            (TileType.CLYDE, 8),
            (TileType.FRIGHTENED_GHOST, 9),
            (TileType.PELLET, 10),
            (TileType.POWER_PELLET, 11),
            (TileType.TEXT, 12),
            (TileType.IGNORE, 13),
        ],
    )
    def test_stable_values(self, tile_type, value):
        """Each tile type keeps its fixed value."""
        assert int(tile_type) == value

    def test_from_value(self):
        """Integers convert back to tile types."""
        assert TileType.from_value(11) is TileType.POWER_PELLET

    @pytest.mark.parametrize("value", [-1, 14, 255])
    def test_from_value_out_of_range(self, value):
        """Values outside the vocabulary become UNKNOWN."""
        assert TileType.from_value(value) is TileType.UNKNOWN


class TestDescriptions:
    """Human-readable names."""

    def test_descriptions(self):
        """Descriptions match the display names."""
        assert TileType.PACMAN.description == "PacMan"
        assert TileType.FRIGHTENED_GHOST.description == "Frightened Ghost"
        assert TileType.POWER_PELLET.description == "Power Pellet"
        assert TileType.UNKNOWN.description == "Unknown"

    def test_ignore_has_empty_description(self):
        """IGNORE has no display name."""
        assert TileType.IGNORE.description == ""


class TestGroups:
    """Tile type groupings."""

    def test_all_tile_types_excludes_ignore(self):
        """All classifiable types run from UNKNOWN to TEXT."""
        types = TileType.all_tile_types()
        assert len(types) == 13
        assert types[0] is TileType.UNKNOWN
        assert types[-1] is TileType.TEXT
        assert TileType.IGNORE not in types

    def test_ghosts(self):
        """The four ghosts, without the frightened one."""
        assert TileType.ghosts() == [
            TileType.BLINKY, TileType.INKY, TileType.PINKY, TileType.CLYDE,
        ]

    def test_is_ghost(self):
        """Frightened ghosts are ghosts too."""
        assert TileType.FRIGHTENED_GHOST.is_ghost
        assert TileType.CLYDE.is_ghost
        assert not TileType.PACMAN.is_ghost

    def test_is_collectible(self):
        """Pellets and fruit can be eaten."""
        collectible = {t for t in TileType if t.is_collectible}
        assert collectible == {TileType.PELLET, TileType.POWER_PELLET, TileType.FRUIT}
