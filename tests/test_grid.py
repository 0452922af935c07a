"""Tests for TileGrid."""

from __future__ import annotations

import numpy as np
import pytest

from pacman_agent.game.grid import TileGrid
from pacman_agent.game.tile_types import TileType


@pytest.fixture
def board() -> TileGrid:
    """A 3 x 4 board:

    ####
    .Co.
    #G #
    """
    W, P, C, O, G, B = (
        TileType.WALL, TileType.PELLET, TileType.PACMAN,
        TileType.POWER_PELLET, TileType.FRIGHTENED_GHOST, TileType.BLANK,
    )
    rows = [
        [W, W, W, W],
        [P, C, O, P],
        [W, G, B, W],
    ]
    return TileGrid(np.array(rows, dtype=np.int8))


class TestTileGrid:
    """Querying classified boards."""

    def test_shape(self, board):
        """Rows and columns come from the array."""
        assert board.shape == (3, 4)
        assert (board.rows, board.cols) == (3, 4)

    def test_indexing(self, board):
        """Indexing returns TileType values."""
        assert board[1, 1] is TileType.PACMAN
        assert board[2, 2] is TileType.BLANK

    def test_indexing_out_of_range_value(self):
        """Cells holding no known tile type read as UNKNOWN."""
        grid = TileGrid(np.array([[99, int(TileType.WALL)]], dtype=np.int8))
        assert grid[0, 0] is TileType.UNKNOWN
        assert grid[0, 1] is TileType.WALL

    def test_count_and_positions(self, board):
        """Tiles are counted and located in row-major order."""
        assert board.count(TileType.WALL) == 6
        assert board.positions(TileType.PELLET) == [(1, 0), (1, 3)]

    def test_find_pacman(self, board):
        """Pacman's tile is found."""
        assert board.find_pacman() == (1, 1)

    def test_pacman_missing(self):
        """No pacman on the board gives None."""
        assert TileGrid.filled(2, 2, TileType.BLANK).find_pacman() is None

    def test_remaining_pellets(self, board):
        """Power pellets count as pellets."""
        assert board.remaining_pellets() == 3

    def test_frightened(self, board):
        """A frightened ghost on the board is reported."""
        assert board.frightened()
        assert not TileGrid.filled(2, 2, TileType.BLINKY).frightened()

    def test_summary(self, board):
        """Counts are keyed by type name."""
        assert board.summary() == {
            "pacman": 1, "wall": 6, "blank": 1, "frightened_ghost": 1,
            "pellet": 2, "power_pellet": 1,
        }

    def test_to_text(self, board):
        """Each tile renders as one character."""
        assert board.to_text() == "####\n.Co.\n#G #"

    def test_rejects_non_2d(self):
        """Grids must be two dimensional."""
        with pytest.raises(ValueError):
            TileGrid(np.zeros(5, dtype=np.int8))
