"""Pac-Man agent: reads the game board from a captured window."""

__version__ = "0.1.0"
