"""Script interpretation and simulation engine for a grid dungeon game."""

__version__ = "0.1.0"
