"""Othello on a hexagonal board: rules, network play, computer players and a desktop server."""

__version__ = "0.98.0"