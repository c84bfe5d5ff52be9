"""Procedural branching path maps: floors of points of interest joined by forward paths."""

__version__ = "0.1.0"
