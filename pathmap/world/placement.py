# pathmap/world/placement.py
import numpy as np

from pathmap.utils.game_rng import GameRNG


def cell_width(x_max_size: float, max_width: int) -> float:
    return x_max_size / max_width


def place_node(
    floor: int,
    column: int,
    max_width: int,
    x_max_size: float,
    y_padding: float,
    rng: GameRNG,
) -> np.ndarray:
    """
    Returns the board position of the node at ``(floor, column)``.
    The base is the cell's center, jittered by up to a quarter cell in X
    (drawn first) and a quarter floor spacing in Z.
    """
    x_size = cell_width(x_max_size, max_width)
    x_pos = (x_size * column) + (x_size / 2.0)
    z_pos = y_padding * floor

    # Random padding
    x_pos += rng.get_float(-x_size / 4.0, x_size / 4.0)
    z_pos += rng.get_float(-y_padding / 4.0, y_padding / 4.0)

    return np.array([x_pos, 0.0, z_pos], dtype=np.float64)
