from pathmap.utils.game_rng import GameRNG
from pathmap.utils.logging_utils import setup_logging

__all__ = ["GameRNG", "setup_logging"]
