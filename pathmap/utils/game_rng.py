from __future__ import annotations

"""Seedable random source used by the map generator.

Everything that rolls dice during generation goes through :class:`GameRNG`
so that a single integer seed reproduces a whole board.  The generator only
needs uniform floats, inclusive integer ranges and the ability to reseed
between attempts.
"""

import random
from typing import Any, Optional, Sequence

import numpy as np

SEED_MAX = 2**32 - 1


class GameRNG:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else random.randint(0, SEED_MAX)
        self.rng = np.random.default_rng(self.initial_seed)

    # ------------------------------------------------------------------
    # basic random helpers
    # ------------------------------------------------------------------
    def get_int(self, a: int, b: int) -> int:
        """Uniform integer in ``[a, b]`` (both ends inclusive)."""
        if a > b:
            raise ValueError("a <= b")
        return int(self.rng.integers(a, b + 1))

    def get_float(self, a: float = 0.0, b: float = 1.0) -> float:
        """Uniform float in ``[a, b)``."""
        if a > b:
            raise ValueError("a <= b")
        val = float(self.rng.random())
        return a + (b - a) * val

    def get_seed(self) -> int:
        """Draw a fresh seed suitable for another :class:`GameRNG`."""
        return self.get_int(0, SEED_MAX)

    def choice(self, items: Sequence[Any]) -> Any:
        if not items:
            raise ValueError("items empty")
        return items[self.get_int(0, len(items) - 1)]

    def reset(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else random.randint(0, SEED_MAX)
        self.rng = np.random.default_rng(self.initial_seed)


__all__ = ["GameRNG", "SEED_MAX"]
