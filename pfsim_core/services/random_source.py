from __future__ import annotations

import math
from typing import Optional

import numpy as np


class BoxMullerNormal:
    """
    Standard normal variates via the Box-Muller transform over a seedable
    numpy Generator: z = sqrt(-2 ln u) * cos(2 pi v).
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, seed: Optional[int] = None):
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    def draw(self) -> float:
        u = self._rng.random()
        while u == 0.0:
            u = self._rng.random()
        v = self._rng.random()
        return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)

    def standard_normal(self, size: int) -> np.ndarray:
        u = self._rng.random(size)
        zeros = u == 0.0
        while zeros.any():
            u[zeros] = self._rng.random(int(zeros.sum()))
            zeros = u == 0.0
        v = self._rng.random(size)
        return np.sqrt(-2.0 * np.log(u)) * np.cos(2.0 * np.pi * v)
