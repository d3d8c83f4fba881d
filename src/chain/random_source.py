from __future__ import annotations

from typing import Iterable, Protocol

import numpy as np


class RandomSource(Protocol):
    def next_double(self) -> float:
        """
        Uniform draw in [0, 1).
        """
        ...


class NumpyRandomSource:
    """
    Default random source backed by numpy's Generator.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.rng = np.random.default_rng(seed)

    def next_double(self) -> float:
        return float(self.rng.random())


class SequenceRandomSource:
    """
    Replays a fixed list of draws, cycling when exhausted.
    """

    def __init__(self, draws: Iterable[float]) -> None:
        values = [float(d) for d in draws]
        if not values:
            raise ValueError("draws must be non-empty")
        for d in values:
            if not 0.0 <= d < 1.0:
                raise ValueError(f"draws must lie in [0, 1), got {d}")
        self.draws = values
        self._pos = 0

    def next_double(self) -> float:
        d = self.draws[self._pos % len(self.draws)]
        self._pos += 1
        return d
