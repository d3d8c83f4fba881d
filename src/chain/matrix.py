from __future__ import annotations

import operator

import numpy as np


class TransitionMatrix:
    """
    Square matrix of one-step transition probabilities.

    Entry [i, j] is the probability of moving from state i to state j.
    Only shape and finiteness are checked here; non-negativity and unit row
    sums are enforced by normalization, not by construction.
    """

    def __init__(self, probabilities) -> None:
        p = np.array(probabilities, dtype=float)
        if p.ndim != 2 or p.shape[0] != p.shape[1]:
            raise ValueError("Transition matrix must be a square 2D array")
        if p.shape[0] < 1:
            raise ValueError("Transition matrix must have at least one state")
        if not np.all(np.isfinite(p)):
            raise ValueError("Transition matrix must contain finite values")

        self.P = p

    @property
    def n_states(self) -> int:
        return self.P.shape[0]

    def _check_index(self, i: int) -> int:
        # numpy wraps negative indices; fractional indices are rejected, not truncated
        i = operator.index(i)
        if i < 0:
            raise IndexError(f"state index {i} is out of bounds for {self.n_states} states")
        return i

    def __getitem__(self, key: tuple[int, int]) -> float:
        i, j = key
        return float(self.P[self._check_index(i), self._check_index(j)])

    def row(self, i: int) -> np.ndarray:
        return self.P[self._check_index(i)]

    def as_array(self) -> np.ndarray:
        return self.P.copy()

    def contains_negative_value(self) -> bool:
        return bool(np.any(self.P < 0.0))

    def normalize_rows(self, total: float = 1.0) -> TransitionMatrix:
        """
        Return a copy whose rows each sum to `total`.

        Rows summing to zero have no direction to rescale along and are
        returned unchanged.
        """
        sums = self.P.sum(axis=1, keepdims=True)
        scale = np.divide(total, sums, out=np.ones_like(sums), where=sums != 0.0)
        return TransitionMatrix(self.P * scale)

    def __repr__(self) -> str:
        return f"TransitionMatrix(n_states={self.n_states})"
