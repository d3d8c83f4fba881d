from __future__ import annotations

from typing import Iterable, Iterator

import numpy as np

from src.chain.exceptions import InvalidMarkovOperationError, NegativeProbabilityError
from src.chain.matrix import TransitionMatrix
from src.chain.random_source import NumpyRandomSource, RandomSource
from src.config import settings


class MarkovChain:
    """
    Discrete-time Markov chain over states 0..N-1.

    Sampling uses the inverse-CDF scan over one row of the transition
    matrix, so rows that sum to less than one leave room for "no feasible
    next state", reported as None rather than raised.

    Not thread-safe: the random source is shared by every call.
    """

    def __init__(
        self,
        transition_matrix: TransitionMatrix | np.ndarray,
        random_source: RandomSource | None = None,
    ):
        if isinstance(transition_matrix, TransitionMatrix):
            self.matrix = transition_matrix
        else:
            self.matrix = TransitionMatrix(transition_matrix)
        self.random_source = random_source if random_source is not None else NumpyRandomSource()

    @property
    def n_states(self) -> int:
        return self.matrix.n_states

    # -----------------------------
    # Sampling
    # -----------------------------
    def _next_state(self, state: int) -> int | None:
        r = self.random_source.next_double()
        cumulative = np.cumsum(self.matrix.row(state))
        hits = np.flatnonzero(r < cumulative)
        if hits.size == 0:
            return None
        return int(hits[0])

    def sample(self, state: int, steps: int | None = None) -> int | None:
        """
        Draw the next state from `state`, or None if the row offers no
        feasible transition.

        With `steps`, sample repeatedly and return the last state reached.
        A walk that runs out of transitions part way stops advancing and
        still returns its last state, never None.
        """
        if steps is None:
            return self._next_state(state)
        if steps < 0:
            raise ValueError("steps must be >= 0")

        for _ in range(steps):
            nxt = self._next_state(state)
            if nxt is None:
                break
            state = nxt
        return state

    def try_sample(self, state: int, steps: int = 1) -> tuple[int | None, bool]:
        """
        Like sample(), but any step without a feasible transition fails the
        whole request: returns (None, False). Returns (state, True) otherwise.
        """
        if steps < 0:
            raise ValueError("steps must be >= 0")

        for _ in range(steps):
            nxt = self._next_state(state)
            if nxt is None:
                return None, False
            state = nxt
        return state, True

    def walk(self, start_state: int = 0) -> Iterator[tuple[int, int]]:
        """
        Yield (state, next_state) for every transition of a random walk.

        Ends only when a state has no feasible transition; consumers own
        any other stopping rule.
        """
        state = start_state
        while True:
            nxt = self._next_state(state)
            if nxt is None:
                return
            yield state, nxt
            state = nxt

    def simulate(self, n_steps: int, s0: int = 0) -> np.ndarray:
        """
        Visited states [s0, s1, ...] of a walk of at most n_steps steps.
        Shorter than n_steps + 1 when the walk runs out of transitions.
        """
        if n_steps < 0:
            raise ValueError("n_steps must be >= 0")

        states = [int(s0)]
        for _ in range(n_steps):
            nxt = self._next_state(states[-1])
            if nxt is None:
                break
            states.append(nxt)
        return np.asarray(states, dtype=int)

    # -----------------------------
    # Path probabilities
    # -----------------------------
    def transition_probability(self, start: int, next_state: int) -> float:
        return self.matrix[start, next_state]

    def path_probability(self, states: Iterable[int]) -> float:
        """
        Probability of the sequence states[0] -> states[1] -> ... -> states[-1].
        """
        it = iter(states)
        try:
            first = next(it)
        except StopIteration:
            raise InvalidMarkovOperationError("states cannot be empty") from None
        return self.path_probability_from(first, it)

    def path_probability_from(self, start: int, next_states: Iterable[int]) -> float:
        """
        Probability of start -> next_states[0] -> ... ; 1.0 for no next states.
        """
        result = 1.0
        current = start
        for nxt in next_states:
            result *= self.matrix[current, nxt]
            current = nxt
        return result

    # -----------------------------
    # Classification
    # -----------------------------
    def is_absorbing(self, state: int, tolerance: float = settings.absorbing_tolerance) -> bool:
        return abs(self.matrix[state, state] - 1.0) < tolerance

    def absorbing_states(self, tolerance: float = settings.absorbing_tolerance) -> list[int]:
        return [s for s in range(self.n_states) if self.is_absorbing(s, tolerance)]

    def is_recurrent(self, state: int) -> bool:
        raise NotImplementedError("recurrence classification is not implemented")

    def is_transient(self, state: int) -> bool:
        raise NotImplementedError("transience classification is not implemented")

    def average_steps(self, start_state: int = 0) -> float:
        """
        Expected number of steps before absorption, starting at start_state.

        Uses the fundamental matrix N = (I - Q)^-1 of the transient block Q;
        the expected absorption times are the row sums of N.
        """
        self.matrix.row(start_state)  # bounds
        absorbing = self.absorbing_states()
        if not absorbing:
            raise InvalidMarkovOperationError("chain has no absorbing states")
        if start_state in absorbing:
            return 0.0

        transient = [s for s in range(self.n_states) if s not in absorbing]
        p = self.matrix.as_array()
        # mass missing from a transient row ends the walk without absorption
        leaking = [s for s in transient if abs(p[s].sum() - 1.0) >= settings.absorbing_tolerance]
        if leaking:
            raise InvalidMarkovOperationError(
                f"transient states {leaking} do not sum to 1 and may never reach absorption"
            )
        q = p[np.ix_(transient, transient)]
        try:
            t = np.linalg.solve(np.eye(len(transient)) - q, np.ones(len(transient)))
        except np.linalg.LinAlgError:
            raise InvalidMarkovOperationError(
                "I - Q is singular: some transient states never reach absorption"
            ) from None
        if not np.all(np.isfinite(t)):
            raise InvalidMarkovOperationError("expected absorption times are not finite")

        return float(t[transient.index(start_state)])

    # -----------------------------
    # Normalization
    # -----------------------------
    def normalize(self) -> None:
        """
        Rescale every row to sum to 1. Rows summing to zero stay unchanged.
        """
        if self.matrix.contains_negative_value():
            raise NegativeProbabilityError("Matrix may not contain negative values")
        self.matrix = self.matrix.normalize_rows(1.0)
