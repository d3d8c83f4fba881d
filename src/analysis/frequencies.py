from __future__ import annotations

import numpy as np
import pandas as pd

from src.chain.markov import MarkovChain


def empirical_next_state_frequencies(
    chain: MarkovChain,
    state: int,
    n_draws: int,
) -> pd.DataFrame:
    """
    Draw the next state from `state` n_draws times and compare the observed
    frequencies against the matrix row.

    Columns: state, count, empirical, expected. Draws with no feasible
    transition are reported on a final row with state = -1.
    """
    if n_draws < 1:
        raise ValueError("n_draws must be >= 1")

    n = chain.n_states
    counts = np.zeros(n + 1, dtype=int)
    for _ in range(n_draws):
        nxt = chain.sample(state)
        counts[n if nxt is None else nxt] += 1

    # sampling returns the first column whose cumulative mass exceeds the draw
    reach = np.maximum.accumulate(np.clip(np.cumsum(chain.matrix.row(state)), 0.0, 1.0))
    expected = np.diff(np.concatenate([[0.0], reach]))
    expected = np.append(expected, 1.0 - expected.sum())

    out = pd.DataFrame(
        {
            "state": list(range(n)) + [-1],
            "count": counts,
            "empirical": counts / float(n_draws),
            "expected": expected,
        }
    )
    if out["count"].iloc[-1] == 0 and np.isclose(out["expected"].iloc[-1], 0.0):
        out = out.iloc[:-1]
    return out


def summarize_walks(lengths: np.ndarray) -> dict[str, float]:
    x = np.asarray(lengths, dtype=float)
    if x.ndim != 1 or len(x) < 1:
        raise ValueError("lengths must be a non-empty 1D array")

    def pct(p: float) -> float:
        return float(np.percentile(x, p))

    return {
        "n_walks": int(len(x)),
        "mean": float(np.mean(x)),
        "std": float(np.std(x)),
        "p5": pct(5),
        "p50": pct(50),
        "p95": pct(95),
        "max": float(np.max(x)),
    }
