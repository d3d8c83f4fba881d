from __future__ import annotations

import argparse
from dataclasses import dataclass

import numpy as np
import pandas as pd

from src.analysis.frequencies import summarize_walks
from src.chain.actions import MarkovValueChain
from src.chain.random_source import NumpyRandomSource
from src.config import PROJECT_ROOT, settings
from src.plotting import get_pyplot, save_figure
from src.runtime_utils import add_common_walk_args, write_run_metadata


@dataclass(frozen=True)
class WalkTally:
    steps: int
    winnings: int
    state: int


def gamblers_ruin_matrix(n_states: int, p_up: float) -> np.ndarray:
    """
    Gambler's ruin chain: 0 and n_states - 1 absorb, inner states move
    one step up with p_up and one step down otherwise.
    """
    if n_states < 3:
        raise ValueError("n_states must be >= 3")
    if not 0.0 <= p_up <= 1.0:
        raise ValueError("p_up must be in [0, 1]")

    P = np.zeros((n_states, n_states), dtype=float)
    P[0, 0] = 1.0
    P[-1, -1] = 1.0
    for s in range(1, n_states - 1):
        P[s, s + 1] = p_up
        P[s, s - 1] = 1.0 - p_up
    return P


def build_actions(n_states: int) -> list[list]:
    def make_step(target: int, delta: int):
        def step(t: WalkTally) -> WalkTally:
            return WalkTally(steps=t.steps + 1, winnings=t.winnings + delta, state=target)
        return step

    return [[make_step(j, j - i) for j in range(n_states)] for i in range(n_states)]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Gambler's ruin walks driven by a value action chain.")
    add_common_walk_args(parser, default_start_state=2)
    parser.add_argument("--n-states", type=int, default=5)
    parser.add_argument("--p-up", type=float, default=0.5)
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    plt = None if args.no_plots else get_pyplot()

    P = gamblers_ruin_matrix(args.n_states, args.p_up)
    chain: MarkovValueChain[WalkTally] = MarkovValueChain(
        P,
        actions=build_actions(args.n_states),
        begin_value=WalkTally(steps=0, winnings=0, state=args.start_state),
        random_source=NumpyRandomSource(args.seed),
    )

    # absorbing states self-loop forever, so stop once one is entered
    def absorbed(t: WalkTally) -> bool:
        return chain.is_absorbing(t.state)

    records = []
    for i in range(args.n_walks):
        tally = chain.run(start_state=args.start_state, quit_condition=absorbed)
        records.append((i, tally.steps, tally.winnings, tally.state))

    out = pd.DataFrame(records, columns=["walk", "steps", "winnings", "final_state"])

    stats = summarize_walks(out["steps"].to_numpy())
    expected_steps = chain.average_steps(args.start_state)
    ruin_prob = float(np.mean(out["final_state"] == 0))

    print("=== Walk length summary ===")
    for k, v in stats.items():
        print(f"{k:>10}: {v:.4f}" if isinstance(v, float) else f"{k:>10}: {v}")
    print(f"{'expected':>10}: {expected_steps:.4f}")
    print(f"{'Pr(ruin)':>10}: {ruin_prob:.4f}")

    csv_path = settings.output_dir / "walk_demo_results.csv"
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    out.to_csv(csv_path, index=False)
    print("Saved CSV:", csv_path)

    if not args.no_plots:
        plt.hist(out["steps"], bins=40)
        plt.axvline(expected_steps)
        plt.title(f"Steps to absorption from state {args.start_state}")
        plt.xlabel("Steps")
        plt.ylabel("Count")
        out_path = save_figure(plt, settings.output_dir / "walk_lengths.png")
        print("Saved plot:", out_path)

    summary = {
        **stats,
        "expected_steps": float(expected_steps),
        "ruin_probability": ruin_prob,
    }
    metadata_path = write_run_metadata(
        output_dir=settings.output_dir,
        run_name="walk_demo",
        args=args,
        summary=summary,
        project_root=PROJECT_ROOT,
    )
    print("Saved metadata:", metadata_path)


if __name__ == "__main__":
    main()
