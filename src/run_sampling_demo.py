from __future__ import annotations

import argparse

import numpy as np

from src.analysis.frequencies import empirical_next_state_frequencies
from src.chain.markov import MarkovChain
from src.chain.random_source import NumpyRandomSource
from src.config import PROJECT_ROOT, settings
from src.plotting import get_pyplot, save_figure
from src.runtime_utils import add_common_walk_args, write_run_metadata


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Empirical next-state frequencies vs. transition probabilities.")
    add_common_walk_args(parser, default_n_walks=settings.n_draws)
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    plt = None if args.no_plots else get_pyplot()

    # State 0 = "sunny", 1 = "cloudy", 2 = "rainy"
    P = np.array(
        [
            [0.70, 0.20, 0.10],
            [0.30, 0.40, 0.30],
            [0.20, 0.30, 0.50],
        ],
        dtype=float,
    )
    chain = MarkovChain(P, random_source=NumpyRandomSource(args.seed))

    out = empirical_next_state_frequencies(chain, state=args.start_state, n_draws=args.n_walks)
    out["abs_error"] = (out["empirical"] - out["expected"]).abs()
    print(out.to_string(index=False))

    path = chain.simulate(n_steps=10, s0=args.start_state)
    print("Sample path:", path.tolist())
    print("Path probability:", round(chain.path_probability(path), 8))

    if not args.no_plots:
        width = 0.4
        x = out["state"].to_numpy()
        plt.bar(x - width / 2, out["expected"], width=width, label="expected")
        plt.bar(x + width / 2, out["empirical"], width=width, label="empirical")
        plt.title(f"Next-state distribution from state {args.start_state}")
        plt.xlabel("Next state")
        plt.ylabel("Probability")
        plt.legend()
        out_path = save_figure(plt, settings.output_dir / "next_state_frequencies.png")
        print("Saved plot:", out_path)

    summary = {
        "n_draws": int(args.n_walks),
        "start_state": int(args.start_state),
        "max_abs_error": float(out["abs_error"].max()),
        "sample_path": path.tolist(),
    }
    metadata_path = write_run_metadata(
        output_dir=settings.output_dir,
        run_name="sampling_demo",
        args=args,
        summary=summary,
        project_root=PROJECT_ROOT,
    )
    print("Saved metadata:", metadata_path)


if __name__ == "__main__":
    main()
