import argparse
import json

import numpy as np
import pytest

from src.analysis.frequencies import empirical_next_state_frequencies, summarize_walks
from src.chain.markov import MarkovChain
from src.chain.random_source import NumpyRandomSource
from src.run_walk_demo import build_actions, gamblers_ruin_matrix, WalkTally
from src.runtime_utils import add_common_walk_args, metadata_path, write_run_metadata


def test_empirical_frequencies_converge_to_row():
    P = np.array([[0.7, 0.2, 0.1],
                  [0.3, 0.4, 0.3],
                  [0.2, 0.3, 0.5]], dtype=float)
    chain = MarkovChain(P, random_source=NumpyRandomSource(2024))

    for state in range(3):
        out = empirical_next_state_frequencies(chain, state=state, n_draws=20_000)
        assert out["count"].sum() == 20_000
        assert list(out["state"]) == [0, 1, 2]
        assert np.allclose(out["expected"], P[state])
        assert np.allclose(out["empirical"], out["expected"], atol=0.02)


def test_empirical_frequencies_report_missing_transitions():
    chain = MarkovChain(np.array([[0.25, 0.25], [0.5, 0.5]]), random_source=NumpyRandomSource(5))

    out = empirical_next_state_frequencies(chain, state=0, n_draws=10_000)

    assert list(out["state"]) == [0, 1, -1]
    assert np.isclose(out["expected"].iloc[-1], 0.5)
    assert np.isclose(out["empirical"].iloc[-1], 0.5, atol=0.03)


def test_empirical_frequencies_validate_draws():
    chain = MarkovChain(np.eye(2))
    with pytest.raises(ValueError, match="n_draws"):
        empirical_next_state_frequencies(chain, state=0, n_draws=0)


def test_summarize_walks():
    stats = summarize_walks(np.array([1, 2, 3, 4, 5]))
    assert stats["n_walks"] == 5
    assert np.isclose(stats["mean"], 3.0)
    assert np.isclose(stats["p50"], 3.0)
    assert stats["max"] == 5.0

    with pytest.raises(ValueError, match="non-empty"):
        summarize_walks(np.array([]))


def test_gamblers_ruin_matrix_and_actions():
    P = gamblers_ruin_matrix(5, 0.6)
    assert np.allclose(P.sum(axis=1), 1.0)
    assert P[2, 3] == 0.6
    assert np.isclose(P[2, 1], 0.4)

    actions = build_actions(5)
    t = actions[2][3](WalkTally(steps=0, winnings=0, state=2))
    assert t == WalkTally(steps=1, winnings=1, state=3)
    t = actions[3][2](t)
    assert t == WalkTally(steps=2, winnings=0, state=2)

    with pytest.raises(ValueError, match="n_states"):
        gamblers_ruin_matrix(2, 0.5)


def test_write_run_metadata(tmp_path):
    parser = add_common_walk_args(argparse.ArgumentParser())
    args = parser.parse_args(["--n-walks", "10", "--metadata-tag", "t1"])

    out_path = write_run_metadata(
        output_dir=tmp_path / "out",
        run_name="unit",
        args=args,
        summary={"mean": 1.5},
        project_root=tmp_path,
    )

    assert out_path == metadata_path(tmp_path / "out", "unit", "t1")
    assert out_path.name == "unit_metadata_t1.json"

    record = json.loads(out_path.read_text())
    assert record["run"] == "unit"
    assert record["cli"]["n_walks"] == 10
    assert "metadata_tag" not in record["cli"]
    assert record["summary"] == {"mean": 1.5}


def test_metadata_path_without_tag(tmp_path):
    assert metadata_path(tmp_path, "walk_demo").name == "walk_demo_metadata.json"
