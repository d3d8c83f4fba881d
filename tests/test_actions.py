import numpy as np
import pytest

from src.chain.actions import MarkovActionChain, MarkovDelegateChain, MarkovValueChain
from src.chain.random_source import NumpyRandomSource, SequenceRandomSource


def _chain_0_1_2() -> np.ndarray:
    return np.array([[0.0, 1.0, 0.0],
                     [0.0, 0.0, 1.0],
                     [0.0, 0.0, 0.0]], dtype=float)


def test_action_chain_fires_each_traversed_edge() -> None:
    fired = []

    def record(edge):
        return lambda: fired.append(edge)

    actions = [[record((i, j)) for j in range(3)] for i in range(3)]
    chain = MarkovActionChain(_chain_0_1_2(), actions, random_source=SequenceRandomSource([0.5]))
    chain.run(0)

    assert fired == [(0, 1), (1, 2)]


def test_action_chain_run_from_dead_end_fires_nothing() -> None:
    fired = []
    actions = [[lambda: fired.append(1)] * 3 for _ in range(3)]
    chain = MarkovActionChain(_chain_0_1_2(), actions, random_source=SequenceRandomSource([0.5]))
    chain.run(2)

    assert fired == []


def test_value_chain_checks_quit_condition_before_each_action() -> None:
    calls = {"b": 0}

    def append_b(acc: str) -> str:
        calls["b"] += 1
        return acc + "b"

    P = np.array([[0.0, 1.0], [0.0, 1.0]], dtype=float)
    actions = [
        [lambda acc: acc + "x", lambda acc: acc + "a"],
        [lambda acc: acc + "y", append_b],
    ]
    chain = MarkovValueChain(P, actions, begin_value="", random_source=NumpyRandomSource(0))

    seen = []

    def stop(acc: str) -> bool:
        seen.append(acc)
        return len(acc) >= 2

    result = chain.run(0, quit_condition=stop)

    assert seen == ["", "a", "ab"]
    assert result == "ab"
    assert chain.last_value == "ab"
    assert calls["b"] == 1


def test_value_chain_resets_to_begin_value_each_run() -> None:
    P = np.array([[0.0, 1.0], [0.0, 0.0]], dtype=float)
    inc = lambda v: v + 1
    chain = MarkovValueChain(P, [[inc, inc], [inc, inc]], begin_value=10,
                             random_source=SequenceRandomSource([0.5]))

    assert chain.run(0) == 11
    assert chain.run(0) == 11
    assert chain.run(1) == 10


def test_value_chain_quit_condition_true_at_start_fires_nothing() -> None:
    P = np.array([[0.0, 1.0], [1.0, 0.0]], dtype=float)
    fail = lambda v: pytest.fail("action must not fire")
    chain = MarkovValueChain(P, [[fail, fail], [fail, fail]], begin_value=0)

    assert chain.run(0, quit_condition=lambda v: True) == 0


def test_value_chain_stops_on_absorption_with_state_aware_value() -> None:
    P = np.array([[0.5, 0.5], [0.0, 1.0]], dtype=float)

    def move(target):
        return lambda acc: (acc[0] + 1, target)

    actions = [[move(0), move(1)], [move(0), move(1)]]
    chain = MarkovValueChain(P, actions, begin_value=(0, 0), random_source=NumpyRandomSource(11))

    steps, state = chain.run(0, quit_condition=lambda acc: chain.is_absorbing(acc[1]))

    assert state == 1
    assert steps >= 1


def test_delegate_chain_threads_untyped_responses() -> None:
    received = []

    def first(x):
        received.append(x)
        return 42

    def second(x):
        received.append(x)
        return str(x) + "!"

    unused = lambda x: pytest.fail("unexpected edge")
    delegates = [[unused, first, unused],
                 [unused, unused, second],
                 [unused, unused, unused]]
    chain = MarkovDelegateChain(_chain_0_1_2(), delegates, random_source=SequenceRandomSource([0.5]))

    assert chain.run(0) == "42!"
    assert received == [None, 42]
    assert chain.last_response == "42!"


def test_delegate_chain_without_transitions_returns_none() -> None:
    chain = MarkovDelegateChain(np.zeros((1, 1)), [[lambda x: 1]])

    assert chain.run(0) is None


def test_undersized_action_table_fails_on_traversal() -> None:
    P = np.array([[0.0, 1.0], [0.0, 0.0]], dtype=float)
    chain = MarkovActionChain(P, [[lambda: None]], random_source=SequenceRandomSource([0.5]))

    with pytest.raises(IndexError):
        chain.run(0)


def test_delegate_chain_keeps_response_reached_before_failure() -> None:
    def boom(x):
        raise RuntimeError(f"failed after {x}")

    unused = lambda x: pytest.fail("unexpected edge")
    delegates = [[unused, lambda x: "first", unused],
                 [unused, unused, boom],
                 [unused, unused, unused]]
    chain = MarkovDelegateChain(_chain_0_1_2(), delegates, random_source=SequenceRandomSource([0.5]))
    chain.last_response = "stale"

    with pytest.raises(RuntimeError, match="failed after first"):
        chain.run(0)
    assert chain.last_response == "first"
