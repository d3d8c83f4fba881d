from __future__ import annotations

from typing import Any, Callable, Generic, Sequence, TypeVar

import numpy as np

from src.chain.markov import MarkovChain
from src.chain.matrix import TransitionMatrix
from src.chain.random_source import RandomSource

T = TypeVar("T")

# actions[i][j] fires when a walk moves from state i to state j.
# Tables are not checked against the matrix shape; a missing edge raises
# IndexError when it is first traversed.
ActionTable = Sequence[Sequence[Callable[[], Any]]]
ValueActionTable = Sequence[Sequence[Callable[[T], T]]]
DelegateTable = Sequence[Sequence[Callable[[Any], Any]]]


class MarkovActionChain(MarkovChain):
    """
    Markov chain that calls a zero-argument action on every transition.
    """

    def __init__(
        self,
        transition_matrix: TransitionMatrix | np.ndarray,
        actions: ActionTable,
        random_source: RandomSource | None = None,
    ):
        super().__init__(transition_matrix, random_source)
        self.actions = actions

    def run(self, start_state: int = 0) -> None:
        for state, nxt in self.walk(start_state):
            self.actions[state][nxt]()


class MarkovValueChain(MarkovChain, Generic[T]):
    """
    Markov chain threading a value through per-transition functions.

    Every run starts from `begin_value`; each traversed edge replaces
    `last_value` with actions[state][next](last_value). The optional quit
    condition sees the current value after a transition is drawn and before
    its action fires, so a True result stops the walk with that action
    unfired.
    """

    def __init__(
        self,
        transition_matrix: TransitionMatrix | np.ndarray,
        actions: ValueActionTable[T],
        begin_value: T,
        random_source: RandomSource | None = None,
    ):
        super().__init__(transition_matrix, random_source)
        self.actions = actions
        self.begin_value = begin_value
        self.last_value = begin_value

    def run(
        self,
        start_state: int = 0,
        quit_condition: Callable[[T], bool] | None = None,
    ) -> T:
        self.last_value = self.begin_value

        for state, nxt in self.walk(start_state):
            if quit_condition is not None and quit_condition(self.last_value):
                break
            self.last_value = self.actions[state][nxt](self.last_value)

        return self.last_value


class MarkovDelegateChain(MarkovChain):
    """
    Markov chain passing each delegate's response to the next delegate.

    Delegates take one argument of any type and may return any type; the
    first delegate of a run receives None.
    """

    def __init__(
        self,
        transition_matrix: TransitionMatrix | np.ndarray,
        delegates: DelegateTable,
        random_source: RandomSource | None = None,
    ):
        super().__init__(transition_matrix, random_source)
        self.delegates = delegates
        self.last_response: Any = None

    def run(self, start_state: int = 0) -> Any:
        self.last_response = None
        for state, nxt in self.walk(start_state):
            self.last_response = self.delegates[state][nxt](self.last_response)
        return self.last_response
