from src.chain.actions import MarkovActionChain, MarkovDelegateChain, MarkovValueChain
from src.chain.exceptions import (
    InvalidMarkovOperationError,
    MarkovError,
    NegativeProbabilityError,
)
from src.chain.markov import MarkovChain
from src.chain.matrix import TransitionMatrix
from src.chain.random_source import NumpyRandomSource, RandomSource, SequenceRandomSource

__all__ = [
    "MarkovChain",
    "MarkovActionChain",
    "MarkovValueChain",
    "MarkovDelegateChain",
    "TransitionMatrix",
    "RandomSource",
    "NumpyRandomSource",
    "SequenceRandomSource",
    "MarkovError",
    "InvalidMarkovOperationError",
    "NegativeProbabilityError",
]
