from __future__ import annotations


class MarkovError(ValueError):
    pass


class InvalidMarkovOperationError(MarkovError):
    """
    Raised for structurally invalid requests, e.g. an empty path.
    """


class NegativeProbabilityError(MarkovError):
    """
    Raised when a transition matrix holding negative entries is normalized.
    """
