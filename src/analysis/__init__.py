from src.analysis.frequencies import empirical_next_state_frequencies, summarize_walks

__all__ = [
    "empirical_next_state_frequencies",
    "summarize_walks",
]
