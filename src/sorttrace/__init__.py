"""
sorttrace: a hybrid quicksort/insertion sort that records a replayable trace.

    from sorttrace import sort
    steps = sort([5, 3, 8, 1], "hybrid")
"""

from .engine import ActiveAlgorithm, Step, StepStats, Strategy, sort

__version__ = "0.1.0"

__all__ = ["sort", "Step", "StepStats", "Strategy", "ActiveAlgorithm", "__version__"]
