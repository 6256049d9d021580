"""
Engine package public API.

Re-export the engine and step types so callers can write:
    from sorttrace.engine import sort, Step, Strategy
"""

from .hybrid import SortEngine, sort
from .steps import (
    INSERTION_THRESHOLD,
    ActiveAlgorithm,
    Step,
    StepRecorder,
    StepStats,
    Strategy,
)

__all__ = [
    "sort",
    "SortEngine",
    "Step",
    "StepStats",
    "StepRecorder",
    "Strategy",
    "ActiveAlgorithm",
    "INSERTION_THRESHOLD",
]
