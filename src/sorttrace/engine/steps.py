"""
Step snapshots and the append-only recorder that produces them.

A run of the sort engine is an ordered list of `Step` objects. Each Step is a
frozen value: the array, the highlighted indices, and the sorted-index set are
copied at append time, so the working array can keep mutating without
rewriting history.

Public API (stable):
    ActiveAlgorithm, Strategy, StepStats, Step, StepRecorder, INSERTION_THRESHOLD
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Tuple, Union

__all__ = [
    "INSERTION_THRESHOLD",
    "ActiveAlgorithm",
    "Strategy",
    "StepStats",
    "Step",
    "StepRecorder",
]

# Subarrays of this size or smaller are handed to insertion sort by the hybrid strategy.
INSERTION_THRESHOLD: int = 10


class ActiveAlgorithm(str, Enum):
    """Which sub-algorithm produced a step."""

    QUICKSORT = "quicksort"
    INSERTION = "insertion"
    COMPLETE = "complete"


class Strategy(str, Enum):
    """Strategy selector for one engine run."""

    HYBRID = "hybrid"
    QUICKSORT = "quicksort"
    INSERTION = "insertion"

    @classmethod
    def parse(cls, value: Union["Strategy", str]) -> "Strategy":
        """
        Resolve a selector from an enum member or its string name.

        Raises
        ------
        ValueError
            If `value` does not name a known strategy. Never falls back to a default.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"strategy must be a string or Strategy; got {value!r}")
        key = value.strip().lower()
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(
            f"Unsupported strategy: {value!r}. Supported: {[m.value for m in cls]}"
        )


@dataclass(frozen=True)
class StepStats:
    comparisons: int
    swaps: int


@dataclass(frozen=True)
class Step:
    array: Tuple[int, ...]
    comparing: Tuple[int, ...]
    sorted: FrozenSet[int]
    active_algorithm: ActiveAlgorithm
    message: str
    stats: StepStats

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready view of the step (sorted indices in ascending order)."""
        return {
            "array": list(self.array),
            "comparing": list(self.comparing),
            "sorted": sorted(self.sorted),
            "activeAlgorithm": self.active_algorithm.value,
            "message": self.message,
            "stats": {
                "comparisons": self.stats.comparisons,
                "swaps": self.stats.swaps,
            },
        }


class StepRecorder:
    """
    Append-only log of steps plus the running comparison/swap counters.

    One recorder belongs to one engine instance; nothing here is process-global.
    """

    def __init__(self) -> None:
        self._steps: List[Step] = []
        self._comparisons = 0
        self._swaps = 0

    @property
    def comparisons(self) -> int:
        return self._comparisons

    @property
    def swaps(self) -> int:
        return self._swaps

    def reset(self) -> None:
        # Start a fresh list rather than clearing: a caller may still hold the previous log.
        self._steps = []
        self._comparisons = 0
        self._swaps = 0

    def record_comparison(self) -> None:
        self._comparisons += 1

    def record_swap(self) -> None:
        self._swaps += 1

    def append(
        self,
        array: Iterable[int],
        comparing: Iterable[int],
        sorted_indices: Iterable[int],
        active_algorithm: ActiveAlgorithm,
        message: str,
    ) -> Step:
        """
        Snapshot the given state with the current counters and append it.

        `array`, `comparing` and `sorted_indices` are copied; the caller may keep
        mutating its own objects afterwards.
        """
        if not message:
            raise ValueError("step message must be non-empty")
        step = Step(
            array=tuple(array),
            comparing=tuple(comparing),
            sorted=frozenset(sorted_indices),
            active_algorithm=ActiveAlgorithm(active_algorithm),
            message=message,
            stats=StepStats(comparisons=self._comparisons, swaps=self._swaps),
        )
        self._steps.append(step)
        return step

    def steps(self) -> Tuple[Step, ...]:
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)
