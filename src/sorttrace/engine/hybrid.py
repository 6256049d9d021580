"""
Sort-and-record engine: hybrid quicksort/insertion sort with a replayable trace.

Three strategies run over a working copy of the input:
- "hybrid":    Lomuto quicksort; ranges of size <= INSERTION_THRESHOLD (10)
               switch to insertion sort.
- "quicksort": Lomuto quicksort all the way down.
- "insertion": insertion sort over the full range.

Every comparison, element move and decision point appends a `Step` to the
engine's recorder. The returned list always starts with a "Starting ..." step
and ends with a step tagged `complete`.

Public API (stable):
    sort(values, strategy="hybrid") -> list[Step]
    SortEngine().sort(values, strategy="hybrid") -> list[Step]

Conventions:
- Pivot is always the last element of the range (`array[high]`).
- Quicksort ranges are processed from an explicit work-list that pops the
  left range before the right one. The step order is the same as left-then-
  right recursion, but the Python stack stays flat on sorted or all-equal
  input where the partition depth is O(n).
- Insertion shifts count as swaps. Inside the shift loop every true
  `array[j] > key` test counts one comparison; after the loop one more
  comparison is counted only when `j >= low`, i.e. the loop ended on the value
  test and not on the lower bound.
- The lowest index of an insertion range is never marked by the pass itself;
  it joins the sorted set when the range closes. No step before the final one
  therefore covers the whole index range.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Set, Tuple, Union

import numpy as np

from .steps import INSERTION_THRESHOLD, ActiveAlgorithm, Step, StepRecorder, Strategy

__all__ = ["SortEngine", "sort"]

logger = logging.getLogger(__name__)

_QS = ActiveAlgorithm.QUICKSORT
_INS = ActiveAlgorithm.INSERTION

_START_MESSAGES = {
    Strategy.HYBRID: "Starting Hybrid Sort (QuickSort + Insertion Sort)",
    Strategy.QUICKSORT: "Starting QuickSort",
    Strategy.INSERTION: "Starting Insertion Sort",
}
_START_TAGS = {
    Strategy.HYBRID: _QS,
    Strategy.QUICKSORT: _QS,
    Strategy.INSERTION: _INS,
}


class SortEngine:
    """
    Runs one strategy at a time and records its trace.

    An instance is not meant to be shared between threads; build one per caller
    (the module-level `sort` does exactly that).
    """

    def __init__(self) -> None:
        self._recorder = StepRecorder()
        self._n = 0

    @property
    def recorder(self) -> StepRecorder:
        return self._recorder

    def sort(
        self, values: Sequence[int], strategy: Union[Strategy, str] = Strategy.HYBRID
    ) -> List[Step]:
        """
        Sort a copy of `values` with `strategy` and return the full step log.

        Parameters
        ----------
        values : sequence of int
            Input integers; never mutated. Duplicates and negatives are fine.
        strategy : Strategy | str
            "hybrid" (default), "quicksort" or "insertion".

        Returns
        -------
        list[Step]
            Non-empty, ordered log owned by the caller.

        Raises
        ------
        ValueError
            Unknown strategy.
        TypeError
            A value is not an integer.
        """
        selected = Strategy.parse(strategy)
        arr = _clone_ints(values)

        rec = self._recorder
        rec.reset()
        self._n = len(arr)
        sorted_idx: Set[int] = set()

        rec.append(arr, (), sorted_idx, _START_TAGS[selected], _START_MESSAGES[selected])

        if selected is Strategy.HYBRID:
            self._hybrid_sort(arr, 0, len(arr) - 1, sorted_idx)
        elif selected is Strategy.QUICKSORT:
            self._quicksort_only(arr, 0, len(arr) - 1, sorted_idx)
        else:
            self._insertion_only(arr, sorted_idx)

        rec.append(
            arr,
            (),
            range(len(arr)),
            ActiveAlgorithm.COMPLETE,
            f"Sorting complete! Comparisons: {rec.comparisons}, Swaps: {rec.swaps}",
        )
        steps = list(rec.steps())
        logger.debug(
            "%s run: n=%d steps=%d comparisons=%d swaps=%d",
            selected.value, len(arr), len(steps), rec.comparisons, rec.swaps,
        )
        return steps

    # ------------------------- strategies ------------------------- #

    def _hybrid_sort(self, arr: List[int], low: int, high: int, sorted_idx: Set[int]) -> None:
        work: List[Tuple[int, int]] = [(low, high)]
        while work:
            lo, hi = work.pop()
            if lo >= hi:
                self._close_trivial(lo, hi, sorted_idx)
                continue

            size = hi - lo + 1
            if size <= INSERTION_THRESHOLD:
                self._recorder.append(
                    arr, (), sorted_idx, _INS,
                    f"Switching to Insertion Sort (size {size} ≤ {INSERTION_THRESHOLD})",
                )
                self._insertion_sort(arr, lo, hi, sorted_idx)
                sorted_idx.update(range(lo, hi + 1))
                continue

            p = self._partition(arr, lo, hi, sorted_idx)
            # LIFO: push right first so the left range is handled first.
            work.append((p + 1, hi))
            work.append((lo, p - 1))

    def _quicksort_only(self, arr: List[int], low: int, high: int, sorted_idx: Set[int]) -> None:
        work: List[Tuple[int, int]] = [(low, high)]
        while work:
            lo, hi = work.pop()
            if lo >= hi:
                self._close_trivial(lo, hi, sorted_idx)
                continue
            p = self._partition(arr, lo, hi, sorted_idx)
            work.append((p + 1, hi))
            work.append((lo, p - 1))

    def _insertion_only(self, arr: List[int], sorted_idx: Set[int]) -> None:
        """
        Insertion sort over the whole array.

        Index 0 is not marked sorted before the pass; it joins with the rest of
        the range at closure. Intermediate steps therefore never show index 0 as
        sorted, unlike a viewer that marks the one-element prefix up front, and
        the full range first appears on the `complete` step.
        """
        high = len(arr) - 1
        self._insertion_sort(arr, 0, high, sorted_idx)
        sorted_idx.update(range(0, high + 1))

    # ------------------------- primitives ------------------------- #

    def _partition(self, arr: List[int], low: int, high: int, sorted_idx: Set[int]) -> int:
        """Lomuto partition of arr[low..high]; returns the pivot's final index."""
        self._check_range(low, high)
        rec = self._recorder
        pivot = arr[high]
        i = low - 1

        rec.append(arr, (high,), sorted_idx, _QS,
                   f"QuickSort: Selected pivot {pivot} at position {high}")

        for j in range(low, high):
            rec.record_comparison()
            rec.append(arr, (j, high), sorted_idx, _QS,
                       f"QuickSort: Comparing {arr[j]} with pivot {pivot}")
            if arr[j] < pivot:
                i += 1
                arr[i], arr[j] = arr[j], arr[i]
                rec.record_swap()
                rec.append(arr, (i, j), sorted_idx, _QS,
                           f"QuickSort: Swapped {arr[i]} and {arr[j]}")

        arr[i + 1], arr[high] = arr[high], arr[i + 1]
        rec.record_swap()
        sorted_idx.add(i + 1)
        rec.append(arr, (i + 1, high), sorted_idx, _QS,
                   f"QuickSort: Placed pivot {pivot} at final position {i + 1}")
        return i + 1

    def _insertion_sort(self, arr: List[int], low: int, high: int, sorted_idx: Set[int]) -> None:
        """In-place insertion sort of arr[low..high]."""
        if low < high:
            self._check_range(low, high)
        rec = self._recorder
        for i in range(low + 1, high + 1):
            key = arr[i]
            j = i - 1
            rec.append(arr, (i, j), sorted_idx, _INS,
                       f"Insertion Sort: Inserting element {key} into sorted position")

            while j >= low and arr[j] > key:
                rec.record_comparison()
                rec.record_swap()
                arr[j + 1] = arr[j]
                j -= 1
                # Second highlight clamps to j + 1 once j runs past the range.
                rec.append(arr, (j + 1, j if j >= low else j + 1), sorted_idx, _INS,
                           f"Insertion Sort: Shifting element {arr[j + 1]} right")

            if j >= low:
                rec.record_comparison()
            arr[j + 1] = key
            sorted_idx.add(i)
            rec.append(arr, (j + 1,), sorted_idx, _INS,
                       f"Insertion Sort: Placed {key} at position {j + 1}")

    # ------------------------- helpers ------------------------- #

    def _close_trivial(self, low: int, high: int, sorted_idx: Set[int]) -> None:
        if low == high:
            self._check_range(low, high)
            sorted_idx.add(low)

    def _check_range(self, low: int, high: int) -> None:
        if not (0 <= low <= high < self._n):
            raise IndexError(
                f"range [{low}, {high}] outside array of length {self._n}"
            )


def sort(values: Sequence[int], strategy: Union[Strategy, str] = Strategy.HYBRID) -> List[Step]:
    """Run `strategy` over `values` on a fresh engine and return the step log."""
    return SortEngine().sort(values, strategy)


def _clone_ints(values: Sequence[int]) -> List[int]:
    out: List[int] = []
    for pos, v in enumerate(values):
        # bool is an int subclass but never a meaningful array value here
        if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
            raise TypeError(f"values[{pos}] must be an integer; got {v!r}")
        out.append(int(v))
    return out
