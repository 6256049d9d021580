"""
Whole-run checks for a recorded step log.

`check_run(values, steps)` returns one readable message per violated
invariant (an empty list means the run is valid). It covers:

- the log is non-empty and ends with a `complete` step
- the first step shows the input, the last one the oracle's sorted array
- every step has the input's length
- comparison/swap counters start at 0 and never decrease
- the sorted-index set never loses an index and covers the whole range
  only on the last step
- highlighted and sorted indices lie in [0, n), at most two highlights
- every message is non-empty

Violations are reported, not raised, so the experiment runner can record them;
`assert_valid_run` is the raising variant for tests.
"""

from __future__ import annotations

from typing import List, Sequence

from sorttrace.engine import ActiveAlgorithm, Step

from .oracle import oracle_sort
from .properties import permutation_counter_diff

__all__ = ["check_run", "assert_valid_run"]


def check_run(values: Sequence[int], steps: Sequence[Step]) -> List[str]:
    problems: List[str] = []
    if not steps:
        return ["step log is empty"]

    n = len(values)
    full = frozenset(range(n))
    first, last = steps[0], steps[-1]

    if list(first.array) != list(values):
        problems.append("first step does not show the input array")
    if first.stats.comparisons != 0 or first.stats.swaps != 0:
        problems.append(f"first step counters are not zero: {first.stats}")

    if last.active_algorithm is not ActiveAlgorithm.COMPLETE:
        problems.append(f"last step is tagged {last.active_algorithm.value!r}, not 'complete'")
    if list(last.array) != oracle_sort(values):
        diff = permutation_counter_diff(last.array, values)
        if diff:
            problems.append(f"final array is not a permutation of the input: {diff}")
        else:
            problems.append("final array is not sorted")
    if last.sorted != full:
        problems.append("last step does not mark every index sorted")

    prev = None
    for k, step in enumerate(steps):
        if len(step.array) != n:
            problems.append(f"step {k}: array length {len(step.array)} != {n}")
        if not step.message:
            problems.append(f"step {k}: empty message")
        if len(step.comparing) > 2:
            problems.append(f"step {k}: {len(step.comparing)} highlighted indices")
        bad = [i for i in (*step.comparing, *step.sorted) if not 0 <= i < n]
        if bad:
            problems.append(f"step {k}: indices out of range {sorted(set(bad))}")
        if step.stats.comparisons < 0 or step.stats.swaps < 0:
            problems.append(f"step {k}: negative counters {step.stats}")
        if n and k < len(steps) - 1 and step.sorted == full:
            problems.append(f"step {k}: whole range marked sorted before the last step")

        if prev is not None:
            if step.stats.comparisons < prev.stats.comparisons:
                problems.append(f"step {k}: comparisons decreased")
            if step.stats.swaps < prev.stats.swaps:
                problems.append(f"step {k}: swaps decreased")
            lost = prev.sorted - step.sorted
            if lost:
                problems.append(f"step {k}: indices left the sorted set {sorted(lost)}")
        prev = step

    return problems


def assert_valid_run(values: Sequence[int], steps: Sequence[Step]) -> None:
    problems = check_run(values, steps)
    if problems:
        raise AssertionError("invalid run:\n  " + "\n  ".join(problems))
