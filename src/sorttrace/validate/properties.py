"""
Value-level property checks on arrays.

Public API (stable):
    is_nondecreasing(xs) -> bool
    first_nondecreasing_violation_index(xs) -> int | None
    is_permutation(a, b) -> bool
    permutation_counter_diff(a, b) -> dict[int, int]
    assert_no_mutation(before, after) -> None

Whole-trace checks built on these live in `sorttrace.validate.trace`.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Optional, Sequence

__all__ = [
    "is_nondecreasing",
    "first_nondecreasing_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "assert_no_mutation",
]


def is_nondecreasing(xs: Sequence[int]) -> bool:
    """Return True iff xs[i] <= xs[i+1] for all i."""
    return first_nondecreasing_violation_index(xs) is None


def first_nondecreasing_violation_index(xs: Sequence[int]) -> Optional[int]:
    """
    Return the first index i where xs[i] > xs[i+1], or None if nondecreasing.

        i = first_nondecreasing_violation_index(out)
        assert i is None, f"not nondecreasing at i={i}: {out[i]} > {out[i+1]}"
    """
    for i in range(len(xs) - 1):
        if xs[i] > xs[i + 1]:
            return i
    return None


def is_permutation(a: Sequence[int], b: Sequence[int]) -> bool:
    """True iff `a` and `b` hold the same multiset of values."""
    return len(a) == len(b) and Counter(a) == Counter(b)


def permutation_counter_diff(a: Sequence[int], b: Sequence[int]) -> Dict[int, int]:
    """
    Map value -> (count in a) - (count in b), omitting zero differences.

    An empty dict means `a` and `b` are permutations of each other.
    """
    diff = Counter(a)
    diff.subtract(Counter(b))
    return {k: d for k, d in diff.items() if d != 0}


def assert_no_mutation(before: Sequence[int], after: Sequence[int]) -> None:
    """Raise AssertionError naming the first difference if `after` != `before`."""
    if len(before) != len(after):
        raise AssertionError(
            f"Input mutated: length changed from {len(before)} to {len(after)}"
        )
    for i, (x, y) in enumerate(zip(before, after)):
        if x != y:
            raise AssertionError(f"Input mutated at index {i}: before={x}, after={y}")
