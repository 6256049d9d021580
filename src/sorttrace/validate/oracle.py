"""
Ground truth for the final array of a run.

Python's built-in `sorted()` is the oracle: every strategy's last step must
hold exactly `oracle_sort(input)`.
"""

from __future__ import annotations

from typing import List, Sequence

ORACLE_NAME: str = "python_sorted_timsort"

__all__ = ["ORACLE_NAME", "oracle_sort", "equals_oracle"]


def oracle_sort(a: Sequence[int]) -> List[int]:
    """Return a new nondecreasing list with the elements of `a`; `a` is left untouched."""
    return sorted(a)


def equals_oracle(a: Sequence[int], out: Sequence[int]) -> bool:
    """True iff `out` equals the oracle's answer for input `a`, element for element."""
    return list(out) == oracle_sort(a)
