"""
Correctness tests for every strategy against the oracle (Python's built-in sorted).

What we check, per strategy:
- Final array exactly matches the oracle
- The whole run satisfies the trace invariants (`check_run`)
- No input mutation
- Determinism (same input -> identical step log)
- All strategies agree on the final array
"""

from __future__ import annotations

from typing import List

import pytest
from hypothesis import given, settings, strategies as st

from sorttrace.engine import Strategy, sort
from sorttrace.validate import (
    check_run,
    first_nondecreasing_violation_index,
    is_permutation,
    oracle_sort,
)

ALL_STRATEGIES = list(Strategy)


# ------------------------- helpers ------------------------- #

def _check_one(a: List[int], strategy: Strategy) -> None:
    """Common assertion bundle for one input."""
    a_before = list(a)
    steps = sort(a, strategy)

    assert a == a_before, "Engine must not mutate its input"

    final = list(steps[-1].array)
    assert final == oracle_sort(a), "Final array must exactly match the oracle"

    i = first_nondecreasing_violation_index(final)
    assert i is None, f"not nondecreasing at i={i}: {final[i]} > {final[i + 1]}"
    assert is_permutation(a, final), "Final array is not a permutation of input"

    problems = check_run(a, steps)
    assert not problems, problems

    assert sort(a, strategy) == steps, "Engine must be deterministic"


# ------------------------- unit tests (deterministic) ------------------------- #

@pytest.mark.parametrize("strategy", ALL_STRATEGIES)
@pytest.mark.parametrize(
    "a",
    [
        [],
        [5],
        [2, 1],
        [1, 2, 3, 4],
        [4, 3, 2, 1],
        [7, 7, 7, 7],
        [1, 3, 2, 3, 1, 2],
        list(range(20)),
        list(range(20))[::-1],
        [0, -1, 5, -10, 3, 3, 2],
        [9, 8, 7, 6, 5, 4, 3, 2, 1, 0, -1],  # 11: one partition, then insertion
    ],
)
def test_unit_cases(a: List[int], strategy: Strategy) -> None:
    _check_one(a, strategy)


# ------------------------- property-based tests (randomized) ------------------------- #

small_ints = st.integers(min_value=-1_000, max_value=1_000)


@settings(deadline=None, max_examples=100)
@given(st.lists(small_ints, min_size=0, max_size=60), st.sampled_from(ALL_STRATEGIES))
def test_property_random_small_range(a: List[int], strategy: Strategy) -> None:
    _check_one(a, strategy)


@settings(deadline=None, max_examples=60)
@given(st.lists(st.integers(min_value=0, max_value=5), min_size=0, max_size=80))
def test_property_many_duplicates(a: List[int]) -> None:
    for strategy in ALL_STRATEGIES:
        _check_one(a, strategy)


@settings(deadline=None, max_examples=60)
@given(st.lists(small_ints, min_size=0, max_size=50))
def test_strategies_agree_on_final_array(a: List[int]) -> None:
    finals = {s: sort(a, s)[-1].array for s in ALL_STRATEGIES}
    assert len(set(finals.values())) == 1


@settings(deadline=None, max_examples=60)
@given(st.lists(small_ints, min_size=1, max_size=50))
def test_resorting_output_with_insertion_is_free_of_swaps(a: List[int]) -> None:
    first = sort(a, Strategy.HYBRID)[-1].array
    again = sort(list(first), Strategy.INSERTION)[-1]
    assert again.stats.swaps == 0
    assert again.stats.comparisons == len(a) - 1
