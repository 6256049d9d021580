"""
Tests for the oracle, array properties, and whole-run checks.
"""

from __future__ import annotations

import dataclasses

import pytest

from sorttrace.engine import ActiveAlgorithm, StepStats, sort
from sorttrace.validate import (
    assert_no_mutation,
    assert_valid_run,
    check_run,
    equals_oracle,
    first_nondecreasing_violation_index,
    is_nondecreasing,
    is_permutation,
    permutation_counter_diff,
)


def test_array_properties() -> None:
    assert is_nondecreasing([]) and is_nondecreasing([1, 1, 2])
    assert first_nondecreasing_violation_index([1, 3, 2, 4]) == 1
    assert is_permutation([3, 1, 1], [1, 3, 1])
    assert not is_permutation([1, 2], [1, 2, 2])
    assert permutation_counter_diff([1, 1, 2], [1, 3]) == {1: 1, 2: 1, 3: -1}
    assert equals_oracle([2, 1], (1, 2))


def test_assert_no_mutation() -> None:
    assert_no_mutation([1, 2], [1, 2])
    with pytest.raises(AssertionError, match="index 1"):
        assert_no_mutation([1, 2], [1, 5])
    with pytest.raises(AssertionError, match="length"):
        assert_no_mutation([1, 2], [1])


def test_valid_run_has_no_problems() -> None:
    values = [6, 2, 9, 2, -1, 0, 14, 3, 3, 8, 7, 1]
    for strategy in ("hybrid", "quicksort", "insertion"):
        assert check_run(values, sort(values, strategy)) == []


def test_empty_log() -> None:
    assert check_run([1], []) == ["step log is empty"]


def test_detects_decreasing_counters_and_bad_indices() -> None:
    values = [3, 1, 2]
    steps = sort(values, "quicksort")
    steps[3] = dataclasses.replace(steps[3], stats=StepStats(comparisons=0, swaps=0))
    steps[2] = dataclasses.replace(steps[2], comparing=(0, 7))
    problems = check_run(values, steps)
    assert any("comparisons decreased" in p for p in problems)
    assert any("out of range [7]" in p for p in problems)


def test_detects_premature_full_sorted_set_and_shrinking() -> None:
    values = [2, 1]
    steps = sort(values, "insertion")
    steps[1] = dataclasses.replace(steps[1], sorted=frozenset({0, 1}))
    problems = check_run(values, steps)
    assert any("before the last step" in p for p in problems)
    assert any("left the sorted set" in p for p in problems)


def test_detects_wrong_final_step() -> None:
    values = [2, 1]
    steps = sort(values, "hybrid")
    steps[-1] = dataclasses.replace(
        steps[-1], array=(1, 1), active_algorithm=ActiveAlgorithm.INSERTION
    )
    problems = check_run(values, steps)
    assert any("not 'complete'" in p for p in problems)
    assert any("not a permutation" in p for p in problems)
    with pytest.raises(AssertionError, match="invalid run"):
        assert_valid_run(values, steps)
