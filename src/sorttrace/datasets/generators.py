"""
Input generators for trace runs.

- generate_random_array:
    The array generator behind "generate new array": `size` integers drawn
    independently and uniformly from an inclusive [min_value, max_value]
    range (defaults 10 and 100). Duplicates are allowed.

- make_dataset:
    Named input shapes for experiments, chosen to exercise the strategies
    differently:
      * "random":        uniform draws from params["range"] (inclusive, default [10, 100])
      * "sorted":        [0, 1, ..., n-1]; worst case for last-element pivots
      * "reversed":      [n-1, ..., 0]
      * "nearly_sorted": sorted, then ceil(swap_frac * n) random index swaps
      * "all_equal":     n copies of params["value"] (default 42)

Public API (stable):
    generate_random_array(size, min_value=10, max_value=100, rng=None) -> list[int]
    make_dataset(n, spec, rng) -> list[int]

Returns plain Python `list[int]`; the engine stays NumPy-agnostic.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import numpy as np

DEFAULT_MIN_VALUE = 10
DEFAULT_MAX_VALUE = 100

SUPPORTED_DISTS = {
    "random",
    "sorted",
    "reversed",
    "nearly_sorted",
    "all_equal",
}
__all__ = [
    "DEFAULT_MIN_VALUE",
    "DEFAULT_MAX_VALUE",
    "SUPPORTED_DISTS",
    "generate_random_array",
    "make_dataset",
]


def generate_random_array(
    size: int,
    min_value: int = DEFAULT_MIN_VALUE,
    max_value: int = DEFAULT_MAX_VALUE,
    rng: Optional[np.random.Generator] = None,
) -> List[int]:
    """
    Draw `size` integers uniformly from [min_value, max_value] (both inclusive).

    Parameters
    ----------
    size : int
        Number of values, >= 0.
    min_value, max_value : int
        Inclusive bounds; min_value must not exceed max_value.
    rng : numpy.random.Generator, optional
        Caller-owned generator for reproducible arrays. A fresh unseeded
        generator is used when omitted.

    Raises
    ------
    ValueError
        On a negative size, non-integer bounds, or min_value > max_value.
    """
    _validate_n(size)
    if not _is_int_like(min_value) or not _is_int_like(max_value):
        raise ValueError("min_value and max_value must be integers")
    lo, hi = int(min_value), int(max_value)
    if lo > hi:
        raise ValueError(f"invalid bounds: min_value > max_value ({lo} > {hi})")
    if size == 0:
        return []
    if rng is None:
        rng = np.random.default_rng()
    # Generator.integers is half-open by default; endpoint=True keeps hi reachable.
    return rng.integers(lo, hi, size=size, endpoint=True, dtype=np.int64).tolist()


def make_dataset(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    """
    Build an input of length `n` shaped by `spec`.

    `spec` looks like {"dist": "nearly_sorted", "params": {"swap_frac": 0.05}}.
    `rng` is only consumed by the randomized shapes.

    Raises
    ------
    ValueError
        Unsupported dist or malformed params.
    """
    _validate_n(n)

    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist", None)
    if dist not in SUPPORTED_DISTS:
        raise ValueError(
            f"Unsupported dataset dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )
    params = spec.get("params") or {}
    if not isinstance(params, dict):
        raise ValueError("spec.params must be a dict if provided")

    if dist == "random":
        lo, hi = _parse_range(params, default=(DEFAULT_MIN_VALUE, DEFAULT_MAX_VALUE))
        return generate_random_array(n, lo, hi, rng)

    if dist == "sorted":
        return list(range(n))

    if dist == "reversed":
        return list(range(n - 1, -1, -1))

    if dist == "nearly_sorted":
        swap_frac = _parse_swap_frac(params)
        arr = list(range(n))
        num_swaps = int(np.ceil(swap_frac * n))
        if n == 0 or num_swaps <= 0:
            return arr
        idxs = rng.integers(0, n, size=2 * num_swaps)
        for k in range(num_swaps):
            i, j = int(idxs[2 * k]), int(idxs[2 * k + 1])
            arr[i], arr[j] = arr[j], arr[i]
        return arr

    # all_equal
    value = params.get("value", 42)
    if not _is_int_like(value):
        raise ValueError(f"all_equal.params.value must be an integer; got {value!r}")
    return [int(value)] * n


# ------------------------- helpers ------------------------- #


def _validate_n(n: int) -> None:
    if isinstance(n, bool) or not _is_int_like(n):
        raise ValueError("n must be an int")
    if n < 0:
        raise ValueError("n must be nonnegative")


def _parse_range(params: Dict[str, Any], default: Tuple[int, int]) -> Tuple[int, int]:
    if "range" not in params:
        return default
    spec = params["range"]
    if not isinstance(spec, (list, tuple)) or len(spec) != 2:
        raise ValueError("params.range must be a 2-element list/tuple [min, max]")
    lo_raw, hi_raw = spec
    if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
        raise ValueError("params.range values must be integers")
    lo, hi = int(lo_raw), int(hi_raw)
    if lo > hi:
        raise ValueError(f"params.range invalid: min > max ({lo} > {hi})")
    return lo, hi


def _parse_swap_frac(params: Dict[str, Any]) -> float:
    val = params.get("swap_frac", 0.05)
    try:
        x = float(val)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"nearly_sorted.params.swap_frac must be a float in [0.0, 1.0]; got {val!r}"
        ) from e
    if not (0.0 <= x <= 1.0):
        raise ValueError(f"nearly_sorted.params.swap_frac must be in [0.0, 1.0]; got {x}")
    return x


def _is_int_like(x: Any) -> bool:
    return isinstance(x, (int, np.integer)) and not isinstance(x, bool)
