"""
Timing harness for engine runs.

Each sample is exactly one `SortEngine().sort(copy_of_a, strategy)` call,
timed with a monotonic high-resolution clock. Copying the input and building
the engine happen outside the timed block.

Public API (stable):
    trace_sort_call(...) -> dict

Returned dict schema:
    {
        "strategy": str,
        "repeats": int,
        "samples_ns": list[int],            # elapsed ns per successful sample
        "steps": list[Step] | None,         # log from the last successful sample
        "step_count": int | None,
        "comparisons": int | None,          # final totals of that log
        "swaps": int | None,
        "status": "ok" | "timeout" | "error",
        "error": str | None,
        "timed_out_on_repeat": int | None,  # 0-based repeat index
    }
"""

from __future__ import annotations

import gc
import logging
import time
from typing import Any, Dict, List, Sequence, Union

from sorttrace.engine import SortEngine, Strategy

__all__ = ["trace_sort_call"]

logger = logging.getLogger(__name__)


def trace_sort_call(
    *,
    strategy: Union[Strategy, str],
    a: Sequence[int],
    repeats: int,
    warmup: bool,
    disable_gc: bool,
    timeout_seconds: float,
) -> Dict[str, Any]:
    """
    Time `repeats` engine runs of `strategy` over `a`.

    Parameters
    ----------
    strategy : Strategy | str
        Strategy to run; resolved once up front (ValueError if unknown).
    a : sequence of int
        Input array; each sample receives its own copy.
    repeats : int
        Number of timed samples.
    warmup : bool
        Make one untimed run first.
    disable_gc : bool
        Collect and disable the GC around the timed loop, restoring it afterwards.
    timeout_seconds : float
        A sample slower than this marks status="timeout" and stops sampling.
    """
    if repeats < 0:
        raise ValueError("repeats must be nonnegative")
    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be positive")
    selected = Strategy.parse(strategy)

    result: Dict[str, Any] = {
        "strategy": selected.value,
        "repeats": repeats,
        "samples_ns": [],
        "steps": None,
        "step_count": None,
        "comparisons": None,
        "swaps": None,
        "status": "ok",
        "error": None,
        "timed_out_on_repeat": None,
    }
    samples: List[int] = result["samples_ns"]

    if warmup and repeats > 0:
        try:
            SortEngine().sort(list(a), selected)
        except Exception as e:
            logger.warning("warmup failed for %s: %r", selected.value, e)
            result["status"] = "error"
            result["error"] = f"warmup failed: {e!r}"
            return result

    prev_gc_enabled = gc.isenabled()
    try:
        if disable_gc:
            gc.collect()
            gc.disable()

        threshold_ns = int(timeout_seconds * 1e9)
        for r in range(repeats):
            arg = list(a)
            engine = SortEngine()
            try:
                t0 = time.perf_counter_ns()
                steps = engine.sort(arg, selected)
                t1 = time.perf_counter_ns()
            except Exception as e:
                logger.warning("%s failed at repeat %d: %r", selected.value, r, e)
                result["status"] = "error"
                result["error"] = f"run failed at repeat {r}: {e!r}"
                break

            elapsed = t1 - t0
            samples.append(int(elapsed))
            last = steps[-1]
            result["steps"] = steps
            result["step_count"] = len(steps)
            result["comparisons"] = last.stats.comparisons
            result["swaps"] = last.stats.swaps

            if elapsed > threshold_ns:
                result["status"] = "timeout"
                result["timed_out_on_repeat"] = r
                break
    finally:
        if disable_gc and prev_gc_enabled:
            gc.enable()

    return result
