"""
Benchmark package: timing harness and YAML-driven experiment runner.

    python -m sorttrace.bench.runner experiments/configs/01_strategy_scaling.yaml
"""

from .measure import trace_sort_call

__all__ = ["trace_sort_call"]
