"""
Datasets package public API.

Re-export the generators so callers can write:
    from sorttrace.datasets import generate_random_array, make_dataset
"""

from .generators import SUPPORTED_DISTS, generate_random_array, make_dataset

__all__ = ["generate_random_array", "make_dataset", "SUPPORTED_DISTS"]
