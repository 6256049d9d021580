"""
Custom array parsing for "use custom array".

Free-form text such as " 5, 3,x, -8 ,1 " becomes [5, 3, -8, 1]: split on
commas, strip each token, keep the tokens that parse as base-10 integers.
"""

from __future__ import annotations

import re
from typing import List

__all__ = ["parse_custom_array", "parse_custom_array_strict"]

_INT_TOKEN = re.compile(r"[+-]?\d+")


def parse_custom_array(text: str) -> List[int]:
    """Return every comma-separated integer in `text`; unparseable tokens are dropped."""
    out: List[int] = []
    for token in text.split(","):
        token = token.strip()
        if _INT_TOKEN.fullmatch(token):
            out.append(int(token))
    return out


def parse_custom_array_strict(text: str) -> List[int]:
    """
    Like `parse_custom_array`, but an input with no integers is an error.

    Raises
    ------
    ValueError
        If no token parses as an integer.
    """
    values = parse_custom_array(text)
    if not values:
        raise ValueError(f"no integers found in {text!r}")
    return values
