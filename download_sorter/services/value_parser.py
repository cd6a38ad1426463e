from __future__ import annotations

import math
import re
from typing import Any

"""Abbreviated download-count parser.

Maps the textual encodings found in a "Downloads Last Month" column to a
comparable magnitude:

    "2M" -> 2_000_000, "1.5M" -> 1_500_000, "900K" -> 900_000,
    "< 5k" -> 1, "N/A" -> 0, "" -> 0, "1,000" -> 1000
"""

__all__ = [
    "parse_download_value",
    "LESS_THAN_5K",
]

# Smallest nonzero magnitude: sorts below any real thousand count
LESS_THAN_5K = 1.0

_EMPTY_TOKENS = frozenset({"", "n/a", "null"})
_NUMBER_RE = re.compile(r"([\d.,]+)\s*([km]?)")
_WHITESPACE_RE = re.compile(r"\s+")
_MULTIPLIERS = {"k": 1_000.0, "m": 1_000_000.0, "": 1.0}


def parse_download_value(value: Any) -> float:
    """Parse an abbreviated count into a finite, non-negative float. Never raises."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) and value > 0 else 0.0

    text = str(value).lower().strip()
    if "<5k" in _WHITESPACE_RE.sub("", text):
        return LESS_THAN_5K
    if text in _EMPTY_TOKENS:
        return 0.0

    match = _NUMBER_RE.search(text)
    if match is None:
        return 0.0
    try:
        number = float(match.group(1).replace(",", ""))
    except ValueError:
        return 0.0

    result = number * _MULTIPLIERS[match.group(2)]
    return result if math.isfinite(result) else 0.0
