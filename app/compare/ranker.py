# app/compare/ranker.py
"""
Per-row ranking of compared values.

Pure functions, no caching: the set of compared laptops can change between
calls, so every row is ranked from scratch.
"""

from __future__ import annotations
import math
import re
from enum import Enum
from typing import List, Sequence

from app.compare.specs import SpecValue, ValueType
from app.utils.numbers import leading_float

INTEL_RE = re.compile(r"intel|i[3579]", re.I)
AMD_RE = re.compile(r"amd|ryzen", re.I)

DIFFERENT_PROCESSORS_NOTE = "Different processor types"


class Rank(str, Enum):
    BEST = "best"
    SECOND = "second"
    WORST = "worst"
    NEUTRAL = "neutral"
    INCOMPARABLE = "incomparable"


# ---------- Processor families ----------

def _same_family(a: str, b: str) -> bool:
    a, b = str(a), str(b)
    both_intel = bool(INTEL_RE.search(a)) and bool(INTEL_RE.search(b))
    both_amd = bool(AMD_RE.search(a)) and bool(AMD_RE.search(b))
    return both_intel or both_amd


def processors_comparable(values: Sequence[SpecValue]) -> bool:
    """
    True when every pair of processors (each one with itself included) is in
    the same family. An unrecognised processor therefore makes the row
    incomparable.
    """
    return all(_same_family(a, b) for a in values for b in values)


# ---------- Ranking ----------

def _comparable_sorted(value_type: ValueType, all_values: Sequence[SpecValue]) -> List[float]:
    nums = [leading_float(v) for v in all_values]
    comparable = [n for n in nums if not math.isnan(n) and n > 0]
    # duplicates stay: with [4.2, 4.2, 3.8] the runner-up slot is 4.2 again
    return sorted(comparable, reverse=value_type != ValueType.PRICE)


def rank_value(value_type: ValueType, value: SpecValue, all_values: Sequence[SpecValue]) -> Rank:
    if value_type == ValueType.PROCESSOR_FAMILY:
        return Rank.NEUTRAL if processors_comparable(all_values) else Rank.INCOMPARABLE
    if value_type == ValueType.STRING:
        return Rank.NEUTRAL

    ordered = _comparable_sorted(value_type, all_values)
    if len(ordered) < 2:
        return Rank.NEUTRAL

    num = leading_float(value)
    if math.isnan(num) or num <= 0:
        return Rank.NEUTRAL
    if num == ordered[0]:
        return Rank.BEST
    if num == ordered[1]:
        return Rank.SECOND
    return Rank.WORST


def rank_values(value_type: ValueType, values: Sequence[SpecValue]) -> List[Rank]:
    """Rank every cell of one specification row."""
    return [rank_value(value_type, v, values) for v in values]
