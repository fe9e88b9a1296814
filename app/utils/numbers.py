# app/utils/numbers.py
"""
Lenient number parsing for scraped specification text.

Vendor sheets mix "16 GB", "16GB DDR4", "15.6 Inches" and plain numbers, so
every helper here returns None instead of raising.
"""

from __future__ import annotations
import math
import re
from typing import Any, Optional

_DIGITS_RE = re.compile(r"(\d+)")
_FLOAT_RE = re.compile(r"(\d+\.?\d*)")
_LEADING_FLOAT_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+))")


def first_int(text: Any) -> Optional[int]:
    """First run of digits anywhere in the text: "RAM 16 GB" -> 16."""
    if text is None:
        return None
    m = _DIGITS_RE.search(str(text))
    return int(m.group(1)) if m else None


def first_float(text: Any) -> Optional[float]:
    """First decimal number anywhere in the text: "15.6 Inches" -> 15.6."""
    if text is None:
        return None
    m = _FLOAT_RE.search(str(text))
    return float(m.group(1)) if m else None


def leading_float(x: Any) -> float:
    """
    Number at the very start of the value, NaN when there is none.
    Numbers pass through; "4.2 out of 5" -> 4.2, "₹500" -> NaN.
    """
    if isinstance(x, bool) or x is None:
        return math.nan
    if isinstance(x, (int, float)):
        return float(x)
    m = _LEADING_FLOAT_RE.match(str(x))
    return float(m.group(1)) if m else math.nan


def lenient_number(x: Any) -> Optional[float]:
    """Structured numeric fields: numbers as-is, numeric text via first_float, else None."""
    if x is None or x == "" or isinstance(x, bool):
        return None
    if isinstance(x, (int, float)):
        return None if math.isnan(x) else float(x)
    return first_float(x)


def is_blank_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool) and (x == 0 or math.isnan(x))


def number_text(x: float) -> str:
    """16.0 -> "16", 15.6 -> "15.6"."""
    f = float(x)
    return str(int(f)) if f.is_integer() else str(f)
