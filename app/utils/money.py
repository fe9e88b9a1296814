# app/utils/money.py
import re
from typing import Optional, Union

def parse_price_to_int(price_text: str) -> Optional[int]:
    """
    Convert strings like "₹49,990", "49,990.00" to 49990 (int).
    """
    if not price_text:
        return None
    txt = price_text.strip().lower()
    # keep digits , . and spaces; strip everything else (₹, Rs, etc.)
    txt = re.sub(r'[^\dk,.\s]', '', txt).replace(' ', '')
    m = re.search(r'(\d[\d,]*)(?:\.(\d{1,2}))?$', txt)
    if not m:
        return None
    whole = m.group(1).replace(',', '')
    try:
        return int(whole)
    except ValueError:
        return None


def _group_indian(digits: str) -> str:
    # 1234567 -> 12,34,567 (last three, then pairs)
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    parts = []
    while len(head) > 2:
        parts.insert(0, head[-2:])
        head = head[:-2]
    if head:
        parts.insert(0, head)
    return ",".join(parts + [tail])


def format_inr(value: Union[int, float]) -> str:
    """
    Rupee display with Indian grouping: 123456 -> "₹1,23,456", 49999.5 -> "₹49,999.5".
    Up to three fraction digits, trailing zeros dropped.
    """
    sign = "-" if value < 0 else ""
    whole, _, frac = f"{abs(float(value)):.3f}".partition(".")
    frac = frac.rstrip("0")
    text = _group_indian(whole)
    if frac:
        text = f"{text}.{frac}"
    return f"{sign}₹{text}"
