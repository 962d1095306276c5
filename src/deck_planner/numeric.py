"""
Numeric Normalization

Turns the number-ish strings users type into report tables ("$1,200",
"(500)", " 42.5 ") into floats. Failure is a NaN result, never an exception.
"""

import math
import re
from typing import Any

# Accounting negative: the whole value wrapped in parentheses
_PARENTHESIZED = re.compile(r"^\(.*\)$", re.DOTALL)
_STRIP_CHARS = re.compile(r"[$,\s()]")
_LEADING_DECIMAL = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def normalize_number(value: Any) -> float:
    """Parse a table cell into a float.

    Currency symbols, thousands separators, whitespace and parentheses are
    stripped before parsing. A value fully wrapped in parentheses is negative
    regardless of any sign inside it. Only the leading decimal literal of the
    cleaned text is read, so "12abc" parses as 12.

    Returns:
        The parsed float, or ``math.nan`` when nothing numeric is found.
    """
    if value is None or isinstance(value, bool):
        return math.nan

    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip()
    negative = bool(_PARENTHESIZED.match(text))

    cleaned = _STRIP_CHARS.sub("", text)
    match = _LEADING_DECIMAL.match(cleaned)
    if match is None:
        return math.nan

    number = float(match.group(0))
    return -abs(number) if negative else number


def is_number(value: Any) -> bool:
    """True when ``value`` normalizes to a real number."""
    return not math.isnan(normalize_number(value))
