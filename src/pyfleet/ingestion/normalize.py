"""Normalization helpers.

Centralizes defensive parsing of record values and number rendering.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    # bool is an int subclass; a flag is never a coordinate or a speed.
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a dashboard would: halves always go up.

    :func:`round` uses banker's rounding, which turns ``2.5`` into ``2``.
    """
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def format_number(value: float) -> str:
    """Render *value* without a trailing ``.0`` when it is integral.

    >>> format_number(10.0)
    '10'
    >>> format_number(14.999)
    '14.999'
    """
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)
