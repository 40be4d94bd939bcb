"""Lenient numeric coercion for engine-supplied chart values"""

import math
from typing import Any, Tuple


def coerce_number(value: Any) -> Tuple[float, bool]:
    """
    Coerce a chart value to a finite float

    Accepted: int/float, and strings such as "12.4", " 1,250 ", "85%".
    Commas are always thousands separators. Booleans, empty strings,
    NaN, infinities and integers beyond float range are rejected.

    Args:
        value: Raw value from the parsed response

    Returns:
        (number, is_percent) where is_percent is True when the string
        carried a trailing "%" (the number is returned without scaling)

    Raises:
        ValueError: value cannot be read as a finite number
    """
    if isinstance(value, bool):
        raise ValueError("expected a number, got a boolean")

    is_percent = False
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise ValueError("number is too large to represent") from None
    elif isinstance(value, str):
        text = value.strip().replace("\u00a0", "").replace(" ", "")
        if text.endswith("%"):
            is_percent = True
            text = text[:-1]
        text = text.replace(",", "")
        if not text:
            raise ValueError(f"expected a number, got {value!r}")
        try:
            number = float(text)
        except ValueError:
            raise ValueError(f"expected a number, got {value!r}") from None
    else:
        raise ValueError(f"expected a number, got {type(value).__name__}")

    if not math.isfinite(number):
        raise ValueError(f"expected a finite number, got {value!r}")
    return number, is_percent
