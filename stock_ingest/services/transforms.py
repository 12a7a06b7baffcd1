from __future__ import annotations

import math
import re
from collections.abc import Callable
from typing import Any

"""Named value transformers and validators referenced from catalog.yml.

Transformers are pure functions raw -> typed and may raise ValueError when a
value cannot be converted. Validators are predicates on the transformed value.
"""

__all__ = [
    "TRANSFORMERS",
    "VALIDATORS",
    "strip_numeric",
]

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def strip_numeric(value: Any) -> str:
    """Drop every character that is not a digit, a sign or a decimal point.

    "1,234 units" -> "1234", "$12.50" -> "12.50".
    """
    return _NON_NUMERIC.sub("", str(value))


def trim(value: Any) -> str:
    return str(value).strip()


def trim_upper(value: Any) -> str:
    return str(value).strip().upper()


def to_int_floor(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    else:
        cleaned = strip_numeric(value)
        if not cleaned:
            raise ValueError(f"no numeric content in {value!r}")
        number = float(cleaned)
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    return math.floor(number)


def to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = strip_numeric(value)
    if not cleaned:
        raise ValueError(f"no numeric content in {value!r}")
    return float(cleaned)


def non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0


def non_negative_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


TRANSFORMERS: dict[str, Callable[[Any], Any]] = {
    "trim": trim,
    "trim_upper": trim_upper,
    "to_int_floor": to_int_floor,
    "to_float": to_float,
}

VALIDATORS: dict[str, Callable[[Any], bool]] = {
    "non_empty_string": non_empty_string,
    "non_negative_number": non_negative_number,
}
