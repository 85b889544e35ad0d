"""Lenient decoding of integer fields from JSON-like values."""

from __future__ import annotations

import math
import re
from typing import Any

U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1

_UNSIGNED = re.compile(r"\+?[0-9]+")


def _saturating_cast(value: float, maximum: int) -> int:
    if math.isnan(value) or value <= 0:
        return 0
    if math.isinf(value):
        return maximum
    return min(int(value), maximum)


def _parse_unsigned_text(text: str, maximum: int, label: str) -> int:
    if not _UNSIGNED.fullmatch(text):
        raise ValueError(f"Invalid {label} string")
    number = int(text)
    if number > maximum:
        raise ValueError(f"Invalid {label} string")
    return number


def _number_to_unsigned(value: int | float, maximum: int) -> int:
    if isinstance(value, int) and 0 <= value <= U64_MAX:
        return value
    return _saturating_cast(float(value), maximum)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_u64(value: Any) -> int:
    """Decode a u64 from a JSON number or a decimal string."""
    if _is_number(value):
        return _number_to_unsigned(value, U64_MAX)
    if isinstance(value, str):
        return _parse_unsigned_text(value, U64_MAX, "u64")
    raise ValueError("Expected number or string")


def parse_optional_u128(value: Any) -> int | None:
    """Decode an optional u128 from null, a JSON number or a decimal string."""
    if value is None:
        return None
    if _is_number(value):
        return _number_to_unsigned(value, U128_MAX)
    if isinstance(value, str):
        return _parse_unsigned_text(value, U128_MAX, "u128")
    raise ValueError("Expected number, string, or null")


def serialize_usize(value: int) -> float:
    """Encode a size as a floating-point number."""
    return float(value)