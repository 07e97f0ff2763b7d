"""
Helpers for reading loosely named GeoJSON feature properties.
"""
import math
import re
from typing import Any, Mapping, Optional, Sequence

# Leading decimal number, optionally signed, with optional exponent
_NUMERIC_PREFIX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def is_present(value: Any) -> bool:
    """A property counts as present unless it is missing, null or an empty string."""
    return value is not None and value != ""


def lookup_property(
    properties: Mapping[str, Any],
    candidate_keys: Sequence[str],
) -> Optional[Any]:
    """
    Get the first present value among candidate property names.

    Args:
        properties: Feature properties
        candidate_keys: Property names in order of precedence

    Returns:
        The first present value, or None
    """
    for key in candidate_keys:
        value = properties.get(key)
        if is_present(value):
            return value
    return None


def parse_number(value: Any) -> Optional[float]:
    """
    Leniently parse a numeric property.

    Numbers are used as-is; strings are read up to the end of their leading
    numeric prefix (so "10 ac" reads as 10.0).

    Args:
        value: Raw property value

    Returns:
        Finite float, or None if nothing numeric can be read
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value.strip())
        if not match:
            return None
        number = float(match.group(0))
    else:
        return None

    return number if math.isfinite(number) else None
