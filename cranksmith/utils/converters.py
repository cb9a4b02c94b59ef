"""Type conversion utilities for component data coming from the UI or catalog.

This module is the single source of truth for lenient parsing of tire widths,
speed labels and display rounding. Other modules import from here instead of
defining their own.
"""

import math
import re
from typing import Any

_SPEED_PATTERN = re.compile(r"(\d+)-speed")


def safe_float(val: Any, default: float | None = 0.0) -> float | None:
    """Safely convert a value to float.

    Args:
        val: Value to convert (can be str, int, float, None, etc.)
        default: Value to return if conversion fails

    Returns:
        Converted float or default value

    Examples:
        >>> safe_float("25")
        25.0
        >>> safe_float(None)
        0.0
        >>> safe_float("wide", default=None) is None
        True
    """
    if val is None or val == "" or isinstance(val, bool):
        return default
    try:
        result = float(val)
    except (ValueError, TypeError):
        return default
    if math.isnan(result):
        return default
    return result


def parse_speed_count(label: str | None) -> int:
    """Extract the drivetrain speed count from a label like '11-speed'.

    Returns 0 when the label is missing or does not contain '<N>-speed'.

    Examples:
        >>> parse_speed_count("Shimano 11-speed Di2")
        11
        >>> parse_speed_count("single speed")
        0
    """
    if not label or not isinstance(label, str):
        return 0
    match = _SPEED_PATTERN.search(label)
    return int(match.group(1)) if match else 0


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round half up (2.5 -> 3), unlike the built-in round()."""
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor
