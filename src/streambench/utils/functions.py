"""
Utility functions for guarded arithmetic and value formatting.

Provides helpers for rate calculations that must never produce infinity or NaN,
and number formatting that tolerates missing values.
"""

from __future__ import annotations

import math

__all__ = [
    "safe_divide",
    "safe_format_number",
    "safe_rate",
]


def safe_divide(
    numerator: int | float | None,
    denominator: int | float | None,
    default: float = 0.0,
) -> float:
    """
    Divide two numbers, substituting a default for undefined results.

    :param numerator: Number to divide, or None
    :param denominator: Number to divide by, or None
    :param default: Value returned when either value is None, the denominator is
        not strictly positive, or the result is not finite
    :return: Division result or default
    """
    if numerator is None or denominator is None or denominator <= 0:
        return default

    result = numerator / denominator

    return result if math.isfinite(result) else default


def safe_rate(
    count: int | float | None,
    duration_ms: float | None,
    min_count: int | float = 0,
) -> float:
    """
    Calculate a per-second rate from a count observed over milliseconds.

    :param count: Number of items observed during the duration
    :param duration_ms: Duration of the observation in milliseconds
    :param min_count: The count must be strictly greater than this value for a
        rate to be reported
    :return: Items per second, or 0.0 when the count or duration do not qualify
    """
    if count is None or count <= min_count:
        return 0.0

    return safe_divide(count, duration_ms) * 1000.0


def safe_format_number(
    number: int | float | None, precision: int = 2, default: str = "N/A"
) -> str:
    """
    Format a number with specified precision and default handling.

    :param number: Number to format, or None
    :param precision: Number of decimal places for formatting floats
    :param default: Value to return if number is None or not finite
    :return: Formatted number string or default value
    """
    if number is None or isinstance(number, bool):
        return default

    if isinstance(number, int):
        return str(number)

    if not math.isfinite(number):
        return default

    return f"{number:.{precision}f}"
