"""Shared numeric helpers for topology reports and extractor scoring."""

from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round ``value`` with halves going up, unlike Python's banker's rounding.

    Returns
    -------
    float
        Rounded value.
    """
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def percent(part: int, whole: int, *, empty: int = 0) -> int:
    """
    Return ``part / whole`` as a whole-number percentage.

    Returns
    -------
    int
        Rounded percentage, or ``empty`` when ``whole`` is zero.
    """
    if whole <= 0:
        return empty
    return int(round_half_up(part / whole * 100))


def mean(values: list[float], *, digits: int = 2) -> float:
    """
    Return the arithmetic mean rounded to ``digits`` places.

    Returns
    -------
    float
        Rounded mean, or 0.0 for an empty list.
    """
    if not values:
        return 0.0
    return round_half_up(sum(values) / len(values), digits)


__all__ = ["mean", "percent", "round_half_up"]
