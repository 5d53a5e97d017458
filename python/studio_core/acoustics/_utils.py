"""Utility helpers shared across the room calculators."""

from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round ``value`` to ``digits`` decimals with halves rounded towards +inf.

    Display values on the dashboard are rounded this way; ``round`` would use
    banker's rounding and disagree on exact halves.
    """

    if not math.isfinite(value):
        return value
    scale = 10.0**digits
    return math.floor(value * scale + 0.5) / scale


def is_usable_dimension(value: float) -> bool:
    return math.isfinite(value) and value > 0.0


__all__ = ["round_half_up", "is_usable_dimension"]
