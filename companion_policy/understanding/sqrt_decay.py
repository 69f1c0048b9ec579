"""
Square-root-decay understanding level curve.

A second, independent curve for the same concept as the tiered table.
Session i adds max(1, floor(10 / sqrt(i))), starting from 25 and capped at
75; counts of 1000 or more are treated as capped outright. The two curves
disagree (session 1 is 35 here and 25 on the tiered curve), so callers pick
one explicitly.
"""

import math
from typing import Any

SQRT_BASE_LEVEL = 25
SQRT_MAX_LEVEL = 75
SQRT_SATURATION_SESSIONS = 1000


def calculate_sqrt_understanding_level(session_count: Any) -> int:
    """
    Understanding level on the square-root-decay curve.

    Args:
        session_count: Total sessions. Non-numeric, NaN, zero, or negative
            values give the base level.

    Returns:
        Integer level in [25, 75]
    """
    if isinstance(session_count, bool) or not isinstance(session_count, (int, float)):
        return SQRT_BASE_LEVEL
    if math.isnan(session_count) or session_count <= 0:
        return SQRT_BASE_LEVEL
    if session_count >= SQRT_SATURATION_SESSIONS:
        return SQRT_MAX_LEVEL

    level = SQRT_BASE_LEVEL
    i = 1
    while i <= session_count and level < SQRT_MAX_LEVEL:
        increment = max(1, math.floor(10 / math.sqrt(i)))
        level = min(SQRT_MAX_LEVEL, level + increment)
        i += 1

    return level
