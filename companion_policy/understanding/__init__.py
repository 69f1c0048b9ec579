"""
Understanding level curves.

Two separate curves from session count to a level in [25, 75]:
the tiered lookup table (`tiered`) and the square-root-decay curve
(`sqrt_decay`). They are not interchangeable.
"""

from companion_policy.understanding.tiered import (
    MAX_UNDERSTANDING_LEVEL,
    BASE_UNDERSTANDING_LEVEL,
    UNDERSTANDING_CONSTANTS,
    UnderstandingStep,
    calculate_understanding_level,
    get_understanding_progression,
    get_next_session_increment,
    get_sessions_to_reach_level,
    get_sessions_to_max,
    format_understanding_level,
    get_understanding_stage,
    get_stage_index,
    build_understanding_stats,
)
from companion_policy.understanding.sqrt_decay import calculate_sqrt_understanding_level

__all__ = [
    "MAX_UNDERSTANDING_LEVEL",
    "BASE_UNDERSTANDING_LEVEL",
    "UNDERSTANDING_CONSTANTS",
    "UnderstandingStep",
    "calculate_understanding_level",
    "get_understanding_progression",
    "get_next_session_increment",
    "get_sessions_to_reach_level",
    "get_sessions_to_max",
    "format_understanding_level",
    "get_understanding_stage",
    "get_stage_index",
    "build_understanding_stats",
    "calculate_sqrt_understanding_level",
]
