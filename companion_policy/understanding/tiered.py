"""
Tiered understanding level curve.

Maps a user's cumulative session count to how well the companion "knows"
them. Growth has diminishing returns:

    Session 1:      25   (base)
    Session 2:      +10
    Sessions 3-4:   +5 each
    Sessions 5-6:   +2.5 each
    Sessions 7-8:   +1.5 each
    Sessions 9-10:  +1 each
    Sessions 11-14: +0.5 each
    Sessions 15-20: +0.25 each
    Sessions 21+:   +0.1 each

The level is capped at 75 (reached at session 185). Levels are accumulated
with Decimal so the cap is hit exactly, and rounded half-up to one decimal.
"""

import math
import sys
from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterator, List, Tuple

MAX_UNDERSTANDING_LEVEL = 75
BASE_UNDERSTANDING_LEVEL = 25

_MAX = Decimal(MAX_UNDERSTANDING_LEVEL)
_BASE = Decimal(BASE_UNDERSTANDING_LEVEL)
_ONE_DECIMAL = Decimal("0.1")

# (last session of the tier, increment per session in the tier)
INCREMENT_TIERS: Tuple[Tuple[int, Decimal], ...] = (
    (1, Decimal("0")),
    (2, Decimal("10")),
    (4, Decimal("5")),
    (6, Decimal("2.5")),
    (8, Decimal("1.5")),
    (10, Decimal("1")),
    (14, Decimal("0.5")),
    (20, Decimal("0.25")),
)
TAIL_INCREMENT = Decimal("0.1")

STAGES: Tuple[Tuple[str, int], ...] = (
    ("Not started", 0),
    ("New", 1),
    ("Getting to know you", 30),
    ("Building connection", 45),
    ("Deep understanding", 60),
    ("Deep connection", 70),
)


@dataclass(frozen=True)
class UnderstandingStep:
    """One session in the understanding progression."""
    session: int
    level: float
    increment: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _coerce_session_count(value: Any) -> int:
    """Non-numeric and NaN become 0, fractions are floored, +inf is unbounded."""
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    if math.isinf(number):
        return sys.maxsize if number > 0 else 0
    return math.floor(number)


def _round(value: Decimal) -> float:
    return float(value.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def _increment_for_session(session_number: int) -> Decimal:
    for last_session, increment in INCREMENT_TIERS:
        if session_number <= last_session:
            return increment
    return TAIL_INCREMENT


def _walk(session_count: int) -> Iterator[Tuple[int, Decimal, Decimal]]:
    """Yield (session, level, applied increment) up to session_count or the cap."""
    if session_count <= 0:
        return

    level = _BASE
    yield 1, level, Decimal(0)

    for session in range(2, session_count + 1):
        new_level = min(level + _increment_for_session(session), _MAX)
        yield session, new_level, new_level - level
        level = new_level
        if level >= _MAX:
            return


def _exact_level(session_count: int) -> Decimal:
    level = _BASE
    for _, level, _ in _walk(session_count):
        pass
    return level


def calculate_understanding_level(session_count: Any) -> float:
    """
    Calculate the understanding level for a session count.

    Args:
        session_count: Total sessions the user has had. Zero, negative,
            non-numeric, or NaN values give the base level.

    Returns:
        Level in [25, 75], rounded to one decimal

    Example:
        calculate_understanding_level(1)    # 25.0
        calculate_understanding_level(5)    # 47.5
        calculate_understanding_level(10)   # 55.0
        calculate_understanding_level(500)  # 75.0
    """
    return _round(_exact_level(_coerce_session_count(session_count)))


def get_understanding_progression(session_count: Any) -> List[UnderstandingStep]:
    """
    Step-by-step progression from session 1 to session_count.

    Stops early at the session that reaches the cap. Each step's increment
    is the delta actually applied, so the capping step may be smaller than
    its tier value.

    Example:
        get_understanding_progression(3)
        # [UnderstandingStep(session=1, level=25.0, increment=0.0),
        #  UnderstandingStep(session=2, level=35.0, increment=10.0),
        #  UnderstandingStep(session=3, level=40.0, increment=5.0)]
    """
    return [
        UnderstandingStep(session=session, level=_round(level), increment=float(increment))
        for session, level, increment in _walk(_coerce_session_count(session_count))
    ]


def get_next_session_increment(current_session_count: Any) -> float:
    """
    Increment the next session will add.

    Returns 0 once the cap is reached; near the cap the value is clamped so
    the level never passes 75.
    """
    current = max(0, _coerce_session_count(current_session_count))
    level = _exact_level(current)

    if level >= _MAX:
        return 0.0

    increment = _increment_for_session(current + 1)
    if level + increment > _MAX:
        return float(_MAX - level)
    return float(increment)


def get_sessions_to_reach_level(target_level: Any) -> int:
    """
    Number of sessions needed to reach a target level.

    Returns:
        -1 if the target is above the maximum, 0 for targets <= 0,
        1 for targets at or below the base level
    """
    try:
        target = Decimal(str(float(target_level)))
    except (TypeError, ValueError, ArithmeticError):
        return 0

    if target.is_nan() or target <= 0:
        return 0
    if target > _MAX:
        return -1
    if target <= _BASE:
        return 1

    sessions = 1
    level = _BASE
    while level < target and level < _MAX:
        sessions += 1
        level = min(level + _increment_for_session(sessions), _MAX)
    return sessions


def get_sessions_to_max(current_session_count: Any) -> int:
    """Sessions remaining until the level is capped (0 once it is)."""
    current = max(0, _coerce_session_count(current_session_count))
    return max(0, get_sessions_to_reach_level(MAX_UNDERSTANDING_LEVEL) - current)


def format_understanding_level(level: float) -> str:
    """Format a level for display: "45%" or "47.5%"."""
    if float(level).is_integer():
        return f"{int(level)}%"
    return f"{float(level):.1f}%"


def get_stage_index(level: float) -> int:
    """Stage index 0-5 for progress bar visualization."""
    if level <= 0:
        return 0
    index = 1
    for i, (_, min_level) in enumerate(STAGES[2:], start=2):
        if level >= min_level:
            index = i
    return index


def get_understanding_stage(level: float) -> str:
    """Human-readable stage name such as "New" or "Deep connection"."""
    return STAGES[get_stage_index(level)][0]


def build_understanding_stats(session_count: Any) -> Dict[str, Any]:
    """Summary block served to the relationship-understanding UI."""
    sessions = max(0, _coerce_session_count(session_count))
    level = calculate_understanding_level(sessions)
    level_progress = (Decimal(str(level)) / _MAX * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP)

    return {
        "understanding_level": level,
        "formatted_level": format_understanding_level(level),
        "total_sessions": sessions,
        "next_session_bonus": get_next_session_increment(sessions),
        "sessions_to_max": get_sessions_to_max(sessions),
        "max_level": MAX_UNDERSTANDING_LEVEL,
        "level_progress": int(level_progress),
        "stage": get_understanding_stage(level),
        "stage_index": get_stage_index(level),
    }


UNDERSTANDING_CONSTANTS = {
    "MAX_LEVEL": MAX_UNDERSTANDING_LEVEL,
    "BASE_LEVEL": BASE_UNDERSTANDING_LEVEL,
    "TIER_INCREMENTS": {
        "SESSION_2": 10,
        "SESSIONS_3_4": 5,
        "SESSIONS_5_6": 2.5,
        "SESSIONS_7_8": 1.5,
        "SESSIONS_9_10": 1,
        "SESSIONS_11_14": 0.5,
        "SESSIONS_15_20": 0.25,
        "SESSIONS_21_PLUS": 0.1,
    },
    "STAGES": [{"name": name, "min_level": min_level} for name, min_level in STAGES],
}
