"""Understanding level routes."""
from enum import Enum

from fastapi import APIRouter, Query

from api.models.responses import APIResponse
from companion_policy.understanding import (
    MAX_UNDERSTANDING_LEVEL,
    build_understanding_stats,
    calculate_sqrt_understanding_level,
    calculate_understanding_level,
    format_understanding_level,
    get_next_session_increment,
    get_sessions_to_max,
    get_sessions_to_reach_level,
    get_understanding_progression,
)

router = APIRouter(prefix="/api/understanding", tags=["understanding"])


class UnderstandingCurve(str, Enum):
    TIERED = "tiered"
    SQRT = "sqrt"


@router.get("/sessions-to-level/{target_level}")
def sessions_to_level(target_level: float):
    """Sessions needed to reach a target level (-1 if above the maximum)."""
    return APIResponse.success(data={
        "target_level": target_level,
        "sessions": get_sessions_to_reach_level(target_level),
        "max_level": MAX_UNDERSTANDING_LEVEL,
    })


@router.get("/{session_count}")
def understanding_level(
    session_count: int,
    curve: UnderstandingCurve = Query(UnderstandingCurve.TIERED, description="Which curve to evaluate")
):
    """Understanding level for a session count on the chosen curve."""
    if curve == UnderstandingCurve.SQRT:
        level = calculate_sqrt_understanding_level(session_count)
    else:
        level = calculate_understanding_level(session_count)

    return APIResponse.success(data={
        "session_count": session_count,
        "curve": curve.value,
        "understanding_level": level,
        "formatted_level": format_understanding_level(level),
        "max_level": MAX_UNDERSTANDING_LEVEL,
    })


@router.get("/{session_count}/progression")
def understanding_progression(session_count: int):
    """Session-by-session progression on the tiered curve."""
    progression = get_understanding_progression(session_count)
    return APIResponse.success(data={
        "progression": [step.to_dict() for step in progression],
        "current_level": calculate_understanding_level(session_count),
        "next_increment": get_next_session_increment(session_count),
        "max_level": MAX_UNDERSTANDING_LEVEL,
        "sessions_to_max": get_sessions_to_max(session_count),
    })


@router.get("/{session_count}/stats")
def understanding_stats(session_count: int):
    """Quick stats block for the relationship-understanding UI."""
    return APIResponse.success(data=build_understanding_stats(session_count))
