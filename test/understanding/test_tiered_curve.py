"""
TEST SUITE: Tiered Understanding Level
======================================

Module: companion_policy/understanding/tiered.py
"""

import math

import pytest

from companion_policy.understanding import (
    BASE_UNDERSTANDING_LEVEL,
    MAX_UNDERSTANDING_LEVEL,
    UNDERSTANDING_CONSTANTS,
    UnderstandingStep,
    build_understanding_stats,
    calculate_understanding_level,
    format_understanding_level,
    get_next_session_increment,
    get_sessions_to_max,
    get_sessions_to_reach_level,
    get_stage_index,
    get_understanding_progression,
    get_understanding_stage,
)

SESSIONS_TO_CAP = 185


# ============================================================================
# TEST: calculate_understanding_level
# ============================================================================

class TestCalculateLevel:
    """Lookup-table curve"""

    @pytest.mark.parametrize("sessions,expected", [
        (0, 25), (1, 25), (2, 35), (3, 40), (4, 45), (5, 47.5), (6, 50),
        (7, 51.5), (8, 53), (9, 54), (10, 55), (14, 57), (20, 58.5), (21, 58.6),
    ])
    def test_known_values(self, sessions, expected):
        assert calculate_understanding_level(sessions) == expected

    def test_half_up_rounding(self):
        """57.25 rounds to 57.3, not banker's 57.2"""
        assert calculate_understanding_level(15) == 57.3
        assert calculate_understanding_level(17) == 57.8

    @pytest.mark.parametrize("value", [-1, -100, None, "abc", float("nan"), [], {}])
    def test_invalid_input_gives_base(self, value):
        assert calculate_understanding_level(value) == BASE_UNDERSTANDING_LEVEL

    def test_numeric_string_and_fraction(self):
        assert calculate_understanding_level("5") == 47.5
        assert calculate_understanding_level(2.9) == 35

    def test_cap_reached_exactly(self):
        assert calculate_understanding_level(SESSIONS_TO_CAP - 1) == 74.9
        assert calculate_understanding_level(SESSIONS_TO_CAP) == MAX_UNDERSTANDING_LEVEL

    def test_large_inputs_capped(self):
        assert calculate_understanding_level(10_000) == 75
        assert calculate_understanding_level(float("inf")) == 75

    def test_non_decreasing_and_bounded(self):
        previous = calculate_understanding_level(0)
        for n in range(0, 300):
            level = calculate_understanding_level(n)
            assert BASE_UNDERSTANDING_LEVEL <= level <= MAX_UNDERSTANDING_LEVEL
            assert level >= previous
            previous = level


# ============================================================================
# TEST: get_understanding_progression
# ============================================================================

class TestProgression:
    """Step-by-step trace"""

    def test_empty_for_non_positive(self):
        assert get_understanding_progression(0) == []
        assert get_understanding_progression(-5) == []

    def test_first_three_sessions(self):
        assert get_understanding_progression(3) == [
            UnderstandingStep(session=1, level=25.0, increment=0.0),
            UnderstandingStep(session=2, level=35.0, increment=10.0),
            UnderstandingStep(session=3, level=40.0, increment=5.0),
        ]

    def test_increments_are_actual_deltas(self):
        steps = get_understanding_progression(20)
        assert [s.increment for s in steps[14:]] == [0.25] * 6

    @pytest.mark.parametrize("n", range(0, 51))
    def test_shape_and_final_level(self, n):
        steps = get_understanding_progression(n)
        assert len(steps) <= max(n, 0)
        assert [s.session for s in steps] == list(range(1, len(steps) + 1))
        if steps:
            assert steps[-1].level == calculate_understanding_level(n)

    def test_stops_at_cap(self):
        steps = get_understanding_progression(1000)
        assert len(steps) == SESSIONS_TO_CAP
        assert steps[-1].level == 75
        assert math.isclose(steps[-1].increment, 0.1)
        assert all(s.level <= 75 for s in steps)

    def test_step_to_dict(self):
        step = get_understanding_progression(2)[-1]
        assert step.to_dict() == {"session": 2, "level": 35.0, "increment": 10.0}


# ============================================================================
# TEST: get_next_session_increment
# ============================================================================

class TestNextIncrement:

    @pytest.mark.parametrize("current,expected", [
        (1, 10), (2, 5), (4, 2.5), (6, 1.5), (8, 1), (10, 0.5), (14, 0.25), (20, 0.1),
    ])
    def test_table_values(self, current, expected):
        assert get_next_session_increment(current) == expected

    def test_zero_at_cap(self):
        assert get_next_session_increment(SESSIONS_TO_CAP) == 0
        assert get_next_session_increment(5000) == 0

    def test_next_session_never_exceeds_cap(self):
        for current in range(0, SESSIONS_TO_CAP + 5):
            level = calculate_understanding_level(current)
            assert level + get_next_session_increment(current) <= MAX_UNDERSTANDING_LEVEL + 1e-9

    def test_non_positive_and_invalid(self):
        assert get_next_session_increment(0) == 0
        assert get_next_session_increment(-3) == 0
        assert get_next_session_increment("x") == 0


# ============================================================================
# TEST: Sessions needed / display helpers
# ============================================================================

class TestSessionsToLevel:

    @pytest.mark.parametrize("target,expected", [
        (0, 0), (-10, 0), (10, 1), (25, 1), (35, 2), (47.5, 5), (50, 6), (55, 10),
        (75, SESSIONS_TO_CAP), (80, -1),
    ])
    def test_targets(self, target, expected):
        assert get_sessions_to_reach_level(target) == expected

    def test_invalid_target(self):
        assert get_sessions_to_reach_level("abc") == 0
        assert get_sessions_to_reach_level(None) == 0

    def test_sessions_to_max(self):
        assert get_sessions_to_max(1) == SESSIONS_TO_CAP - 1
        assert get_sessions_to_max(SESSIONS_TO_CAP) == 0
        assert get_sessions_to_max(500) == 0
        assert get_sessions_to_max(-4) == SESSIONS_TO_CAP


class TestDisplayHelpers:

    def test_format(self):
        assert format_understanding_level(45) == "45%"
        assert format_understanding_level(45.0) == "45%"
        assert format_understanding_level(47.5) == "47.5%"

    @pytest.mark.parametrize("level,stage,index", [
        (0, "Not started", 0),
        (25, "New", 1),
        (30, "Getting to know you", 2),
        (44.9, "Getting to know you", 2),
        (45, "Building connection", 3),
        (60, "Deep understanding", 4),
        (70, "Deep connection", 5),
        (75, "Deep connection", 5),
    ])
    def test_stages(self, level, stage, index):
        assert get_understanding_stage(level) == stage
        assert get_stage_index(level) == index

    def test_stats_block(self):
        stats = build_understanding_stats(10)
        assert stats == {
            "understanding_level": 55.0,
            "formatted_level": "55%",
            "total_sessions": 10,
            "next_session_bonus": 0.5,
            "sessions_to_max": SESSIONS_TO_CAP - 10,
            "max_level": 75,
            "level_progress": 73,
            "stage": "Building connection",
            "stage_index": 3,
        }

    def test_stats_for_new_user(self):
        stats = build_understanding_stats(0)
        assert stats["understanding_level"] == 25
        assert stats["level_progress"] == 33
        assert stats["total_sessions"] == 0

    def test_constants(self):
        assert UNDERSTANDING_CONSTANTS["MAX_LEVEL"] == 75
        assert UNDERSTANDING_CONSTANTS["BASE_LEVEL"] == 25
        assert UNDERSTANDING_CONSTANTS["TIER_INCREMENTS"]["SESSION_2"] == 10
        assert len(UNDERSTANDING_CONSTANTS["STAGES"]) == 6
