"""
TEST SUITE: Square-Root-Decay Understanding Level
=================================================

Module: companion_policy/understanding/sqrt_decay.py
"""

import pytest

from companion_policy.understanding import (
    calculate_sqrt_understanding_level,
    calculate_understanding_level,
)


class TestSqrtCurve:

    @pytest.mark.parametrize("sessions,expected", [
        (1, 35), (2, 42), (3, 47), (4, 52), (5, 56), (6, 60),
        (7, 63), (8, 66), (9, 69), (10, 72), (11, 75), (50, 75),
    ])
    def test_known_values(self, sessions, expected):
        assert calculate_sqrt_understanding_level(sessions) == expected

    @pytest.mark.parametrize("value", [0, -1, None, "10", float("nan"), True])
    def test_invalid_or_non_positive_gives_base(self, value):
        assert calculate_sqrt_understanding_level(value) == 25

    def test_saturation_shortcut(self):
        assert calculate_sqrt_understanding_level(1000) == 75
        assert calculate_sqrt_understanding_level(10 ** 9) == 75

    def test_returns_int(self):
        assert isinstance(calculate_sqrt_understanding_level(3), int)

    def test_non_decreasing_and_bounded(self):
        previous = 25
        for n in range(0, 200):
            level = calculate_sqrt_understanding_level(n)
            assert 25 <= level <= 75
            assert level >= previous
            previous = level


class TestCurvesAreDistinct:
    """The two curves share a name in the product but not their values"""

    def test_differ_for_early_sessions(self):
        assert calculate_sqrt_understanding_level(1) != calculate_understanding_level(1)
        assert calculate_sqrt_understanding_level(10) != calculate_understanding_level(10)

    def test_agree_on_bounds(self):
        assert calculate_sqrt_understanding_level(0) == calculate_understanding_level(0) == 25
        assert calculate_sqrt_understanding_level(5000) == calculate_understanding_level(5000) == 75
