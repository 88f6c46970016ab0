"""Tests for value normalization."""

import pytest

from quantalyze.analytics.models import GoalType, NormalizationConfig
from quantalyze.analytics.normalizer import (
    calculate_average_normalized,
    normalize,
    normalize_values,
    parse_duration_string,
    parse_leading_float,
    round_half_up,
)


def norm(goal_type, raw_value, goal_value=None):
    return normalize(
        NormalizationConfig(goal_type=goal_type, goal_value=goal_value, raw_value=raw_value)
    )


@pytest.mark.parametrize("raw", ["yes", "YES ", "y", "true", "1", "done", "Completed", "✓", "✔", "x"])
def test_binary_affirmative_tokens(raw):
    assert norm(GoalType.BINARY, raw).normalized_value == 1.0


@pytest.mark.parametrize("raw", ["no", "N", "false", "0", "", "  ", "skip", "skipped", "-"])
def test_binary_negative_tokens(raw):
    assert norm(GoalType.BINARY, raw).normalized_value == 0.0


def test_binary_booleans_and_numbers():
    assert norm(GoalType.BINARY, True).normalized_value == 1.0
    assert norm(GoalType.BINARY, False).normalized_value == 0.0
    assert norm(GoalType.BINARY, 3).normalized_value == 1.0
    assert norm(GoalType.BINARY, 0).normalized_value == 0.0


def test_binary_renormalization_is_idempotent():
    for value in (0.0, 1.0):
        once = norm(GoalType.BINARY, value).normalized_value
        assert norm(GoalType.BINARY, once).normalized_value == once == value


def test_number_ratio_and_clamp():
    result = norm(GoalType.NUMBER, 8000, goal_value=10000)
    assert result.normalized_value == 0.8
    assert result.percentage == 80
    assert result.raw_value == 8000

    assert norm(GoalType.NUMBER, 12000, goal_value=10000).normalized_value == 1.0


def test_number_string_with_thousands_separator():
    result = norm(GoalType.NUMBER, "8,000", goal_value=10000)
    assert result.raw_value == 8000
    assert result.normalized_value == 0.8


def test_number_parses_leading_number():
    assert norm(GoalType.NUMBER, "5000 steps", goal_value=10000).normalized_value == 0.5


def test_number_without_goal_falls_back_to_binary():
    assert norm(GoalType.NUMBER, 42).normalized_value == 1.0
    assert norm(GoalType.NUMBER, 0, goal_value=0).normalized_value == 0.0
    assert norm(GoalType.NUMBER, 5, goal_value=-3).normalized_value == 1.0


def test_garbage_degrades_to_zero():
    assert norm(GoalType.NUMBER, "lots", goal_value=10).normalized_value == 0.0
    assert norm(GoalType.NUMBER, None, goal_value=10).raw_value == 0
    assert norm(GoalType.NUMBER, float("nan"), goal_value=10).normalized_value == 0.0
    assert norm(GoalType.NUMBER, "nan", goal_value=10).normalized_value == 0.0
    assert norm(GoalType.DURATION, "whenever", goal_value=60).normalized_value == 0.0


def test_unknown_goal_type_scores_zero():
    assert norm("streak", "yes").normalized_value == 0.0


def test_goal_type_accepts_plain_strings():
    assert norm("number", 50, goal_value=100).normalized_value == 0.5


def test_negative_values_do_not_go_below_zero():
    result = norm(GoalType.NUMBER, -5, goal_value=10)
    assert result.normalized_value == 0.0
    assert result.raw_value == -5


def test_rounding_to_three_decimals():
    result = norm(GoalType.NUMBER, 1, goal_value=3)
    assert result.normalized_value == 0.333
    assert result.percentage == 33

    assert norm(GoalType.NUMBER, 2, goal_value=3).normalized_value == 0.667


def test_duration_colon_format():
    result = norm(GoalType.DURATION, "1:30")
    assert result.raw_value == 90
    assert result.normalized_value == 1.0


def test_duration_hours_and_minutes_clamped():
    result = norm(GoalType.DURATION, "1h 30m", goal_value=60)
    assert result.raw_value == 90
    assert result.normalized_value == 1.0


def test_duration_partial_goal():
    assert norm(GoalType.DURATION, "45 mins", goal_value=60).normalized_value == 0.75


@pytest.mark.parametrize(
    "text, minutes",
    [
        ("1:30", 90),
        ("0:45", 45),
        ("1:30:30", 90.5),
        ("1h 30m", 90),
        ("2 hours", 120),
        ("1.5h", 90),
        ("90 mins", 90),
        ("45 minutes", 45),
        ("45", 45),
        ("", 0),
        ("soon", 0),
    ],
)
def test_parse_duration_string(text, minutes):
    assert parse_duration_string(text) == pytest.approx(minutes)


def test_parse_leading_float():
    assert parse_leading_float("8000steps") == 8000
    assert parse_leading_float(" 3.5 ") == 3.5
    assert parse_leading_float("-2") == -2
    assert parse_leading_float("abc") is None


def test_round_half_up():
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(2.5, 0) == 3
    assert round_half_up(0.8, 3) == 0.8


def test_batch_helpers():
    results = normalize_values(["yes", "no", "yes"], GoalType.BINARY)
    assert [r.normalized_value for r in results] == [1.0, 0.0, 1.0]

    average = calculate_average_normalized([5000, 10000], GoalType.NUMBER, 10000)
    assert average == pytest.approx(0.75)
    assert calculate_average_normalized([], GoalType.NUMBER, 10000) == 0.0
