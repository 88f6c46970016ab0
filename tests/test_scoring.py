"""Tests for daily score aggregation, heatmap levels and bucket summaries."""

from datetime import date

import pytest

from quantalyze.analytics.buckets import (
    build_bucket_scores,
    get_bucket_color,
    get_bucket_label,
    get_default_habits,
)
from quantalyze.analytics.heatmap import score_to_level, scores_to_heatmap_levels
from quantalyze.analytics.models import (
    Category,
    DailyLog,
    GoalType,
    Habit,
    HabitWithLog,
)
from quantalyze.analytics.scoring import calculate_daily_scores, generate_scores_for_date_range

DAY = date(2024, 1, 3)


def habit(habit_id, category, weight=3, goal_type=GoalType.BINARY, goal_value=None, active=True):
    return Habit(
        id=habit_id,
        name=habit_id,
        category=category,
        weight=weight,
        goal_type=goal_type,
        goal_value=goal_value,
        is_active=active,
    )


def logged(h, value, day=DAY):
    return HabitWithLog(habit=h, log=DailyLog(habit_id=h.id, date=day, raw_value=value))


def test_no_habits_scores_zero():
    result = calculate_daily_scores([])
    assert result.overall_score == 0
    assert all(score == 0 for score in result.category_scores.values())
    assert [d.habit_count for d in result.details] == [0, 0, 0, 0]


def test_weighted_average_within_category():
    sleep = habit("sleep", Category.VITALITY, weight=4)
    steps = habit("steps", Category.VITALITY, weight=1, goal_type=GoalType.NUMBER, goal_value=10000)

    result = calculate_daily_scores([logged(sleep, 1), logged(steps, 5000)])

    # (1.0 * 4 + 0.5 * 1) / 5
    assert result.category_scores[Category.VITALITY] == 0.9
    detail = result.detail_for(Category.VITALITY)
    assert detail.total_weight == 5
    assert detail.weighted_sum == pytest.approx(4.5)
    assert detail.habit_count == 2


def test_missing_log_counts_toward_total_weight():
    read = habit("read", Category.FOCUS, weight=2)
    code = habit("code", Category.FOCUS, weight=2)

    result = calculate_daily_scores([logged(read, 1), HabitWithLog(habit=code)])

    assert result.category_scores[Category.FOCUS] == 0.5
    assert result.detail_for(Category.FOCUS).total_weight == 4


def test_inactive_habits_are_ignored():
    active = habit("journal", Category.DISCIPLINE)
    paused = habit("cold shower", Category.DISCIPLINE, active=False)

    result = calculate_daily_scores([logged(active, 1), HabitWithLog(habit=paused)])

    assert result.category_scores[Category.DISCIPLINE] == 1.0
    assert result.detail_for(Category.DISCIPLINE).habit_count == 1


def test_overall_averages_only_categories_with_habits():
    gym = habit("gym", Category.VITALITY)
    call = habit("call mom", Category.SOCIAL)

    result = calculate_daily_scores([logged(gym, 1), HabitWithLog(habit=call)])

    assert result.category_scores[Category.VITALITY] == 1.0
    assert result.category_scores[Category.SOCIAL] == 0.0
    assert result.overall_score == 0.5


def test_multiplier_is_applied_and_not_clamped():
    gym = habit("gym", Category.VITALITY)

    result = calculate_daily_scores([logged(gym, "yes")], consistency_multiplier=1.2)

    assert result.category_scores[Category.VITALITY] == 1.2
    assert result.overall_score == 1.2
    assert result.consistency_multiplier == 1.2


def test_overall_is_never_negative():
    steps = habit("steps", Category.VITALITY, goal_type=GoalType.NUMBER, goal_value=100)
    result = calculate_daily_scores([logged(steps, -50)])
    assert result.overall_score >= 0


def test_generate_scores_for_date_range():
    gym = habit("gym", Category.VITALITY)
    read = habit("read", Category.FOCUS, goal_type=GoalType.DURATION, goal_value=30)
    logs = [
        DailyLog(habit_id="gym", date=date(2024, 1, 1), raw_value=1),
        DailyLog(habit_id="read", date=date(2024, 1, 1), raw_value=15),
        DailyLog(habit_id="gym", date=date(2024, 1, 3), raw_value=1),
        DailyLog(habit_id="read", date=date(2024, 1, 3), raw_value=30),
    ]

    scores = generate_scores_for_date_range([gym, read], logs, "2024-01-01", "2024-01-03")

    assert [s.date for s in scores] == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]
    assert scores[0].vitality == 1.0
    assert scores[0].focus == 0.5
    assert scores[0].overall == 0.75
    assert scores[1].overall == 0.0
    assert scores[2].overall == 1.0
    assert all(s.consistency_multiplier == 1.0 for s in scores)


def test_generate_scores_uses_streak_multiplier():
    gym = habit("gym", Category.VITALITY)
    logs = [DailyLog(habit_id="gym", date=date(2024, 1, d), raw_value=1) for d in range(1, 8)]

    scores = generate_scores_for_date_range([gym], logs, date(2024, 1, 7), date(2024, 1, 7))

    assert len(scores) == 1
    assert scores[0].consistency_multiplier == 1.05
    assert scores[0].vitality == 1.05


def test_generate_scores_empty_range():
    assert generate_scores_for_date_range([], [], date(2024, 1, 5), date(2024, 1, 1)) == []


@pytest.mark.parametrize(
    "score, level",
    [
        (0, 0),
        (0.001, 1),
        (0.24999, 1),
        (0.25, 2),
        (0.49, 2),
        (0.5, 3),
        (0.74, 3),
        (0.75, 4),
        (1.0, 4),
        (1.2, 4),
    ],
)
def test_score_to_level(score, level):
    assert score_to_level(score) == level


def test_scores_to_heatmap_levels():
    gym = habit("gym", Category.VITALITY)
    logs = [DailyLog(habit_id="gym", date=date(2024, 1, 1), raw_value=1)]
    scores = generate_scores_for_date_range([gym], logs, date(2024, 1, 1), date(2024, 1, 2))

    points = scores_to_heatmap_levels(scores)

    assert [(p.date, p.value, p.level) for p in points] == [
        (date(2024, 1, 1), 1.0, 4),
        (date(2024, 1, 2), 0.0, 0),
    ]


def test_bucket_metadata():
    assert get_bucket_label(Category.SOCIAL) == "Social/Legacy"
    assert get_bucket_color(Category.FOCUS) == "#3b82f6"
    assert "Cold shower" in get_default_habits(Category.DISCIPLINE)


def test_build_bucket_scores():
    sleep = habit("sleep", Category.VITALITY, weight=2)
    walk = habit("walk", Category.VITALITY, weight=2)
    result = calculate_daily_scores([logged(sleep, 1), HabitWithLog(habit=walk)], 1.1)

    buckets = {b.category: b for b in build_bucket_scores(result)}

    assert list(buckets) == list(Category)
    vitality = buckets[Category.VITALITY]
    assert vitality.label == "Vitality"
    assert vitality.score == 0.55
    assert vitality.completion_rate == 50
    assert vitality.habit_count == 2
    assert buckets[Category.FOCUS].habit_count == 0
    assert buckets[Category.FOCUS].completion_rate == 0
