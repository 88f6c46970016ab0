"""
Quality Score aggregation.

Formula, per category:

    Score = (Σ(NormalizedValue × Weight) / TotalPossibleWeight) × ConsistencyMultiplier

Active habits without a log for the day still count toward the total weight,
so a missed habit pulls its category down. Scores are not clamped after the
multiplier and can exceed 1.0.
"""

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable

from .models import (
    Category,
    CategoryDetail,
    DailyLog,
    DailyQualityScores,
    Habit,
    HabitWithLog,
    NormalizationConfig,
    ScoreCalculationResult,
)
from .normalizer import normalize, round_half_up
from .streaks import DateLike, calculate_consistency_multiplier, calculate_streak, to_date

logger = logging.getLogger(__name__)


def calculate_daily_scores(
    habits: Iterable[HabitWithLog], consistency_multiplier: float = 1.0
) -> ScoreCalculationResult:
    """
    Calculate category and overall scores for one day.

    Args:
        habits: Habits paired with their log for the day (log may be None)
        consistency_multiplier: Streak bonus applied to every category

    Returns:
        ScoreCalculationResult with one detail entry per category
    """
    habits = list(habits)
    category_scores = {category: 0.0 for category in Category}
    details = []

    for category in Category:
        category_habits = [
            h for h in habits if h.habit.category == category and h.habit.is_active
        ]

        if not category_habits:
            details.append(CategoryDetail(category=category))
            continue

        total_weight = 0
        weighted_sum = 0.0

        for entry in category_habits:
            weight = entry.habit.weight
            total_weight += weight

            # No log: contribution is 0
            if entry.log is not None:
                normalized = normalize(
                    NormalizationConfig(
                        goal_type=entry.habit.goal_type,
                        goal_value=entry.habit.goal_value,
                        raw_value=entry.log.raw_value,
                    )
                )
                weighted_sum += normalized.normalized_value * weight

        raw_score = weighted_sum / total_weight if total_weight > 0 else 0.0
        category_scores[category] = round_half_up(raw_score * consistency_multiplier, 3)

        details.append(
            CategoryDetail(
                category=category,
                total_weight=total_weight,
                weighted_sum=weighted_sum,
                habit_count=len(category_habits),
            )
        )

    # Average over categories that have at least one habit
    active = [d.category for d in details if d.habit_count > 0]
    overall_score = (
        sum(category_scores[c] for c in active) / len(active) if active else 0.0
    )

    return ScoreCalculationResult(
        category_scores=category_scores,
        overall_score=round_half_up(overall_score, 3),
        consistency_multiplier=consistency_multiplier,
        details=details,
    )


def generate_scores_for_date_range(
    habits: list[Habit],
    logs: Iterable[DailyLog],
    start_date: DateLike,
    end_date: DateLike,
) -> list[DailyQualityScores]:
    """
    Generate daily quality scores for every day from start to end (inclusive).

    One consistency multiplier is used for the whole range, derived from the
    current streak as of the end date.
    """
    start, end = to_date(start_date), to_date(end_date)

    logs_by_date: dict[date, dict[str, DailyLog]] = defaultdict(dict)
    for log in logs:
        logs_by_date[to_date(log.date)][log.habit_id] = log

    streak_info = calculate_streak(logs_by_date.keys(), end)
    consistency_multiplier = calculate_consistency_multiplier(streak_info.current_streak)

    logger.debug(
        f"Scoring {start} to {end} for {len(habits)} habits "
        f"(streak {streak_info.current_streak}, multiplier {consistency_multiplier})"
    )

    scores = []
    day = start
    while day <= end:
        day_logs = logs_by_date.get(day, {})
        habits_with_logs = [HabitWithLog(habit=h, log=day_logs.get(h.id)) for h in habits]

        result = calculate_daily_scores(habits_with_logs, consistency_multiplier)

        scores.append(
            DailyQualityScores(
                date=day,
                vitality=result.category_scores[Category.VITALITY],
                focus=result.category_scores[Category.FOCUS],
                discipline=result.category_scores[Category.DISCIPLINE],
                social=result.category_scores[Category.SOCIAL],
                overall=result.overall_score,
                consistency_multiplier=consistency_multiplier,
            )
        )
        day += timedelta(days=1)

    return scores
