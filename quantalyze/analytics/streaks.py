"""Streak tracking and the consistency multiplier."""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from .models import StreakInfo

logger = logging.getLogger(__name__)

# (minimum streak days, multiplier), checked from the highest threshold down
CONSISTENCY_THRESHOLDS = (
    (60, 1.20),
    (30, 1.15),
    (14, 1.10),
    (7, 1.05),
)
BASE_MULTIPLIER = 1.0

DateLike = Union[date, datetime, str]

_ONE_DAY = timedelta(days=1)


def to_date(value: DateLike) -> date:
    """Convert a date, datetime or ISO "YYYY-MM-DD" string to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def calculate_streak(
    dates: Iterable[DateLike], reference_date: Optional[DateLike] = None
) -> StreakInfo:
    """
    Calculate streak information from the days with any activity.

    The current streak is only alive if the last active day is the reference
    day or the day before it.

    Args:
        dates: Days with at least one log, in any order (duplicates allowed)
        reference_date: Day to measure from, defaults to today

    Returns:
        StreakInfo with current/longest streak and last active date

    Example:
        dates = 2024-01-01, 2024-01-02, 2024-01-03, reference = 2024-01-03
        -> current 3, longest 3
    """
    sorted_dates = sorted({to_date(d) for d in dates})
    if not sorted_dates:
        return StreakInfo(current_streak=0, longest_streak=0, last_active_date=None)

    today = to_date(reference_date) if reference_date is not None else date.today()
    last_active_date = sorted_dates[-1]

    current_streak = 0
    if (today - last_active_date).days <= 1:
        # Count consecutive days backwards from the last active day
        current_streak = 1
        for i in range(len(sorted_dates) - 2, -1, -1):
            if sorted_dates[i + 1] - sorted_dates[i] == _ONE_DAY:
                current_streak += 1
            else:
                break

    longest_streak = 1
    run = 1
    for previous, current in zip(sorted_dates, sorted_dates[1:]):
        if current - previous == _ONE_DAY:
            run += 1
            longest_streak = max(longest_streak, run)
        else:
            run = 1

    logger.debug(
        f"Streak over {len(sorted_dates)} active days: "
        f"current={current_streak}, longest={longest_streak}"
    )

    return StreakInfo(
        current_streak=current_streak,
        longest_streak=max(longest_streak, current_streak),
        last_active_date=last_active_date,
    )


def calculate_consistency_multiplier(streak_days: int) -> float:
    """
    Bonus factor for keeping a streak.

    Base: 1.0
    7+ days: 1.05
    14+ days: 1.10
    30+ days: 1.15
    60+ days: 1.20
    """
    for minimum_days, multiplier in CONSISTENCY_THRESHOLDS:
        if streak_days >= minimum_days:
            return multiplier
    return BASE_MULTIPLIER
